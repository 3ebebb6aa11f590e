# utils/text_processing.py
import re
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

_SMART_QUOTES = str.maketrans({"’": "'", "‘": "'", "“": '"', "”": '"'})


def normalize_entity_name(text: Any) -> str:
    """
    Clean an entity name or alias before it is used for matching.

    1. Normalizes smart quotes to straight quotes
    2. Collapses runs of whitespace
    3. Strips surrounding whitespace

    Non-string input yields an empty string.
    """
    if not isinstance(text, str):
        return ""
    text = text.translate(_SMART_QUOTES)
    return re.sub(r"\s+", " ", text).strip()


def coerce_field_text(value: Any) -> str | None:
    """Turn a node field value into scannable text.

    Strings are used as-is. Lists contribute their string items joined by single
    spaces; other items are ignored. Any other value returns ``None``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, list | tuple):
        return " ".join(item for item in value if isinstance(item, str))
    if value is not None:
        logger.debug("Skipping non-text field value", value_type=type(value).__name__)
    return None


def word_pattern(phrase: str, *, ignore_case: bool = True) -> re.Pattern[str]:
    """Compile a pattern matching ``phrase`` only where it is not inside a word.

    Lookarounds are used rather than ``\\b`` so phrases that start or end with
    punctuation (``"Dr."``) still match.
    """
    flags = re.IGNORECASE if ignore_case else 0
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", flags)


def replace_whole_word(text: str, old: str, new: str) -> tuple[str, int]:
    """Replace case-sensitive whole-word occurrences of ``old``.

    Possessive forms (``Alex's``, ``Alex’s``) keep their suffix. Both forms are
    rewritten in a single pass so a new name containing the old one is never
    rewritten twice.

    Returns:
        The rewritten text and the number of replacements made.
    """
    if not old or not text:
        return text, 0
    return word_pattern(old, ignore_case=False).subn(lambda _: new, text)


def truncate_for_log(s: str, limit: int = 80) -> str:
    """Return a truncated string for logging purposes."""
    if not isinstance(s, str):
        return ""
    return s if len(s) <= limit else s[:limit] + "..."
