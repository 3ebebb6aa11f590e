# processing/mention_extraction.py
"""
Entity mention extraction from free text.

The rebuild engine depends only on the `MentionExtractor` protocol: a pure
`extract(text, entities)` call that reports every occurrence it finds, without
mutating its inputs or keeping state between calls. `NameMatchExtractor` is the
default policy and can be swapped for any object with the same method.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

import config
from models.kg_constants import NAME_TITLES
from models.kg_models import GraphNode
from utils.text_processing import coerce_field_text, normalize_entity_name, word_pattern

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EntityInfo:
    """Flattened view of a mentionable node (Character, Location, Object)."""

    id: str
    type: str
    name: str
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class MentionMatch:
    entity_id: str
    entity_type: str
    matched_text: str
    confidence: float
    start: int
    end: int


class MentionExtractor(Protocol):
    def extract(self, text: str, entities: Sequence[EntityInfo]) -> list[MentionMatch]: ...


@functools.lru_cache(maxsize=2048)
def _compile(phrase: str) -> re.Pattern[str]:
    return word_pattern(phrase, ignore_case=True)


_TITLE_RE = re.compile(
    r"^(" + "|".join(re.escape(t) for t in NAME_TITLES) + r")\s+(.+)$",
    re.IGNORECASE,
)


class NameMatchExtractor:
    """Case-insensitive, word-bounded name and alias matching.

    Variants are tried in precedence order for each entity:

    1. full name
    2. each alias
    3. "Title Surname" for names starting with a known honorific
       ("Captain James Morrison" -> "Captain Morrison")
    4. first and last name part of multi-word names, when enabled and long enough

    A span already claimed by a higher-precedence variant of the same entity is not
    reported again, so "Alex Smith" yields one full-name match and no extra "Alex"
    match. Different entities may match overlapping spans.
    """

    def __init__(
        self,
        *,
        name_confidence: float | None = None,
        alias_confidence: float | None = None,
        title_confidence: float | None = None,
        name_part_confidence: float | None = None,
        match_name_parts: bool | None = None,
        min_name_part_length: int | None = None,
    ) -> None:
        s = config.settings
        self.name_confidence = s.MENTION_NAME_CONFIDENCE if name_confidence is None else name_confidence
        self.alias_confidence = s.MENTION_ALIAS_CONFIDENCE if alias_confidence is None else alias_confidence
        self.title_confidence = s.MENTION_TITLE_CONFIDENCE if title_confidence is None else title_confidence
        self.name_part_confidence = (
            s.MENTION_NAME_PART_CONFIDENCE if name_part_confidence is None else name_part_confidence
        )
        self.match_name_parts = s.MENTION_MATCH_NAME_PARTS if match_name_parts is None else match_name_parts
        self.min_name_part_length = (
            s.MENTION_MIN_NAME_PART_LENGTH if min_name_part_length is None else min_name_part_length
        )

    def variants(self, entity: EntityInfo) -> list[tuple[str, float]]:
        """Search phrases for an entity with their confidence, highest precedence first."""
        variants: list[tuple[str, float]] = []
        seen: set[str] = set()

        def add(phrase: str, confidence: float) -> None:
            phrase = normalize_entity_name(phrase)
            if phrase and phrase.lower() not in seen:
                seen.add(phrase.lower())
                variants.append((phrase, confidence))

        name = normalize_entity_name(entity.name)
        add(name, self.name_confidence)
        for alias in entity.aliases:
            add(alias, self.alias_confidence)

        parts = name.split()
        title_match = _TITLE_RE.match(name)
        if title_match:
            title, rest = title_match.group(1), title_match.group(2)
            add(f"{title} {rest.split()[-1]}", self.title_confidence)
            parts = rest.split()

        if self.match_name_parts and len(name.split()) > 1:
            for part in (parts[0], parts[-1]) if parts else ():
                if len(part) >= self.min_name_part_length:
                    add(part, self.name_part_confidence)

        return variants

    def extract(self, text: str, entities: Sequence[EntityInfo]) -> list[MentionMatch]:
        if not text or not entities:
            return []

        found: list[tuple[int, int, MentionMatch]] = []
        for index, entity in enumerate(entities):
            claimed: list[tuple[int, int]] = []
            for phrase, confidence in self.variants(entity):
                for match in _compile(phrase).finditer(text):
                    start, end = match.span()
                    if any(start < c_end and c_start < end for c_start, c_end in claimed):
                        continue
                    claimed.append((start, end))
                    found.append(
                        (
                            start,
                            index,
                            MentionMatch(
                                entity_id=entity.id,
                                entity_type=entity.type,
                                matched_text=match.group(0),
                                confidence=confidence,
                                start=start,
                                end=end,
                            ),
                        )
                    )

        found.sort(key=lambda item: (item[0], item[1]))
        return [mention for _, _, mention in found]


def default_extractor() -> NameMatchExtractor:
    """Extractor used when a caller does not inject one."""
    return NameMatchExtractor()


def extract_text_from_node(node: GraphNode | Mapping[str, Any], fields: Sequence[str]) -> str:
    """Join the scannable text of the given fields with single spaces.

    String fields are used as-is, string lists contribute their string items, and
    any other value is skipped.
    """
    texts = []
    for field in fields:
        value = node.get_field(field) if isinstance(node, GraphNode) else node.get(field)
        text = coerce_field_text(value)
        if text:
            texts.append(text)
    return " ".join(texts)
