# utils/__init__.py
"""General utility functions for the StoryGraph core."""

from .text_processing import (
    coerce_field_text,
    normalize_entity_name,
    replace_whole_word,
    truncate_for_log,
    word_pattern,
)

__all__ = [
    "coerce_field_text",
    "normalize_entity_name",
    "replace_whole_word",
    "truncate_for_log",
    "word_pattern",
]
