# config/validator.py
"""
Configuration validation utilities for the StoryGraph core.

This module provides a single public function `validate_all()` that:
1. Reads the current `StoryGraphSettings` object (Pydantic already validated types).
2. Performs cross-field sanity checks that cannot be expressed purely with
   Pydantic field validators (confidence ranges and their precedence).
3. Returns a structured health report dictionary.

The report layout:

{
    "overall_health": "healthy" | "warning" | "error",
    "issues": {
        "errors":   [{ "field": "<field>", "message": "<msg>" }, ...],
        "warnings": [{ "field": "<field>", "message": "<msg>" }, ...],
        "info":     [{ "field": "<field>", "message": "<msg>" }, ...],
    }
}
"""

from __future__ import annotations

from config import settings_mod

_CONFIDENCE_FIELDS = [
    "MENTION_NAME_CONFIDENCE",
    "MENTION_ALIAS_CONFIDENCE",
    "MENTION_TITLE_CONFIDENCE",
    "MENTION_NAME_PART_CONFIDENCE",
]


def _add_issue(
    issues: dict[str, list[dict[str, str]]],
    severity: str,
    field: str,
    message: str,
) -> None:
    """Utility to append an issue entry to the report."""
    issues.setdefault(severity, []).append({"field": field, "message": message})


def validate_all() -> dict:
    """
    Validate the current configuration state.

    Returns a health-report dict with overall status and detailed issue lists.
    """
    current_settings = settings_mod.settings
    issues: dict[str, list[dict[str, str]]] = {"errors": [], "warnings": [], "info": []}

    # Mention confidences must be probabilities
    for name in _CONFIDENCE_FIELDS:
        value = getattr(current_settings, name)
        if not (0.0 <= value <= 1.0):
            _add_issue(
                issues,
                "errors",
                name,
                f"{name} = {value} is outside the allowed range 0.0-1.0.",
            )

    # Precedence: more specific patterns should never score below looser ones
    confidences = [getattr(current_settings, name) for name in _CONFIDENCE_FIELDS]
    for (higher_name, higher), (lower_name, lower) in zip(
        zip(_CONFIDENCE_FIELDS, confidences),
        zip(_CONFIDENCE_FIELDS[1:], confidences[1:]),
    ):
        if lower > higher:
            _add_issue(
                issues,
                "warnings",
                lower_name,
                f"{lower_name} ({lower}) exceeds {higher_name} ({higher}); "
                "looser matches would outrank more specific ones.",
            )

    if current_settings.MENTION_MIN_NAME_PART_LENGTH < 1:
        _add_issue(
            issues,
            "errors",
            "MENTION_MIN_NAME_PART_LENGTH",
            "MENTION_MIN_NAME_PART_LENGTH must be >= 1.",
        )

    if current_settings.EDGE_ID_PREFIX == current_settings.LEGACY_EDGE_ID_PREFIX:
        _add_issue(
            issues,
            "errors",
            "LEGACY_EDGE_ID_PREFIX",
            "LEGACY_EDGE_ID_PREFIX must differ from EDGE_ID_PREFIX so deterministic "
            "ids stay distinguishable from random ones.",
        )

    if not current_settings.MENTION_MATCH_NAME_PARTS:
        _add_issue(
            issues,
            "info",
            "MENTION_MATCH_NAME_PARTS",
            "Name-part matching is disabled; only full names, aliases and titles match.",
        )

    overall = "healthy"
    if issues["errors"]:
        overall = "error"
    elif issues["warnings"]:
        overall = "warning"

    return {
        "overall_health": overall,
        "issues": issues,
    }
