"""Expose StoryGraph configuration as stable module-level constants.

This package provides a facade over the Pydantic settings model defined in
[`config.settings`](config/settings.py:1). The primary API is the `settings`
singleton plus a set of module-level constants mirroring its fields.

Configuration precedence and lifecycle:
- On initial import, configuration is loaded by importing `config.settings`,
  which constructs the `settings` singleton.
- Values come from the process environment and may be sourced from a `.env` file.
- [`reload()`](config/__init__.py:81) re-reads `.env` with override enabled, then
  replaces this module's exported values (see `config.loader.reload_settings()`).

Notes:
    New code should prefer the `settings` object; the constants are read once per
    import or reload.
"""

from typing import Any

# Bound before `settings` below shadows the submodule name on this package.
from . import settings as settings_mod
from .settings import (
    rich_formatter as rich_formatter,
)
from .settings import (
    settings as settings,
)
from .settings import (
    simple_formatter as simple_formatter,
)

BASE_OUTPUT_DIR = settings.BASE_OUTPUT_DIR
EDGE_ID_PREFIX = settings.EDGE_ID_PREFIX
ENABLE_RICH_LOGGING = settings.ENABLE_RICH_LOGGING
GRAPH_DATA_DIR = settings.GRAPH_DATA_DIR
GRAPH_DOCUMENT_FILE = settings.GRAPH_DOCUMENT_FILE
LEGACY_EDGE_ID_PREFIX = settings.LEGACY_EDGE_ID_PREFIX
LOG_DATE_FORMAT = settings.LOG_DATE_FORMAT
LOG_FILE = settings.LOG_FILE
LOG_FORMAT = settings.LOG_FORMAT
LOG_LEVEL_STR = settings.LOG_LEVEL_STR
MENTION_ALIAS_CONFIDENCE = settings.MENTION_ALIAS_CONFIDENCE
MENTION_MATCH_NAME_PARTS = settings.MENTION_MATCH_NAME_PARTS
MENTION_MIN_NAME_PART_LENGTH = settings.MENTION_MIN_NAME_PART_LENGTH
MENTION_NAME_CONFIDENCE = settings.MENTION_NAME_CONFIDENCE
MENTION_NAME_PART_CONFIDENCE = settings.MENTION_NAME_PART_CONFIDENCE
MENTION_TITLE_CONFIDENCE = settings.MENTION_TITLE_CONFIDENCE
RENAME_FORCE_REBUILD = settings.RENAME_FORCE_REBUILD
SIMPLE_LOGGING_MODE = settings.SIMPLE_LOGGING_MODE


def get(key: str) -> Any:
    """Return the value of a configuration attribute from `settings`.

    Args:
        key: Attribute name on the `settings` singleton.

    Returns:
        The current value of the named attribute.

    Raises:
        AttributeError: If `key` is not a valid attribute on `settings`.
    """
    return getattr(settings, key)


def set(key: str, value: Any) -> None:
    """Set a configuration attribute on `settings` at runtime.

    This mutates the in-memory settings instance and does not persist to `.env`.
    The module-level constant of the same name is updated as well.

    Raises:
        AttributeError: If `key` is not a valid attribute on `settings`.
    """
    if key not in type(settings).model_fields:
        raise AttributeError(f"Unknown configuration key: {key}")
    setattr(settings, key, value)
    globals()[key] = value


def reload() -> bool:
    """Reload configuration and refresh this package's exported constants.

    This delegates to [`config.loader.reload_settings()`](config/loader.py:21), which
    re-reads `.env` with override enabled.

    Returns:
        True when the settings were rebuilt, False if the loader failed.
    """
    from .loader import reload_settings

    return reload_settings()
