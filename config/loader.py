# config/loader.py
"""
Configuration reload utilities for the StoryGraph core.

The main public function is ``reload_settings()`` which:
1. Reloads environment variables from ``.env`` (via ``dotenv.load_dotenv``).
2. Re-creates the ``StoryGraphSettings`` instance so that any changed values apply.
3. Updates the symbols exported by ``config`` (the module-level constants) to
   reflect the new values.
"""

from __future__ import annotations

import structlog
from dotenv import load_dotenv
from pydantic import ValidationError

logger = structlog.get_logger(__name__)


def reload_settings() -> bool:
    """
    Reload configuration from the environment and refresh the ``config`` package.

    Returns ``True`` on success, ``False`` when the new environment does not
    validate (the previous settings stay in place).
    """
    import config as config_pkg
    from config import settings_mod

    load_dotenv(override=True)

    try:
        new_settings = settings_mod.StoryGraphSettings()
    except ValidationError as exc:
        logger.error("Configuration reload failed; keeping previous settings", error=str(exc))
        return False

    settings_mod.settings = new_settings
    config_pkg.settings = new_settings

    for field_name in settings_mod.StoryGraphSettings.model_fields:
        value = getattr(new_settings, field_name)
        setattr(config_pkg, field_name, value)

    logger.info("Configuration reloaded")
    return True
