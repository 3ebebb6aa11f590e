# core/logging_config.py
"""Configure StoryGraph logging sinks and formatting.

This module configures:
- Standard library logging handlers (console and optional rotating file).
- Rich console integration.
- Structured records emitted through structlog loggers across the codebase.

Notes:
    This module performs side-effectful logger configuration and should be called
    once at process startup via [`setup_storygraph_logging()`](core/logging_config.py:24).
"""

import logging as stdlib_logging
import logging.handlers
import os

import structlog
from rich.logging import RichHandler

import config


def setup_storygraph_logging() -> None:
    """Set up StoryGraph logging handlers and formatting.

    This configures:
    - Console logging in simple mode.
    - Rotating file logging when a log file is configured.
    - Rich console output when enabled.

    Notes:
        This function replaces the root logger handler list and is intended to be
        called once during application startup.
    """
    settings = config.settings
    root_logger = stdlib_logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(settings.LOG_LEVEL_STR)

    if settings.SIMPLE_LOGGING_MODE:
        stream_handler = stdlib_logging.StreamHandler()
        stream_handler.setLevel(settings.LOG_LEVEL_STR)
        stream_handler.setFormatter(config.simple_formatter)
        root_logger.addHandler(stream_handler)
        root_logger.info("Simple logging mode enabled: console only.")
    elif settings.LOG_FILE:
        log_path = os.path.join(settings.BASE_OUTPUT_DIR, settings.LOG_FILE)
        try:
            os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
            file_handler = stdlib_logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                mode="a",
                encoding="utf-8",
            )
        except OSError as e:
            console_handler_fallback = stdlib_logging.StreamHandler()
            console_handler_fallback.setFormatter(config.simple_formatter)
            root_logger.addHandler(console_handler_fallback)
            root_logger.error(
                f"Failed to configure file logging: {e}. Logging to console instead.",
                exc_info=True,
            )
        else:
            file_handler.setLevel(settings.LOG_LEVEL_STR)
            file_handler.setFormatter(config.simple_formatter)
            root_logger.addHandler(file_handler)
            root_logger.info(f"File logging enabled. Log file: {log_path}")

    if not settings.SIMPLE_LOGGING_MODE and settings.ENABLE_RICH_LOGGING:
        rich_handler = RichHandler(
            level=settings.LOG_LEVEL_STR,
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            show_time=False,  # Timestamp already in our formatter
            show_level=False,  # Level already in our formatter
        )
        rich_handler.setFormatter(config.rich_formatter)
        root_logger.addHandler(rich_handler)
    elif not any(
        isinstance(h, stdlib_logging.StreamHandler)
        and not isinstance(h, stdlib_logging.FileHandler)
        for h in root_logger.handlers
    ):
        stream_handler = stdlib_logging.StreamHandler()
        stream_handler.setLevel(settings.LOG_LEVEL_STR)
        stream_handler.setFormatter(config.simple_formatter)
        root_logger.addHandler(stream_handler)

    structlog.get_logger(__name__).info(
        "StoryGraph logging setup complete",
        log_level=stdlib_logging.getLevelName(root_logger.level),
    )
