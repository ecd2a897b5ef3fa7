"""Centralized logging configuration for the garden.

Library modules only ever call ``logging.getLogger(__name__)``; handlers and
levels are installed once by the entry point through ``configure_logging``.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable

from garden.exceptions import ConfigurationError

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Terse format for interactive command-line use
CLI_FORMAT = "%(levelname)s:%(name)s:%(message)s"

LOG_LEVEL_ENV = "GARDEN_LOG_LEVEL"


def resolve_level(level: str | None = None) -> int:
    """Turn an explicit level, ``GARDEN_LOG_LEVEL`` or the INFO default into a number.

    Raises:
        ConfigurationError: If the name is not a standard logging level
    """
    raw_level = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    name = (raw_level or "INFO").strip().upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level {raw_level!r}")
    return resolved


def configure_logging(
    *,
    level: str | None = None,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    extra_loggers: Iterable[str] | None = None,
) -> logging.Logger:
    """Configure application logging.

    Args:
        level: Optional explicit log level. Falls back to ``GARDEN_LOG_LEVEL`` env
            var or INFO when not provided.
        format: Log format string.
        datefmt: Date format string.
        extra_loggers: Additional logger names (e.g. the CLI module) to align
            with the configured level.

    Returns:
        The ``garden`` package logger.
    """
    resolved_level = resolve_level(level)
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    app_logger = logging.getLogger("garden")
    app_logger.setLevel(resolved_level)
    for logger_name in extra_loggers or ():
        logging.getLogger(logger_name).setLevel(resolved_level)

    app_logger.debug("Logging configured at %s", logging.getLevelName(resolved_level))
    return app_logger
