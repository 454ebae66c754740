"""Centralized logging configuration for buildmatrix.

All modules obtain loggers through `get_logger(__name__)`; they inherit the
level and handler of the package root logger "buildmatrix". The root logger
defaults to WARNING so that embedding applications only see problems unless
they opt in, e.g. via `enable_debug_logging()` or the BUILDMATRIX_LOG_LEVEL
environment variable.
"""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "buildmatrix"

#: Environment variable consulted for the initial root level.
LOG_LEVEL_ENV = "BUILDMATRIX_LOG_LEVEL"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Flag to track if we've already set up the root logger
_ROOT_LOGGER_CONFIGURED = False


def _level_from_env(default: int) -> int:
    """Return the level named in LOG_LEVEL_ENV, or `default` if unset/unknown."""
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach a single handler to the "buildmatrix" root logger.

    Only the first call has an effect; later calls are ignored until
    `reset_logging()` is used.

    Args:
        level: Logging level. Defaults to BUILDMATRIX_LOG_LEVEL or WARNING.
        format_string: Custom format string (optional).
        handler: Custom handler (optional, defaults to a stderr StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level if level is not None else _level_from_env(logging.WARNING))
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger that inherits the buildmatrix root configuration.

    Args:
        name: Logger name, typically `__name__` of the calling module.

    Returns:
        Logger instance with level NOTSET so the root level applies.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the root logger and its handlers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    setup_root_logger()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Log every expansion stage (record counts, excluded records)."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Return to WARNING level."""
    set_global_log_level(logging.WARNING)


def reset_logging() -> None:
    """Forget the root configuration (mainly for testing)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
