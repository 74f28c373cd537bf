"""
Logging helpers.

Library modules log through ``logging.getLogger(__name__)`` and never
install handlers themselves; applications call setup_logging() once.
"""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "CLOTHOIDS_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

ROOT_LOGGER_NAME = "clothoids"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_log_level() -> int:
    """Get log level from the CLOTHOIDS_LOG_LEVEL environment variable."""
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def setup_logging(level: Optional[int] = None,
                  format_str: Optional[str] = None) -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Log level (default: from env or WARNING)
        format_str: Log format string

    Returns:
        The configured ``clothoids`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_clothoids_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_str or DEFAULT_FORMAT))
    handler._clothoids_handler = True
    logger.addHandler(handler)
    logger.setLevel(level if level is not None else get_log_level())
    return logger
