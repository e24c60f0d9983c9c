"""
Logging setup for the ayah player.

Every module logs through ``logging.getLogger(__name__)``; configuring the
``ayah_player`` logger here covers the whole package.
"""

import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME = "ayah_player"


def configure_logging(
    level: int | str = logging.INFO,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Args:
        level: Logging level, either a number or a name such as ``"DEBUG"``
        format_string: Log format string (default: DEFAULT_FORMAT)
        stream: Output stream (default: sys.stderr)

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
