"""Utility functions for circulation."""

import logging
import sys
from datetime import datetime, timezone
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def utc_now() -> datetime:
    """
    Return the current time as a timezone-aware UTC datetime.

    Example:
        >>> utc_now().tzinfo is timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def setup_logging(level: Union[str, int] = "WARNING", name: str = "circulation") -> logging.Logger:
    """
    Configure the package logger.

    Adds a single stream handler the first time it is called; later calls
    only adjust the level.

    Args:
        level: Level name (DEBUG, INFO, ...) or numeric level
        name: Logger to configure

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    if isinstance(level, str):
        log_level = getattr(logging, level.upper(), logging.WARNING)
    else:
        log_level = level
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger


def normalize(text: Optional[str]) -> str:
    """
    Lower-case and trim text for case-insensitive comparisons.

    Example:
        >>> normalize("  Clean Code ")
        'clean code'
        >>> normalize(None)
        ''
    """
    return (text or "").strip().lower()
