"""Logging setup for the command line entry point."""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Union[str, int] = logging.WARNING) -> logging.Logger:
    """Attach a single stderr handler to the huvudbok logger.

    Library modules only create loggers. Calling this again changes the
    level without adding a second handler.

    Args:
        level: Level name ("INFO") or number

    Returns:
        The configured package logger

    Raises:
        ValueError: If level is not a known level name
    """
    if isinstance(level, str):
        level_name = level.upper()
        resolved = logging.getLevelName(level_name)
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger("huvudbok")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
