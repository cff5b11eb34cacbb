"""
Standard logging setup.

Usage:
    from wrongway.common.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from typing import Union


LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def get_logger(name: str, level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Get a named logger with console output.

    Avoids duplicate handlers if called multiple times with the same name.
    Accepts either a logging constant or a level name such as "DEBUG".
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(_resolve_level(level))
    return logger
