"""Unified logging configuration for Spyfield.

Engine modules log through ``logging.getLogger(__name__)``; hosts call
:func:`setup_logging` once to attach a handler and pick a format.

Usage:
    from spyfield.logging_config import setup_logging

    logger = setup_logging("spyfield", level="DEBUG")
"""

from __future__ import annotations

import logging
import os
import sys

__all__ = [
    "COMPACT_FORMAT",
    "DEFAULT_FORMAT",
    "DETAILED_FORMAT",
    "get_logger",
    "resolve_level",
    "setup_logging",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
COMPACT_FORMAT = "%(levelname)s: %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(filename)s:%(lineno)d - %(funcName)s - %(message)s"
)

LOG_LEVEL_ENV = "SPYFIELD_LOG_LEVEL"


def resolve_level(level: int | str | None = None) -> int:
    """Turn an int, a level name or ``None`` (env / INFO) into a level."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level


def setup_logging(
    name: str | None = None,
    level: int | str | None = None,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Configure and return a logger with a single stderr handler.

    Calling this twice for the same name updates the level and format
    without adding a second handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    formatter = logging.Formatter(fmt)
    for handler in logger.handlers:
        if getattr(handler, "_spyfield_handler", False):
            handler.setFormatter(formatter)
            break
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        handler._spyfield_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
