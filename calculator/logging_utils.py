"""Logging helpers."""

from __future__ import annotations

import logging
from typing import Optional

from .config import get_settings


def create_logger(name: str, level: Optional[str] = None, propagate: bool = False) -> logging.Logger:
    """Create a logger with a concise formatter.

    The level defaults to ``Settings.log_level``. At most one handler is
    attached per logger, so repeated calls are safe.
    """

    if not name:
        raise ValueError("Logger name must be non-empty.")
    logger = logging.getLogger(name)
    logger.setLevel((level or get_settings().log_level).upper())
    logger.propagate = propagate
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
        )
        logger.addHandler(handler)
    return logger
