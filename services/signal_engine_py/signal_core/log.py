# signal_core/log.py
from __future__ import annotations

import logging

from .config import LOG_FORMAT, LOG_LEVEL


def get_logger(name: str) -> logging.Logger:
    """Return a named logger with a single stream handler attached."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        _h = logging.StreamHandler()
        _h.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_h)
    logger.setLevel(LOG_LEVEL)
    return logger
