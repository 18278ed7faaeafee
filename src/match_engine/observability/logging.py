"""Shared logging utilities for consistent engine observability.

Usage example:
    from match_engine.observability.logging import get_logger

    logger = get_logger("match_engine.ranker")
    logger.info("Scoring %s targets", pool_size)
"""

from __future__ import annotations

import logging
import time

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def get_logger(name: str, *, level: int = logging.INFO) -> logging.Logger:
    """Return a logger with one UTC-stamped stream handler.

    The handler is attached once per logger name; later calls return the same
    logger untouched, so ``level`` only applies on first use.

    Args:
        name: Logger name (use a stable module-qualified name).
        level: Level applied when the logger is first configured.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
    formatter.converter = time.gmtime
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
