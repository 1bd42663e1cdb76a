"""
Logging configuration for the ``app`` package.

Entry points (CLI, FastAPI lifespan) call ``configure_logging()`` once.
Library modules only do ``logging.getLogger(__name__)``.
"""
from __future__ import annotations

import logging
import sys
from typing import IO

from app.config import LOG_LEVEL

_PKG_LOGGER_NAME = "app"
_CONFIGURED = False

logging.getLogger(_PKG_LOGGER_NAME).addHandler(logging.NullHandler())


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or LOG_LEVEL).strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(level: int | str | None = None, stream: IO[str] | None = None) -> None:
    """Attach a single stream handler to the package logger (idempotent)."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(_parse_level(level))
    logger.propagate = False

    _CONFIGURED = True
