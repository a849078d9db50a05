# cdn_mirror/logging/__init__.py
"""
Console + rotating-file logging for the `cdn_mirror` logger tree.

Modules log through `logging.getLogger(__name__)`; only entry points call
init_logging. CDN_MIRROR_DEBUG=1 forces DEBUG regardless of the level passed.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "cdn_mirror"

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATEFMT = "(%Y-%m-%d %H:%M:%S)"

# marks handlers installed here so a second init replaces rather than duplicates them
_OWNED = "_cdn_mirror_handler"


def debug_enabled() -> bool:
    return os.getenv("CDN_MIRROR_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Invalid logging level: {level}")
    return resolved


def init_logging(
    level: str | int = "INFO",
    file_path: str | Path | None = None,
    *,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """Configure and return the package logger. Raises ValueError on an unknown level name."""
    resolved = logging.DEBUG if debug_enabled() else _resolve_level(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    for h in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(h)
        h.close()

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    setattr(console, _OWNED, True)
    logger.addHandler(console)

    if file_path is None or not str(file_path).strip():
        return logger

    log_path = Path(file_path)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    except OSError:
        # console logging stays usable
        logger.warning("logging.file_unavailable path=%s", log_path, exc_info=True)
        return logger

    handler.setFormatter(formatter)
    setattr(handler, _OWNED, True)
    logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "debug_enabled", "init_logging"]
