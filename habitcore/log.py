"""Logging setup for applications embedding habitcore."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from habitcore.workspace import log_path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    root: Path | None = None,
    level: str | int = "INFO",
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> logging.Logger:
    """Attach a rotating file handler to the ``habitcore`` logger.

    Calling it again for the same file only updates the level.
    """
    logger = logging.getLogger("habitcore")
    logger.setLevel(level)

    path = log_path(root)
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == os.path.abspath(path):
            return logger

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    except OSError as e:
        logger.warning("File logging disabled, cannot open %s: %s", path, e)
        return logger

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
