"""File-backed document store.

Each document is a JSON file ``<root>/<key>.json`` written atomically.
Reads that fail for any reason look like "never saved"; write failures
are logged and reported through the return value, never raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from habitcore.fileio import read_json, write_json_atomic
from habitcore.workspace import document_path

logger = logging.getLogger(__name__)

HABITS = "habits"
CATEGORIES = "categories"


class DocumentStore:
    """Key-value documents under a data root, or memory-only if the root is unusable."""

    def __init__(self, root: Path | None):
        self.root = root
        if root is None:
            return
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Cannot create data directory %s, running in memory only: %s", root, e)
            self.root = None

    @property
    def in_memory(self) -> bool:
        return self.root is None

    def path_for(self, key: str) -> Path | None:
        if self.root is None:
            return None
        return document_path(key, self.root)

    def load(self, key: str) -> Any | None:
        """Return the last saved value for *key*, or None if absent or unparsable."""
        path = self.path_for(key)
        if path is None:
            return None
        try:
            return read_json(path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable document %s: %s", path, e)
            return None

    def save(self, key: str, value: Any) -> bool:
        path = self.path_for(key)
        if path is None:
            return False
        return self._write(path, value)

    def export_bundle(self, path: Path, bundle: dict[str, Any]) -> bool:
        """Write a combined backup bundle to an arbitrary file."""
        return self._write(path, bundle)

    def _write(self, path: Path, value: Any) -> bool:
        try:
            write_json_atomic(path, value)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save %s: %s", path, e)
            return False
        logger.debug("Saved %s", path)
        return True
