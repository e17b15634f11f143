"""Data root, path helpers and the settings document for habitcore."""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path

import yaml

from habitcore.fileio import read_yaml, write_yaml_atomic
from habitcore.models import Settings

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "habit_tracker_export.json"


def data_root() -> Path:
    """Get the data directory holding the persisted documents."""
    return Path(
        os.environ.get("HABITS_ROOT", str(Path.home() / ".habit-tracker"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def document_path(key: str, root: Path | None = None) -> Path:
    """JSON file holding the *key* document (``habits``, ``categories``)."""
    if root is None:
        root = data_root()
    return root / f"{key}.json"


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "settings.yaml"


def export_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "exports" / EXPORT_FILENAME


def log_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "logs" / "habitcore.log"


# ── Settings ──────────────────────────────────────────────────

def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml, falling back to defaults if unreadable."""
    path = settings_path(root)
    try:
        return Settings.from_dict(read_yaml(path))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Could not read settings from %s: %s", path, e)
        return Settings()


def save_settings(settings: Settings, root: Path | None = None) -> bool:
    path = settings_path(root)
    try:
        write_yaml_atomic(path, settings.to_dict())
    except OSError as e:
        logger.error("Failed to save settings to %s: %s", path, e)
        return False
    return True


def ensure_settings(root: Path | None = None, today: date | None = None) -> Settings:
    """Load settings, writing first-run defaults (with join date) if none exist."""
    if settings_path(root).exists():
        return load_settings(root)
    settings = Settings(join_date=(today or date.today()).isoformat())
    save_settings(settings, root)
    logger.info("Initialized settings for new data root %s", root or data_root())
    return settings
