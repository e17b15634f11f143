"""Shared test fixtures for habitcore tests."""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from habitcore.models import Habit
from habitcore.store import HabitStore

# Wednesday, mid-afternoon
NOW = datetime(2026, 2, 11, 15, 30)
TODAY = datetime(2026, 2, 11)


def day(offset: int) -> datetime:
    """Day start *offset* days before TODAY (negative = future)."""
    return TODAY - timedelta(days=offset)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary data root and point HABITS_ROOT at it."""
    root = tmp_path / "habit-data"
    root.mkdir(parents=True)
    os.environ["HABITS_ROOT"] = str(root)
    yield root
    if "HABITS_ROOT" in os.environ:
        del os.environ["HABITS_ROOT"]


@pytest.fixture
def store(workspace: Path) -> HabitStore:
    return HabitStore.open(workspace, clock=lambda: NOW)


@pytest.fixture
def category(store: HabitStore):
    return store.categories[0]


@pytest.fixture
def make_habit(category):
    """Build a habit in the default category, completed on the given day offsets."""

    def _make(title: str = "Habit", done: tuple[int, ...] = (), **fields) -> Habit:
        fields.setdefault("category_id", category.id)
        fields.setdefault("created_at", NOW - timedelta(days=30))
        habit = Habit(title=title, **fields)
        habit.completed_dates = sorted((day(n) for n in done), reverse=True)
        return habit

    return _make
