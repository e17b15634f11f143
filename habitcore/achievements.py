"""User level and achievement badges derived from store aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from habitcore.store import HabitStore


# ── Levels ────────────────────────────────────────────────────

# (minimum total completions, title) for levels 1..10
LEVELS = [
    (0, "Beginner"),
    (5, "Novice"),
    (15, "Apprentice"),
    (30, "Regular"),
    (50, "Dedicated"),
    (100, "Expert"),
    (200, "Master"),
    (300, "Grandmaster"),
    (500, "Legend"),
    (1000, "Habit God"),
]


@dataclass
class LevelInfo:
    level: int
    title: str
    next_requirement: int
    progress: float  # fraction of the way to the next level


def level_info(total_completions: int) -> LevelInfo:
    level = 1
    for i, (threshold, _title) in enumerate(LEVELS, start=1):
        if total_completions >= threshold:
            level = i
    title = LEVELS[level - 1][1]

    if level == len(LEVELS):
        return LevelInfo(level, title, total_completions, 1.0)

    previous = LEVELS[level - 1][0]
    nxt = LEVELS[level][0]
    return LevelInfo(level, title, nxt, (total_completions - previous) / (nxt - previous))


# ── Achievements ──────────────────────────────────────────────


class Tier(IntEnum):
    BRONZE = 1
    SILVER = 2
    GOLD = 3
    PLATINUM = 4
    DIAMOND = 5


@dataclass(frozen=True)
class Achievement:
    title: str
    description: str
    tier: Tier
    requirement: Callable[[HabitStore], bool]
    progress: Callable[[HabitStore], float]


def _active_count(store: HabitStore) -> int:
    return sum(1 for h in store.habits if not h.is_archived)


def _due_active_count(store: HabitStore) -> int:
    now = store.now()
    return sum(1 for h in store.habits if h.is_due_today(now) and not h.is_archived)


def _threshold(title: str, description: str, tier: Tier,
               metric: Callable[[HabitStore], float], target: float) -> Achievement:
    return Achievement(
        title=title,
        description=description,
        tier=tier,
        requirement=lambda s: metric(s) >= target,
        progress=lambda s: min(metric(s) / target, 1.0),
    )


def _total(s: HabitStore) -> float:
    return s.total_completions


def _streak(s: HabitStore) -> float:
    return s.best_current_streak


ACHIEVEMENTS = [
    _threshold("First Step", "Complete your first habit", Tier.BRONZE, _total, 1),
    _threshold("Getting Started", "Create 3 habits", Tier.BRONZE, lambda s: len(s.habits), 3),
    _threshold("Week Warrior", "Maintain a 7-day streak", Tier.SILVER, _streak, 7),
    _threshold("Fortnight Fighter", "Maintain a 14-day streak", Tier.GOLD, _streak, 14),
    _threshold("Monthly Master", "Maintain a 30-day streak", Tier.PLATINUM, _streak, 30),
    _threshold("Legendary Streak", "Maintain a 100-day streak", Tier.DIAMOND, _streak, 100),
    _threshold("Dedicated", "Complete 50 habits total", Tier.SILVER, _total, 50),
    _threshold("Century Club", "Complete 100 habits total", Tier.GOLD, _total, 100),
    _threshold("Habit Hero", "Complete 500 habits total", Tier.PLATINUM, _total, 500),
    _threshold("Grandmaster", "Complete 1000 habits total", Tier.DIAMOND, _total, 1000),
    _threshold("Organizer", "Create 5 categories", Tier.SILVER, lambda s: len(s.categories), 5),
    _threshold("Multi-Tasker", "Have 10 active habits", Tier.GOLD, _active_count, 10),
    Achievement(
        title="Perfect Day",
        description="Complete all habits in a day (min 3)",
        tier=Tier.SILVER,
        requirement=lambda s: s.today_progress >= 1.0 and _due_active_count(s) >= 3,
        progress=lambda s: s.today_progress,
    ),
    _threshold("Consistent", "Achieve 80% weekly completion rate", Tier.GOLD,
               lambda s: s.weekly_completion_rate(), 0.8),
]


def unlocked_achievements(store: HabitStore) -> list[Achievement]:
    return [a for a in ACHIEVEMENTS if a.requirement(store)]


def achievement_progress(store: HabitStore) -> dict[str, float]:
    """Progress fraction per achievement title."""
    return {a.title: a.progress(store) for a in ACHIEVEMENTS}
