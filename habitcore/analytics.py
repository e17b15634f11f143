"""Aggregate analytics over a habit collection.

Pure functions: each takes the habits (and, where needed, categories and
a reference ``now``) and derives a value without touching the store.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime

from habitcore.dates import WEEKDAY_NAMES, days_ago, start_of_day, weekday_number
from habitcore.models import Category, Habit


def _active(habits: list[Habit]) -> list[Habit]:
    return [h for h in habits if not h.is_archived]


# ── Today ─────────────────────────────────────────────────────


def today_progress(habits: list[Habit], now: datetime) -> float:
    """Fraction of due, active habits completed today; 1.0 when nothing is due."""
    due = [h for h in _active(habits) if h.is_due_today(now)]
    if not due:
        return 1.0
    done = sum(1 for h in due if h.is_completed_today(now))
    return done / len(due)


def total_completions_today(habits: list[Habit], now: datetime) -> int:
    return sum(1 for h in habits if h.is_completed_today(now))


def best_current_streak(habits: list[Habit], now: datetime) -> int:
    return max((h.current_streak(now) for h in habits), default=0)


def total_completions(habits: list[Habit]) -> int:
    return sum(len(h.completed_dates) for h in habits)


# ── Trends ────────────────────────────────────────────────────


def completions_per_day(habits: list[Habit], days: int, now: datetime) -> list[tuple[datetime, int]]:
    """(day, completions) for the last *days* days, oldest first, ending today."""
    result = []
    for offset in range(days - 1, -1, -1):
        day = days_ago(now, offset)
        count = sum(1 for h in habits if h.is_completed(day))
        result.append((day, count))
    return result


def category_distribution(habits: list[Habit], categories: list[Category]) -> list[tuple[Category, int]]:
    """Active habit count per category, largest first, empty categories omitted."""
    pairs = []
    for category in categories:
        count = sum(1 for h in _active(habits) if h.category_id == category.id)
        if count > 0:
            pairs.append((category, count))
    pairs.sort(key=lambda p: p[1], reverse=True)
    return pairs


def top_streak_habits(habits: list[Habit], now: datetime, limit: int = 5) -> list[Habit]:
    on_streak = [h for h in _active(habits) if h.current_streak(now) > 0]
    on_streak.sort(key=lambda h: h.current_streak(now), reverse=True)
    return on_streak[:limit]


def weekly_completion_rate(habits: list[Habit], now: datetime) -> float:
    active = _active(habits)
    if not active:
        return 0.0
    done = sum(h.completions_in_last(7, now) for h in active)
    return done / (len(active) * 7)


# ── Insights ──────────────────────────────────────────────────


def completions_by_weekday(habits: list[Habit]) -> dict[int, int]:
    """Completions per weekday number (1=Sunday .. 7=Saturday), all weekdays present."""
    counts: dict[int, int] = defaultdict(int)
    for h in habits:
        for d in h.completed_dates:
            counts[weekday_number(d)] += 1
    return {wd: counts.get(wd, 0) for wd in range(1, 8)}


def most_productive_weekday(habits: list[Habit]) -> str:
    counts = completions_by_weekday(habits)
    best = 1
    for wd in range(1, 8):
        if counts[wd] > counts[best]:
            best = wd
    return WEEKDAY_NAMES[best - 1]


def average_per_day(habits: list[Habit], now: datetime) -> float:
    """Total completions divided by days since the first recorded completion."""
    dates = [d for h in habits for d in h.completed_dates]
    if not dates:
        return 0.0
    span = max(1, (start_of_day(now) - start_of_day(min(dates))).days)
    return total_completions(habits) / span


def habits_on_track(habits: list[Habit], now: datetime) -> int:
    return sum(1 for h in _active(habits) if h.current_streak(now) > 0)


def contribution_grid(habits: list[Habit], now: datetime, weeks: int = 12) -> list[list[int]]:
    """weeks x 7 matrix of daily completion counts; the last cell is today."""
    grid = []
    for week in range(weeks):
        row = []
        for day in range(7):
            offset = (weeks - 1 - week) * 7 + (6 - day)
            target = days_ago(now, offset)
            row.append(sum(1 for h in habits if h.is_completed(target)))
        grid.append(row)
    return grid
