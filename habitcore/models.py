"""Typed dataclasses for the habitcore data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
Dates travel as ISO-8601 strings.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

from habitcore.dates import (
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    local_naive,
    same_day,
    start_of_day,
    start_of_month,
    weekday_number,
)


def new_id() -> str:
    return str(uuid.uuid4())


def _now(now: datetime | None) -> datetime:
    return local_naive(now) if now is not None else datetime.now()


def _parse_dt(value: Any) -> datetime:
    if isinstance(value, datetime):
        return local_naive(value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")
    return local_naive(datetime.fromisoformat(value))


def _str(value: Any, default: str = "") -> str:
    return default if value is None else str(value)


# ── Frequency ─────────────────────────────────────────────────


class Frequency(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    WEEKDAYS = "Weekdays"
    WEEKENDS = "Weekends"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value: Any) -> Frequency:
        try:
            return cls(value)
        except ValueError:
            return cls.DAILY

    def is_due(self, weekday: int, custom_days: list[int] | None = None) -> bool:
        """Whether this schedule selects *weekday* (1=Sunday .. 7=Saturday)."""
        if self is Frequency.DAILY:
            return True
        if self is Frequency.WEEKLY:
            return weekday == SUNDAY
        if self is Frequency.WEEKDAYS:
            return MONDAY <= weekday <= FRIDAY
        if self is Frequency.WEEKENDS:
            return weekday in (SATURDAY, SUNDAY)
        return weekday in (custom_days or [])


# ── Category ──────────────────────────────────────────────────


@dataclass
class Category:
    name: str = ""
    icon: str = "folder.fill"
    color_hex: str = "#5B8DEF"
    id: str = field(default_factory=new_id)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Category:
        if not isinstance(d, dict):
            raise ValueError(f"Invalid category record: {d!r}")
        return cls(
            id=str(d.get("id") or new_id()),
            name=_str(d.get("name")),
            icon=_str(d.get("icon"), "folder.fill"),
            color_hex=_str(d.get("colorHex"), "#5B8DEF"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "colorHex": self.color_hex,
        }


DEFAULT_CATEGORIES = [
    ("Health", "heart.fill", "#FF6B6B"),
    ("Fitness", "figure.run", "#4ECDC4"),
    ("Learning", "book.fill", "#5B8DEF"),
    ("Productivity", "bolt.fill", "#FFE66D"),
    ("Mindfulness", "brain.head.profile", "#A78BFA"),
    ("Social", "person.2.fill", "#F472B6"),
    ("Finance", "dollarsign.circle.fill", "#34D399"),
    ("Creativity", "paintbrush.fill", "#FB923C"),
]


def default_categories() -> list[Category]:
    """Fresh copies of the built-in category set, each with a new id."""
    return [Category(name=n, icon=i, color_hex=c) for n, i, c in DEFAULT_CATEGORIES]


# ── Habit ─────────────────────────────────────────────────────


@dataclass
class Habit:
    title: str = ""
    category_id: str = ""
    notes: str = ""
    icon: str = "star.fill"
    color_hex: str = "#5B8DEF"
    frequency: Frequency = Frequency.DAILY
    custom_days: list[int] = field(default_factory=list)  # 1=Sunday .. 7=Saturday
    target_count: int = 1
    reminder_enabled: bool = False
    reminder_time: datetime | None = None
    is_archived: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    completed_dates: list[datetime] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    @classmethod
    def create(cls, title: str, category_id: str, **fields: Any) -> Habit:
        """Build a new habit. Title validation is left to the caller."""
        return cls(title=title, category_id=category_id, **fields)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Habit:
        if not isinstance(d, dict):
            raise ValueError(f"Invalid habit record: {d!r}")
        reminder = d.get("reminderTime")
        created = d.get("createdAt")
        return cls(
            id=str(d.get("id") or new_id()),
            title=_str(d.get("title")),
            notes=_str(d.get("notes")),
            icon=_str(d.get("icon"), "star.fill"),
            color_hex=_str(d.get("colorHex"), "#5B8DEF"),
            category_id=_str(d.get("categoryId")),
            frequency=Frequency.parse(d.get("frequency", "Daily")),
            custom_days=[int(x) for x in (d.get("customDays") or [])],
            target_count=int(d.get("targetCount", 1)),
            reminder_enabled=bool(d.get("reminderEnabled", False)),
            reminder_time=_parse_dt(reminder) if reminder else None,
            is_archived=bool(d.get("isArchived", False)),
            created_at=_parse_dt(created) if created else datetime.now(),
            completed_dates=[_parse_dt(x) for x in (d.get("completedDates") or [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "notes": self.notes,
            "icon": self.icon,
            "colorHex": self.color_hex,
            "categoryId": self.category_id,
            "frequency": self.frequency.value,
            "customDays": list(self.custom_days),
            "targetCount": self.target_count,
            "reminderEnabled": self.reminder_enabled,
            "reminderTime": self.reminder_time.isoformat() if self.reminder_time else None,
            "isArchived": self.is_archived,
            "createdAt": self.created_at.isoformat(),
            "completedDates": [d.isoformat() for d in self.completed_dates],
        }

    # ── Derived ───────────────────────────────────────────────

    def is_due_today(self, now: datetime | None = None) -> bool:
        return self.frequency.is_due(weekday_number(_now(now)), self.custom_days)

    def is_completed(self, day: date | datetime) -> bool:
        return any(same_day(d, day) for d in self.completed_dates)

    def is_completed_today(self, now: datetime | None = None) -> bool:
        return self.is_completed(_now(now))

    def current_streak(self, now: datetime | None = None) -> int:
        """Consecutive completed days ending today, or yesterday if today is still open."""
        days = {start_of_day(d) for d in self.completed_dates}
        if not days:
            return 0

        check = start_of_day(_now(now))
        if check not in days:
            check -= timedelta(days=1)
            if check not in days:
                return 0

        streak = 0
        while check in days:
            streak += 1
            check -= timedelta(days=1)
        return streak

    def longest_streak(self) -> int:
        days = sorted({start_of_day(d) for d in self.completed_dates})
        if not days:
            return 0

        best = run = 1
        for prev, cur in zip(days, days[1:]):
            if cur - prev == timedelta(days=1):
                run += 1
                best = max(best, run)
            else:
                run = 1
        return best

    def completion_rate_this_month(self, now: datetime | None = None) -> float:
        now = _now(now)
        month_start = start_of_month(now)
        days_passed = max(1, (start_of_day(now) - month_start).days + 1)
        done = sum(
            1 for d in self.completed_dates
            if d.year == now.year and d.month == now.month
        )
        return done / days_passed

    def completions_in_last(self, days: int, now: datetime | None = None) -> int:
        since = _now(now) - timedelta(days=days)
        return sum(1 for d in self.completed_dates if d >= since)


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    user_name: str = "Habit Master"
    join_date: str | None = None  # ISO date
    sort_option: str = "Date Created"
    sort_ascending: bool = False
    filter_option: str = "Active"
    seed_sample_data: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        join = d.get("join_date")
        return cls(
            user_name=_str(d.get("user_name"), "Habit Master"),
            join_date=str(join) if join else None,
            sort_option=_str(d.get("sort_option"), "Date Created"),
            sort_ascending=bool(d.get("sort_ascending", False)),
            filter_option=_str(d.get("filter_option"), "Active"),
            seed_sample_data=bool(d.get("seed_sample_data", False)),
            log_level=_str(d.get("log_level"), "INFO").upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "user_name": self.user_name,
            "sort_option": self.sort_option,
            "sort_ascending": self.sort_ascending,
            "filter_option": self.filter_option,
            "seed_sample_data": self.seed_sample_data,
            "log_level": self.log_level,
        }
        if self.join_date:
            d["join_date"] = self.join_date
        return d
