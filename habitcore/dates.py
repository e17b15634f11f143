"""Calendar-day helpers.

All habit logic works on local calendar days: a timestamp is reduced to
the naive midnight of its day before comparison. Weekdays are numbered
1=Sunday .. 7=Saturday.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(1, 8)

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


def start_of_day(value: date | datetime) -> datetime:
    """Midnight of the calendar day containing *value* (tzinfo dropped)."""
    return datetime(value.year, value.month, value.day)


def same_day(a: date | datetime, b: date | datetime) -> bool:
    return start_of_day(a) == start_of_day(b)


def weekday_number(value: date | datetime) -> int:
    """Weekday of *value*, 1=Sunday .. 7=Saturday."""
    return value.isoweekday() % 7 + 1


def days_ago(value: date | datetime, n: int) -> datetime:
    return start_of_day(value) - timedelta(days=n)


def start_of_month(value: date | datetime) -> datetime:
    return datetime(value.year, value.month, 1)


def local_naive(value: datetime) -> datetime:
    """Convert an offset-carrying timestamp to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
