"""HabitStore: the single owner of habits and categories.

Commands mutate the in-memory collections, persist the affected document
and notify observers. Reads are computed on demand and hand out deep
copies, so callers never hold a live reference into the store.
"""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, TypeVar

from habitcore import analytics
from habitcore.dates import days_ago, local_naive, same_day, start_of_day
from habitcore.models import Category, Frequency, Habit, Settings, default_categories
from habitcore.persistence import CATEGORIES, HABITS, DocumentStore
from habitcore.workspace import data_root, ensure_settings, export_path

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

UNCATEGORIZED = "Uncategorized"


class SortOption(str, Enum):
    NAME = "Name"
    STREAK = "Streak"
    COMPLETION_RATE = "Completion Rate"
    DATE_CREATED = "Date Created"
    CATEGORY = "Category"


class FilterOption(str, Enum):
    ALL = "All"
    ACTIVE = "Active"
    ARCHIVED = "Archived"
    DUE_TODAY = "Due Today"
    COMPLETED = "Completed Today"
    INCOMPLETE = "Incomplete Today"


def _parse_option(enum_cls: type[E], value: str, default: E) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown %s %r, using %r", enum_cls.__name__, value, default.value)
        return default


class HabitStore:
    def __init__(
        self,
        documents: DocumentStore,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._documents = documents
        self._clock = clock or datetime.now
        self.settings = settings or Settings()
        self._habits: list[Habit] = []
        self._categories: list[Category] = []
        self._observers: list[Callable[[str], None]] = []

        # View state, never persisted
        self.sort_option = _parse_option(SortOption, self.settings.sort_option, SortOption.DATE_CREATED)
        self.sort_ascending = self.settings.sort_ascending
        self.filter_option = _parse_option(FilterOption, self.settings.filter_option, FilterOption.ACTIVE)
        self.search_text = ""
        self.selected_category_id: str | None = None

        self._load()

        if not self._categories:
            self._categories = default_categories()
            self._save_categories()

        if not self._habits and self.settings.seed_sample_data:
            self.seed_sample_data()

    @classmethod
    def open(cls, root: Path | None = None, clock: Callable[[], datetime] | None = None) -> HabitStore:
        """Open the store persisted under *root* (default: the data root)."""
        if root is None:
            root = data_root()
        documents = DocumentStore(root)
        now = (clock or datetime.now)()
        if documents.in_memory:
            settings = Settings(join_date=now.date().isoformat())
        else:
            settings = ensure_settings(root, now.date())
        return cls(documents, settings, clock)

    def now(self) -> datetime:
        return local_naive(self._clock())

    # ── Snapshots ─────────────────────────────────────────────

    @property
    def habits(self) -> list[Habit]:
        return copy.deepcopy(self._habits)

    @property
    def categories(self) -> list[Category]:
        return copy.deepcopy(self._categories)

    def get_habit(self, habit_id: str) -> Habit | None:
        idx = self._habit_index(habit_id)
        return copy.deepcopy(self._habits[idx]) if idx is not None else None

    def filtered_habits(self) -> list[Habit]:
        """Category filter, then status filter, then search, then sort."""
        now = self.now()
        result = list(self._habits)

        if self.selected_category_id is not None:
            result = [h for h in result if h.category_id == self.selected_category_id]

        option = self.filter_option
        if option == FilterOption.ACTIVE:
            result = [h for h in result if not h.is_archived]
        elif option == FilterOption.ARCHIVED:
            result = [h for h in result if h.is_archived]
        elif option == FilterOption.DUE_TODAY:
            result = [h for h in result if h.is_due_today(now) and not h.is_archived]
        elif option == FilterOption.COMPLETED:
            result = [h for h in result if h.is_completed_today(now) and not h.is_archived]
        elif option == FilterOption.INCOMPLETE:
            result = [h for h in result if not h.is_completed_today(now) and not h.is_archived]

        if self.search_text:
            needle = self.search_text.casefold()
            result = [
                h for h in result
                if needle in h.title.casefold() or needle in h.notes.casefold()
            ]

        result.sort(key=self._sort_key(now), reverse=not self.sort_ascending)
        return copy.deepcopy(result)

    def habits_by_category(self) -> dict[str, list[Habit]]:
        groups: dict[str, list[Habit]] = defaultdict(list)
        for h in self.filtered_habits():
            groups[h.category_id].append(h)
        return dict(groups)

    def _sort_key(self, now: datetime) -> Callable[[Habit], Any]:
        option = self.sort_option
        if option == SortOption.NAME:
            return lambda h: h.title.casefold()
        if option == SortOption.STREAK:
            return lambda h: h.current_streak(now)
        if option == SortOption.COMPLETION_RATE:
            return lambda h: h.completion_rate_this_month(now)
        if option == SortOption.CATEGORY:
            names = {c.id: c.name.casefold() for c in self._categories}
            return lambda h: names.get(h.category_id, "")
        return lambda h: h.created_at

    # ── Observers ─────────────────────────────────────────────

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register *callback* for change events; returns an unsubscribe function."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def _notify(self, event: str) -> None:
        for callback in list(self._observers):
            try:
                callback(event)
            except Exception:
                logger.exception("Observer %r failed on %s event", callback, event)

    # ── Categories ────────────────────────────────────────────

    def category_for(self, habit: Habit) -> Category | None:
        for c in self._categories:
            if c.id == habit.category_id:
                return copy.deepcopy(c)
        return None

    def habits_count(self, category: Category) -> int:
        return sum(1 for h in self._habits if h.category_id == category.id and not h.is_archived)

    def add_category(self, category: Category) -> None:
        if any(c.name == category.name for c in self._categories):
            return
        self._categories.append(copy.deepcopy(category))
        self._categories.sort(key=lambda c: c.name)
        self._save_categories()

    def update_category(self, category: Category) -> None:
        idx = self._category_index(category.id)
        if idx is None:
            return
        self._categories[idx] = copy.deepcopy(category)
        self._save_categories()

    def delete_category(self, category: Category) -> None:
        """Remove *category*, moving its habits to the first remaining category.

        When it is the last category and habits still use it, an
        "Uncategorized" category is created to receive them.
        """
        if self._category_index(category.id) is None:
            return

        orphans = [h for h in self._habits if h.category_id == category.id]
        if orphans:
            fallback = next((c for c in self._categories if c.id != category.id), None)
            if fallback is None:
                fallback = Category(name=UNCATEGORIZED, icon="tray.fill", color_hex="#9CA3AF")
                self._categories.append(fallback)
                self._categories.sort(key=lambda c: c.name)
                logger.info("Created %r category for habits of deleted %r", UNCATEGORIZED, category.name)
            for h in orphans:
                h.category_id = fallback.id
            self._save_habits()

        self._categories = [c for c in self._categories if c.id != category.id]
        if self.selected_category_id == category.id:
            self.selected_category_id = None
        self._save_categories()

    # ── Habit CRUD ────────────────────────────────────────────

    def add_habit(self, habit: Habit) -> None:
        self._habits.insert(0, copy.deepcopy(habit))
        self._save_habits()

    def update_habit(self, habit: Habit) -> None:
        idx = self._habit_index(habit.id)
        if idx is None:
            return
        self._habits[idx] = copy.deepcopy(habit)
        self._save_habits()

    def delete_habit(self, habit: Habit) -> None:
        if self._habit_index(habit.id) is None:
            return
        self._habits = [h for h in self._habits if h.id != habit.id]
        self._save_habits()

    def archive_habit(self, habit: Habit) -> None:
        self._set_archived(habit.id, True)

    def unarchive_habit(self, habit: Habit) -> None:
        self._set_archived(habit.id, False)

    def _set_archived(self, habit_id: str, archived: bool) -> None:
        idx = self._habit_index(habit_id)
        if idx is None:
            return
        self._habits[idx].is_archived = archived
        self._save_habits()

    def toggle_completion(self, habit: Habit, day: date | datetime | None = None) -> None:
        """Mark *day* (default today) done, or undo it if already done."""
        idx = self._habit_index(habit.id)
        if idx is None:
            return

        target = start_of_day(day if day is not None else self.now())
        dates = self._habits[idx].completed_dates
        existing = next((i for i, d in enumerate(dates) if same_day(d, target)), None)
        if existing is not None:
            del dates[existing]
        else:
            dates.append(target)
        dates.sort(reverse=True)
        self._save_habits()

    # ── Aggregates ────────────────────────────────────────────

    @property
    def today_progress(self) -> float:
        return analytics.today_progress(self._habits, self.now())

    @property
    def total_completions_today(self) -> int:
        return analytics.total_completions_today(self._habits, self.now())

    @property
    def best_current_streak(self) -> int:
        return analytics.best_current_streak(self._habits, self.now())

    @property
    def total_completions(self) -> int:
        return analytics.total_completions(self._habits)

    def completions_per_day(self, days: int) -> list[tuple[datetime, int]]:
        return analytics.completions_per_day(self._habits, days, self.now())

    def category_distribution(self) -> list[tuple[Category, int]]:
        return copy.deepcopy(analytics.category_distribution(self._habits, self._categories))

    def top_streak_habits(self, limit: int = 5) -> list[Habit]:
        return copy.deepcopy(analytics.top_streak_habits(self._habits, self.now(), limit))

    def weekly_completion_rate(self) -> float:
        return analytics.weekly_completion_rate(self._habits, self.now())

    # ── Maintenance ───────────────────────────────────────────

    def reset_all_data(self) -> None:
        self._habits = []
        self._categories = default_categories()
        self.selected_category_id = None
        self._save_habits()
        self._save_categories()
        logger.info("All habit data reset")

    def export_data(self, path: Path | None = None) -> dict[str, Any]:
        """Build the backup bundle and write it to *path*.

        *path* defaults to the export file under the data root; a
        memory-only store without a path just returns the bundle.
        """
        bundle = {
            HABITS: [h.to_dict() for h in self._habits],
            CATEGORIES: [c.to_dict() for c in self._categories],
        }
        if path is None and not self._documents.in_memory:
            path = export_path(self._documents.root)
        if path is not None and self._documents.export_bundle(path, bundle):
            logger.info("Exported %d habits to %s", len(self._habits), path)
        return bundle

    def seed_sample_data(self) -> None:
        """Replace habits with a small demo set, if the default categories exist."""
        by_name = {c.name: c for c in self._categories}
        needed = ("Fitness", "Learning", "Mindfulness", "Health")
        if not all(name in by_name for name in needed):
            logger.info("Sample data skipped, default categories missing")
            return

        now = self.now()
        samples = [
            ("Morning Run", "30 minutes of cardio to start the day", "figure.run", "#FF6B6B",
             "Fitness", Frequency.WEEKDAYS, 5),
            ("Read for 30 minutes", "Fiction or non-fiction, just read!", "book.fill", "#5B8DEF",
             "Learning", Frequency.DAILY, 10),
            ("Meditate", "10 minutes of mindfulness", "brain.head.profile", "#A78BFA",
             "Mindfulness", Frequency.DAILY, 3),
            ("Drink 8 glasses of water", "Stay hydrated!", "drop.fill", "#4ECDC4",
             "Health", Frequency.DAILY, 1),
        ]
        habits = []
        for title, notes, icon, color, category, frequency, done_days in samples:
            habit = Habit.create(
                title,
                by_name[category].id,
                notes=notes,
                icon=icon,
                color_hex=color,
                frequency=frequency,
                created_at=now,
            )
            habit.completed_dates = [days_ago(now, n) for n in range(done_days)]
            habits.append(habit)
        self._habits = habits
        self._save_habits()

    # ── Persistence ───────────────────────────────────────────

    def _load(self) -> None:
        habits = self._decode(HABITS, Habit.from_dict)
        categories = self._decode(CATEGORIES, Category.from_dict)
        self._habits = habits or []
        self._categories = categories or []
        logger.info("Loaded %d habits and %d categories", len(self._habits), len(self._categories))

    def _decode(self, key: str, decoder: Callable[[dict[str, Any]], Any]) -> list[Any] | None:
        raw = self._documents.load(key)
        if raw is None:
            return None
        if not isinstance(raw, list):
            logger.warning("Discarding %s document: expected a list, got %s", key, type(raw).__name__)
            return None
        try:
            return [decoder(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding undecodable %s document: %s", key, e)
            return None

    def _save_habits(self) -> None:
        self._documents.save(HABITS, [h.to_dict() for h in self._habits])
        self._notify(HABITS)

    def _save_categories(self) -> None:
        self._documents.save(CATEGORIES, [c.to_dict() for c in self._categories])
        self._notify(CATEGORIES)

    def _habit_index(self, habit_id: str) -> int | None:
        for i, h in enumerate(self._habits):
            if h.id == habit_id:
                return i
        return None

    def _category_index(self, category_id: str) -> int | None:
        for i, c in enumerate(self._categories):
            if c.id == category_id:
                return i
        return None
