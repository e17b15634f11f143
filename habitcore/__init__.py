"""habitcore — habit domain model, analytics and local persistence.

Public API re-exports for convenient imports:
    from habitcore import HabitStore, Habit, Category, Frequency, ...
"""

# Calendar helpers
from habitcore.dates import (
    WEEKDAY_NAMES,
    start_of_day,
    same_day,
    weekday_number,
    days_ago,
    start_of_month,
)

# File I/O
from habitcore.fileio import (
    read_text,
    read_json,
    read_yaml,
    write_json_atomic,
    write_yaml_atomic,
)

# Models
from habitcore.models import (
    Frequency,
    Category,
    Habit,
    Settings,
    default_categories,
)

# Workspace & settings
from habitcore.workspace import (
    data_root,
    document_path,
    settings_path,
    export_path,
    log_path,
    load_settings,
    save_settings,
    ensure_settings,
)

# Logging
from habitcore.log import setup_logging

# Persistence
from habitcore.persistence import DocumentStore

# Store
from habitcore.store import (
    HabitStore,
    SortOption,
    FilterOption,
)

# Achievements
from habitcore.achievements import (
    ACHIEVEMENTS,
    Achievement,
    LevelInfo,
    Tier,
    level_info,
    unlocked_achievements,
    achievement_progress,
)
