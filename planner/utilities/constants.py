from typing import Final

DATE_FORMAT: Final[str] = "%Y-%m-%d"
SCHEMA_VERSION: Final[int] = 1

# Hourly schedule grid 06:00 .. 23:00
SCHEDULE_HOURS: Final[tuple[str, ...]] = tuple(f"{h:02d}:00" for h in range(6, 24))
TOP_THREE_SLOTS: Final[int] = 3
MEAL_SLOTS: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")
WATER_MAX: Final[int] = 8

HABIT_COMPLETED: Final[str] = "completed"
HABIT_NOT_DONE: Final[str] = "not_done"
HABIT_SKIPPED: Final[str] = "skipped"
HABIT_STATUSES: Final[tuple[str, ...]] = (HABIT_COMPLETED, HABIT_NOT_DONE, HABIT_SKIPPED)
HABIT_ACTIONS: Final[dict[str, str]] = {
    "yes": HABIT_COMPLETED,
    "no": HABIT_NOT_DONE,
    "skip": HABIT_SKIPPED,
}
HABIT_FREQUENCIES: Final[tuple[str, ...]] = ("daily", "weekly", "monthly")
DEFAULT_HABIT_COLOR: Final[str] = "#4f46e5"

PAGES: Final[tuple[str, ...]] = ("planner", "habits", "expenses", "work", "pomodoro", "userInfo")
DEFAULT_PAGE: Final[str] = "planner"
USER_INFO_PAGE: Final[str] = "userInfo"
USER_INFO_KEY: Final[str] = "profile"

# Keys added to remote documents; never part of PlanState itself
REMOTE_METADATA_KEYS: Final[tuple[str, ...]] = ("lastUpdated", "userId", "projectId", "page", "synced")
