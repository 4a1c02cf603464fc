"""Versioned migration of stored plan records into PlanState.

Records written by older versions of the planner (no ``schemaVersion`` key)
are migrated first, then every field is coerced into the current shape.
Nothing here touches storage, and ``normalize`` never raises.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List

from planner.domain.PlanState import PlanState, empty_meals, empty_schedule
from planner.domain.Task import new_id
from planner.utilities.constants import (
    DEFAULT_HABIT_COLOR,
    HABIT_FREQUENCIES,
    HABIT_STATUSES,
    MEAL_SLOTS,
    SCHEDULE_HOURS,
    SCHEMA_VERSION,
    TOP_THREE_SLOTS,
    WATER_MAX,
)

logger = logging.getLogger(__name__)

__all__ = ["normalize", "migrate", "record_version"]


def record_version(raw: Dict[str, Any]) -> int:
    version = raw.get("schemaVersion", 0)
    if isinstance(version, bool) or not isinstance(version, int) or version < 0:
        return 0
    return version


def _migrate_v0(raw: Dict[str, Any]) -> Dict[str, Any]:
    # habitCompletion predates habit objects; titles cannot be recovered from it
    raw.pop("habitCompletion", None)
    for field in ("topThree", "todos"):
        items = raw.get(field)
        if isinstance(items, list):
            raw[field] = [{"id": new_id(), "text": i, "done": False} if isinstance(i, str) else i
                          for i in items]
    raw["schemaVersion"] = 1
    return raw


MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    0: _migrate_v0,
}


def migrate(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Apply migrations in order until the record reaches SCHEMA_VERSION."""
    data = dict(raw)
    version = record_version(data)
    if version > SCHEMA_VERSION:
        logger.warning(f"Plan record has schemaVersion {version} > {SCHEMA_VERSION}; coercing fields only")
        return data
    while version < SCHEMA_VERSION:
        data = MIGRATIONS[version](data)
        version = record_version(data)
    return data


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_bool(value: Any) -> bool:
    if isinstance(value, (bool, int)):
        return bool(value)
    return False


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _coerce_items(items: List[Any], seen: set) -> List[Dict[str, Any]]:
    result = []
    for item in items:
        if not isinstance(item, dict):
            continue
        item_id = item.get("id")
        if not isinstance(item_id, str) or not item_id or item_id in seen:
            item_id = new_id()
        seen.add(item_id)
        result.append({
            "id": item_id,
            "text": _as_text(item.get("text")),
            "done": _as_bool(item.get("done")),
            "order": _as_int(item.get("order"), len(result)),
        })
    return result


def _coerce_top_three(value: Any) -> List[Dict[str, Any]]:
    slots = _coerce_items(_as_list(value), set())[:TOP_THREE_SLOTS]
    for slot in slots:
        slot.pop("order", None)
    while len(slots) < TOP_THREE_SLOTS:
        slots.append({"id": new_id(), "text": "", "done": False})
    return slots


def _coerce_schedule(value: Any) -> Dict[str, str]:
    schedule = empty_schedule()
    if isinstance(value, dict):
        for hour in SCHEDULE_HOURS:
            schedule[hour] = _as_text(value.get(hour))
    return schedule


def _coerce_meals(value: Any) -> Dict[str, str]:
    meals = empty_meals()
    if isinstance(value, dict):
        for slot in MEAL_SLOTS:
            meals[slot] = _as_text(value.get(slot))
    return meals


def _coerce_habit(habit: Dict[str, Any], seen: set) -> Dict[str, Any]:
    habit_id = habit.get("id")
    if not isinstance(habit_id, str) or not habit_id or habit_id in seen:
        habit_id = new_id()
    seen.add(habit_id)
    days = [d for d in _as_list(habit.get("days"))
            if isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6]
    completions = habit.get("completions")
    if not isinstance(completions, dict):
        completions = {}
    frequency = habit.get("frequency")
    return {
        "id": habit_id,
        "title": _as_text(habit.get("title")),
        "description": _as_text(habit.get("description")),
        "color": habit.get("color") if isinstance(habit.get("color"), str) else DEFAULT_HABIT_COLOR,
        "repeat": _as_bool(habit.get("repeat")),
        "reminder": _as_bool(habit.get("reminder")),
        "goal": _as_bool(habit.get("goal")),
        "frequency": frequency if frequency in HABIT_FREQUENCIES else "daily",
        "days": sorted(set(days)),
        "createdAt": habit.get("createdAt") if isinstance(habit.get("createdAt"), str) else None,
        "completions": {k: v for k, v in completions.items()
                        if isinstance(k, str) and v in HABIT_STATUSES},
    }


def normalize(raw: Any) -> PlanState:
    """Coerce a stored record of unknown or legacy shape into a valid PlanState.

    - non-dict input (None, list, string...) yields the empty plan
    - array fields that are not arrays become empty
    - a non-mapping schedule becomes the full 18-hour empty template
    - topThree is always exactly three slots
    - water is clamped to 0..8
    """
    if not isinstance(raw, dict):
        return PlanState.empty()
    data = migrate(raw)

    seen_habits: set = set()
    habits = [_coerce_habit(h, seen_habits) for h in _as_list(data.get("habits")) if isinstance(h, dict)]

    clean = {
        "topThree": _coerce_top_three(data.get("topThree")),
        "todos": _coerce_items(_as_list(data.get("todos")), set()),
        "schedule": _coerce_schedule(data.get("schedule")),
        "notes": _as_text(data.get("notes")),
        "meals": _coerce_meals(data.get("meals")),
        "water": min(max(_as_int(data.get("water")), 0), WATER_MAX),
        "habits": habits,
    }
    return PlanState.from_dict(clean)
