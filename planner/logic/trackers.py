"""Simple field trackers of a PlanState: top three, schedule, notes, meals, water."""
from __future__ import annotations
from typing import Optional

from planner.domain.PlanState import PlanState
from planner.domain.Task import TopThreeItem
from planner.utilities.constants import MEAL_SLOTS, SCHEDULE_HOURS, TOP_THREE_SLOTS, WATER_MAX


def set_top_three(plan: PlanState, index: int, text: Optional[str] = None, done: Optional[bool] = None) -> TopThreeItem:
    if not 0 <= index < TOP_THREE_SLOTS:
        raise ValueError(f"Top three slot must be between 0 and {TOP_THREE_SLOTS - 1}")
    item = plan.top_three[index]
    if text is not None:
        item.text = text
    if done is not None:
        item.done = done
    return item


def set_schedule(plan: PlanState, hour: str, text: str) -> None:
    if hour not in SCHEDULE_HOURS:
        raise ValueError(f"Unknown schedule hour: {hour}")
    plan.schedule[hour] = text


def set_notes(plan: PlanState, text: str) -> None:
    plan.notes = text


def set_meal(plan: PlanState, slot: str, text: str) -> None:
    if slot not in MEAL_SLOTS:
        raise ValueError(f"Unknown meal: {slot}")
    plan.meals[slot] = text


def set_water(plan: PlanState, count: int) -> int:
    plan.water = min(max(int(count), 0), WATER_MAX)
    return plan.water


def tap_water(plan: PlanState, index: int) -> int:
    """Dot semantics: tapping a filled dot empties it and every dot after it,
    tapping an empty dot fills every dot up to and including it."""
    if not 0 <= index < WATER_MAX:
        raise ValueError(f"Water dot must be between 0 and {WATER_MAX - 1}")
    if index < plan.water:
        return set_water(plan, index)
    return set_water(plan, index + 1)
