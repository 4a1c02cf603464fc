"""Habit tracker operations: creation, daily marking and 'scheduled today' views."""
from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional

from planner.domain.Habit import Habit
from planner.domain.PlanState import PlanState
from planner.utilities.constants import (
    DEFAULT_HABIT_COLOR,
    HABIT_ACTIONS,
    HABIT_COMPLETED,
    HABIT_FREQUENCIES,
)

__all__ = ["create_habit", "mark_habit", "scheduled_habits", "completed_count"]


def create_habit(plan: PlanState, title: str, *, description: str = "", color: str = DEFAULT_HABIT_COLOR,
                 repeat: bool = False, reminder: bool = False, goal: bool = False,
                 frequency: str = "daily", days: Optional[Iterable[int]] = None) -> Habit:
    """Append a new habit to the plan. An empty title is rejected before any mutation."""
    title = (title or "").strip()
    if not title:
        raise ValueError("Please enter a habit title")
    if frequency not in HABIT_FREQUENCIES:
        raise ValueError(f"Unknown habit frequency: {frequency}")
    selected = set(days or [])
    if any(d < 0 or d > 6 for d in selected):
        raise ValueError("Habit days must be weekday numbers 0-6 (0 = Sunday)")
    habit = Habit(title, description=(description or "").strip(), color=color, repeat=repeat,
                  reminder=reminder, goal=goal, frequency=frequency, days=selected)
    plan.habits.append(habit)
    return habit


def mark_habit(plan: PlanState, habit_id: str, action: str, on: date) -> Habit:
    """Record yes/no/skip for the day; any status can be replaced by any other."""
    if action not in HABIT_ACTIONS:
        raise ValueError(f"Unknown habit action: {action}")
    habit = plan.find_habit(habit_id)
    habit.mark(on, HABIT_ACTIONS[action])
    return habit


def scheduled_habits(habits: List[Habit], on: date) -> List[Habit]:
    return [h for h in habits if h.is_scheduled(on)]


def completed_count(habits: List[Habit], on: date) -> int:
    return sum(1 for h in scheduled_habits(habits, on) if h.status_on(on) == HABIT_COMPLETED)
