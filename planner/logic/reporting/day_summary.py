"""Daily summary: completion counts shown in the planner header widgets."""
from __future__ import annotations
from datetime import date
from typing import Any, Dict

from planner.domain.PlanState import PlanState
from planner.logic.habits import completed_count, scheduled_habits
from planner.utilities.constants import WATER_MAX

__all__ = ["summarize_day"]


def summarize_day(plan: PlanState, on: date) -> Dict[str, Any]:
    todos_done = sum(1 for t in plan.todos if t.done)
    top_done = sum(1 for i in plan.top_three if i.done)
    return {
        "top_three": {"done": top_done, "total": len(plan.top_three)},
        "todos": {"done": todos_done, "total": len(plan.todos)},
        "water": {"count": plan.water, "max": WATER_MAX, "label": f"{plan.water}/{WATER_MAX}"},
        "habits": {
            "scheduled": len(scheduled_habits(plan.habits, on)),
            "completed": completed_count(plan.habits, on),
        },
        "notes_length": len(plan.notes),
        "scheduled_hours": sum(1 for text in plan.schedule.values() if text.strip()),
    }
