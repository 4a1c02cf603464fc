"""Habit domain entity: recurring activity with per-date completion status."""
from datetime import date, datetime, timezone
from typing import Dict, Iterable, Optional, Set

from planner.domain.Task import new_id
from planner.utilities.constants import DATE_FORMAT, DEFAULT_HABIT_COLOR, HABIT_STATUSES


def weekday_number(day: date) -> int:
    """Weekday numbering used by habits: 0 = Sunday .. 6 = Saturday."""
    return day.isoweekday() % 7


class Habit:
    def __init__(self, title: str, id: str = "", description: str = "", color: str = DEFAULT_HABIT_COLOR,
                 repeat: bool = False, reminder: bool = False, goal: bool = False,
                 frequency: str = "daily", days: Optional[Iterable[int]] = None,
                 created_at: Optional[str] = None, completions: Optional[Dict[str, str]] = None):
        self.id = id or new_id()
        self.title = title
        self.description = description
        self.color = color
        self.repeat = repeat
        self.reminder = reminder
        self.goal = goal
        self.frequency = frequency
        self.days: Set[int] = set(days) if days else set()
        self.created_at = created_at or datetime.now(timezone.utc).isoformat()
        self.completions: Dict[str, str] = dict(completions) if completions else {}

    def is_scheduled(self, day: date) -> bool:
        '''
        An empty `days` set means every day (habits created before weekday
        selection existed); otherwise the weekday must be selected.
        '''
        if not self.days:
            return True
        return weekday_number(day) in self.days

    def status_on(self, day: date) -> Optional[str]:
        '''Returns the recorded status for the day, or None when unmarked.'''
        return self.completions.get(day.strftime(DATE_FORMAT))

    def mark(self, day: date, status: str):
        if status not in HABIT_STATUSES:
            raise ValueError(f"Unknown habit status: {status}")
        self.completions[day.strftime(DATE_FORMAT)] = status

    def __eq__(self, other):
        return isinstance(other, Habit) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Habit({self.title!r}, days={sorted(self.days)}, frequency={self.frequency})"

    @staticmethod
    def from_dict(data):
        '''Creates a Habit from a dictionary using the stored camelCase keys.'''
        return Habit(
            title=data.get("title", ""),
            id=data.get("id", ""),
            description=data.get("description", ""),
            color=data.get("color", DEFAULT_HABIT_COLOR),
            repeat=bool(data.get("repeat", False)),
            reminder=bool(data.get("reminder", False)),
            goal=bool(data.get("goal", False)),
            frequency=data.get("frequency", "daily"),
            days=data.get("days") or [],
            created_at=data.get("createdAt"),
            completions=data.get("completions") or {},
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "color": self.color,
            "repeat": self.repeat,
            "reminder": self.reminder,
            "goal": self.goal,
            "frequency": self.frequency,
            "days": sorted(self.days),
            "createdAt": self.created_at,
            "completions": dict(self.completions),
        }
