"""PlanState domain entity: everything planned for one calendar date."""
from typing import Dict, List, Optional

from planner.domain.Habit import Habit
from planner.domain.Task import TodoItem, TopThreeItem
from planner.utilities.constants import MEAL_SLOTS, SCHEDULE_HOURS, SCHEMA_VERSION, TOP_THREE_SLOTS


def empty_schedule() -> Dict[str, str]:
    return {hour: "" for hour in SCHEDULE_HOURS}


def empty_meals() -> Dict[str, str]:
    return {slot: "" for slot in MEAL_SLOTS}


class PlanState:
    def __init__(self, top_three: Optional[List[TopThreeItem]] = None, todos: Optional[List[TodoItem]] = None,
                 schedule: Optional[Dict[str, str]] = None, notes: str = "",
                 meals: Optional[Dict[str, str]] = None, water: int = 0,
                 habits: Optional[List[Habit]] = None):
        self.top_three: List[TopThreeItem] = list(top_three) if top_three else []
        while len(self.top_three) < TOP_THREE_SLOTS:
            self.top_three.append(TopThreeItem())
        self.todos: List[TodoItem] = list(todos) if todos else []
        self.schedule: Dict[str, str] = dict(schedule) if schedule is not None else empty_schedule()
        self.notes = notes
        self.meals: Dict[str, str] = dict(meals) if meals is not None else empty_meals()
        self.water = water
        self.habits: List[Habit] = list(habits) if habits else []

    @classmethod
    def empty(cls) -> "PlanState":
        '''The template used for dates with no stored data and for clear-all.'''
        return cls()

    def find_todo(self, todo_id: str) -> TodoItem:
        for todo in self.todos:
            if todo.id == todo_id:
                return todo
        raise KeyError(f"Todo '{todo_id}' not found")

    def find_habit(self, habit_id: str) -> Habit:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit
        raise KeyError(f"Habit '{habit_id}' not found")

    def sorted_todos(self) -> List[TodoItem]:
        return sorted(self.todos, key=lambda t: t.order)

    def __eq__(self, other):
        return isinstance(other, PlanState) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (f"PlanState(todos={len(self.todos)}, habits={len(self.habits)}, "
                f"water={self.water})")

    @staticmethod
    def from_dict(data):
        '''
        Builds a PlanState from an already normalized dictionary.
        Raw stored records go through planner.logic.normalize.normalize first.
        '''
        return PlanState(
            top_three=[TopThreeItem.from_dict(i) for i in data.get("topThree", [])],
            todos=[TodoItem.from_dict(t) for t in data.get("todos", [])],
            schedule=data.get("schedule"),
            notes=data.get("notes", ""),
            meals=data.get("meals"),
            water=data.get("water", 0),
            habits=[Habit.from_dict(h) for h in data.get("habits", [])],
        )

    def to_dict(self):
        '''Converts the PlanState to the stored camelCase record.'''
        return {
            "schemaVersion": SCHEMA_VERSION,
            "topThree": [item.to_dict() for item in self.top_three],
            "todos": [todo.to_dict() for todo in self.todos],
            "schedule": dict(self.schedule),
            "notes": self.notes,
            "meals": dict(self.meals),
            "water": self.water,
            "habits": [habit.to_dict() for habit in self.habits],
        }
