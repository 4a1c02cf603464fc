"""To-do list operations on a PlanState (add, edit, delete, drag-and-drop reorder)."""
from __future__ import annotations
from typing import Optional

from planner.domain.PlanState import PlanState
from planner.domain.Task import TodoItem

__all__ = ["add_todo", "update_todo", "delete_todo", "move_todo", "renumber"]


def renumber(plan: PlanState) -> PlanState:
    """Rewrite `order` as 0..n-1 following the current list position."""
    for index, todo in enumerate(plan.todos):
        todo.order = index
    return plan


def add_todo(plan: PlanState, text: str) -> TodoItem:
    text = (text or "").strip()
    if not text:
        raise ValueError("Todo text cannot be empty")
    todo = TodoItem(text=text, order=len(plan.todos))
    plan.todos.append(todo)
    return todo


def update_todo(plan: PlanState, todo_id: str, text: Optional[str] = None, done: Optional[bool] = None) -> TodoItem:
    todo = plan.find_todo(todo_id)
    if text is not None:
        todo.text = text
    if done is not None:
        todo.done = done
    return todo


def delete_todo(plan: PlanState, todo_id: str) -> TodoItem:
    todo = plan.find_todo(todo_id)
    plan.todos = [t for t in plan.todos if t.id != todo_id]
    renumber(plan)
    return todo


def move_todo(plan: PlanState, from_index: int, to_index: int) -> PlanState:
    """Move the item displayed at `from_index` so it is displayed at `to_index`.

    The list is first put in display order, so positions always refer to
    what the user sees even if stored orders had gaps.
    """
    plan.todos = plan.sorted_todos()
    size = len(plan.todos)
    if not 0 <= from_index < size or not 0 <= to_index < size:
        raise ValueError(f"Todo position out of range (0..{size - 1})")
    todo = plan.todos.pop(from_index)
    plan.todos.insert(to_index, todo)
    return renumber(plan)
