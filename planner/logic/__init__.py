"""Core planner logic layer.

Modules:
- normalize: versioned migration of stored records into PlanState
- todos, habits, trackers: mutations behind each planner widget
- session: the active-date context object tying state to persistence
- reporting: daily summaries
"""
__all__ = ["normalize", "todos", "habits", "trackers", "session", "reporting"]
