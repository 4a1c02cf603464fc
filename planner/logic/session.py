"""PlannerSession: the explicit context object behind the planner pages.

It owns the active date, the in-memory PlanState for that date (the single
source of truth every widget reads and writes) and the persistence pipeline.
Mutations update the state and schedule a debounced save; navigating to
another date flushes pending saves of the previous date first, so a fast
date change never drops the last edit.
"""
from __future__ import annotations
import asyncio
import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from planner.domain.Habit import Habit
from planner.domain.PlanState import PlanState
from planner.domain.Task import TodoItem, TopThreeItem
from planner.domain.UserInfo import UserInfo
from planner.infra.Debounced_Writer import DebouncedWriter
from planner.infra.Sync_Coordinator import BulkSyncReport, RemoteSession, SaveResult, SyncCoordinator
from planner.logic import habits as habit_ops
from planner.logic import todos as todo_ops
from planner.logic import trackers
from planner.utilities.constants import DATE_FORMAT, DEFAULT_PAGE, PAGES

logger = logging.getLogger(__name__)


def parse_date_key(date_key: str) -> date:
    """Validate a YYYY-MM-DD key; raises ValueError otherwise."""
    try:
        return datetime.strptime(date_key, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date '{date_key}', expected YYYY-MM-DD") from None


class PlannerSession:
    def __init__(self, coordinator: SyncCoordinator, writer: Optional[DebouncedWriter] = None,
                 page: str = DEFAULT_PAGE):
        if page not in PAGES:
            raise ValueError(f"Unknown page: {page}")
        self.coordinator = coordinator
        self.page = page
        self.writer = writer or DebouncedWriter(self._save)
        self.date_key: Optional[str] = None
        self.plan = PlanState.empty()
        self.user: Optional[UserInfo] = None
        self._navigation = asyncio.Lock()

    async def _save(self, date_key: str, state: PlanState) -> SaveResult:
        return await self.coordinator.save(date_key, state, self.page)

    @property
    def day(self) -> date:
        if self.date_key is None:
            return date.today()
        return parse_date_key(self.date_key)

    # --- navigation -------------------------------------------------------
    async def open(self, date_key: str) -> PlanState:
        """Make `date_key` the active date, replacing the in-memory plan wholesale."""
        parse_date_key(date_key)
        async with self._navigation:
            return await self._switch_to(date_key)

    async def _switch_to(self, date_key: str) -> PlanState:
        # caller holds self._navigation
        if self.date_key is not None:
            await self.writer.flush(self.date_key)
        self.plan = await self.coordinator.load(date_key, self.page)
        self.date_key = date_key
        logger.info(f"Loaded plan for {date_key}")
        return self.plan

    async def ensure(self, date_key: str) -> PlanState:
        """Open the date unless it is already active.

        Concurrent callers for the same date share a single load.
        """
        if self.date_key == date_key:
            return self.plan
        parse_date_key(date_key)
        async with self._navigation:
            if self.date_key == date_key:
                return self.plan
            return await self._switch_to(date_key)

    async def reload(self) -> PlanState:
        if self.date_key is None:
            return self.plan
        async with self._navigation:
            await self.writer.flush(self.date_key)
            self.plan = await self.coordinator.load(self.date_key, self.page)
            return self.plan

    def touch(self):
        """Schedule a debounced save of the active plan."""
        if self.date_key is None:
            raise RuntimeError("No active date; call open() first")
        self.writer.schedule(self.date_key, self.plan)

    async def flush(self) -> Dict[str, Any]:
        return await self.writer.flush()

    async def close(self):
        await self.writer.flush()

    # --- widgets ----------------------------------------------------------
    def set_top_three(self, index: int, text: Optional[str] = None, done: Optional[bool] = None) -> TopThreeItem:
        item = trackers.set_top_three(self.plan, index, text=text, done=done)
        self.touch()
        return item

    def add_todo(self, text: str) -> TodoItem:
        todo = todo_ops.add_todo(self.plan, text)
        self.touch()
        return todo

    def update_todo(self, todo_id: str, text: Optional[str] = None, done: Optional[bool] = None) -> TodoItem:
        todo = todo_ops.update_todo(self.plan, todo_id, text=text, done=done)
        self.touch()
        return todo

    def delete_todo(self, todo_id: str) -> TodoItem:
        todo = todo_ops.delete_todo(self.plan, todo_id)
        self.touch()
        return todo

    def move_todo(self, from_index: int, to_index: int):
        todo_ops.move_todo(self.plan, from_index, to_index)
        self.touch()
        return self.plan.todos

    def set_schedule(self, hour: str, text: str):
        trackers.set_schedule(self.plan, hour, text)
        self.touch()

    def set_notes(self, text: str):
        trackers.set_notes(self.plan, text)
        self.touch()

    def set_meal(self, slot: str, text: str):
        trackers.set_meal(self.plan, slot, text)
        self.touch()

    def set_water(self, count: int) -> int:
        water = trackers.set_water(self.plan, count)
        self.touch()
        return water

    def tap_water(self, index: int) -> int:
        water = trackers.tap_water(self.plan, index)
        self.touch()
        return water

    def create_habit(self, title: str, **options) -> Habit:
        habit = habit_ops.create_habit(self.plan, title, **options)
        self.touch()
        return habit

    def mark_habit(self, habit_id: str, action: str) -> Habit:
        habit = habit_ops.mark_habit(self.plan, habit_id, action, self.day)
        self.touch()
        return habit

    async def clear_all(self) -> PlanState:
        """Reset the active date to the empty template and persist it now."""
        if self.date_key is None:
            raise RuntimeError("No active date; call open() first")
        self.writer.cancel(self.date_key)
        await self.writer.flush(self.date_key)
        self.plan = await self.coordinator.clear(self.date_key, self.page)
        return self.plan

    # --- remote session ---------------------------------------------------
    async def sign_in(self, remote: Optional[RemoteSession], user: UserInfo) -> BulkSyncReport:
        """Store the user record, attach the remote store and push local data to it.

        Without a remote backend the session stays local-only and the user
        record is only cached locally.
        """
        await self.writer.flush()
        existing = await self.coordinator.load_user_info()
        if existing is not None and existing.uid == user.uid:
            user.created_at = existing.created_at
        user.touch_login()
        if remote is not None:
            self.coordinator.attach_remote(remote)
        await self.coordinator.save_user_info(user)
        self.user = user
        report = await self.coordinator.bulk_sync()
        await self.reload()
        return report

    async def sign_out(self) -> Optional[RemoteSession]:
        await self.writer.flush()
        self.user = None
        remote = self.coordinator.detach_remote()
        if remote is not None:
            await remote.store.aclose()
        return remote

    @property
    def mode(self) -> str:
        return "remote" if self.coordinator.remote_active else "local"
