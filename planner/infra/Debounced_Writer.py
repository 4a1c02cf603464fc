"""Trailing-edge debounce in front of SyncCoordinator.save.

Every ``schedule(date, state)`` restarts the quiet-interval timer for that
date; the save runs only once no new mutation arrived for the full interval.
There is at most one live timer per date, and saves for the same date are
chained so they complete in the order their windows closed. Different dates
are independent.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from planner.utilities.config import SAVE_DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)

SaveFunc = Callable[[str, Any], Awaitable[Any]]


def _outcome(task: asyncio.Task) -> Any:
    if task.cancelled() or task.exception() is not None:
        return None
    return task.result()


class DebouncedWriter:
    def __init__(self, save: SaveFunc, delay: float = SAVE_DEBOUNCE_SECONDS):
        self._save = save
        self.delay = delay
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._states: Dict[str, Any] = {}
        self._inflight: Dict[str, asyncio.Task] = {}

    def schedule(self, date_key: str, state: Any) -> None:
        """Register a mutation; must be called from a running event loop."""
        loop = asyncio.get_running_loop()
        handle = self._timers.pop(date_key, None)
        if handle is not None:
            handle.cancel()
        self._states[date_key] = state
        self._timers[date_key] = loop.call_later(self.delay, self._fire, date_key)

    def pending(self, date_key: Optional[str] = None) -> bool:
        """True while a timer is waiting or a save is still running."""
        if date_key is None:
            return bool(self._timers) or any(not t.done() for t in self._inflight.values())
        task = self._inflight.get(date_key)
        return date_key in self._timers or (task is not None and not task.done())

    def cancel(self, date_key: str) -> bool:
        """Drop a waiting save for the date. A save already running is left alone."""
        handle = self._timers.pop(date_key, None)
        self._states.pop(date_key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def _fire(self, date_key: str):
        self._timers.pop(date_key, None)
        state = self._states.pop(date_key)
        previous = self._inflight.get(date_key)
        task = asyncio.ensure_future(self._run(date_key, state, previous))
        self._inflight[date_key] = task
        task.add_done_callback(lambda t, key=date_key: self._forget(key, t))

    def _forget(self, date_key: str, task: asyncio.Task):
        if self._inflight.get(date_key) is task:
            del self._inflight[date_key]
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Debounced save for {date_key} failed: {task.exception()!r}")

    async def _run(self, date_key: str, state: Any, previous: Optional[asyncio.Task]):
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        result = await self._save(date_key, state)
        logger.debug(f"Debounced save for {date_key}: {result}")
        return result

    async def flush(self, date_key: Optional[str] = None) -> Dict[str, Any]:
        """Run waiting saves now and wait for every running save to finish.

        Returns the latest save result per flushed date (None when that save
        raised).
        """
        keys = [date_key] if date_key is not None else list(self._timers)
        for key in keys:
            handle = self._timers.get(key)
            if handle is not None:
                handle.cancel()
                self._fire(key)
        tasks = {key: task for key, task in self._inflight.items()
                 if date_key is None or key == date_key}
        if tasks:
            await asyncio.wait(list(tasks.values()))
        return {key: _outcome(task) for key, task in tasks.items()}
