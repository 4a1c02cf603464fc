"""Web-facing observers for sync status events.

This module subscribes to the GLOBAL_EVENT_BUS for:
  - plan.saved
  - plan.sync_failed
  - plan.cleared
  - sync.bulk_completed

and stores a lightweight in-memory ring buffer of recent events that the
web layer exposes at /api/sync/events, so a page can show a sync-status
indicator by polling.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer; uvicorn may run the endpoint in a worker thread.
  * A MAX_EVENTS cap prevents unbounded memory growth.
"""
from __future__ import annotations
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone
from enum import Enum

from .Event_Bus import (
    GLOBAL_EVENT_BUS, PLAN_SAVED, PLAN_SYNC_FAILED, PLAN_CLEARED, SYNC_BULK_COMPLETED
)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat(),
        }
        if isinstance(payload, dict):
            for k in ('page', 'date', 'error', 'pushed', 'failed'):
                if k in payload:
                    evt[k] = payload[k]
            result = payload.get('result')
            if result is not None:
                evt['result'] = result.value if isinstance(result, Enum) else str(result)
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in (PLAN_SAVED, PLAN_SYNC_FAILED, PLAN_CLEARED, SYNC_BULK_COMPLETED):
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns the last N (up to MAX_EVENTS) events.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events', 'MAX_EVENTS']
