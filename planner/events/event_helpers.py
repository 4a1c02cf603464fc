"""Event helper utilities.

Helpers for publishing persistence and sync events. Each helper defaults to
the global event bus; components holding their own bus pass it explicitly.

Quick import:
    from planner.events.event_helpers import (
        publish_plan_saved, publish_sync_failed, publish_plan_cleared, publish_bulk_sync
    )
"""
from __future__ import annotations
from typing import Any, Iterable, Optional

from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    PLAN_SAVED, PLAN_SYNC_FAILED, PLAN_CLEARED, SYNC_BULK_COMPLETED
)

__all__ = [
    'publish_plan_saved', 'publish_sync_failed', 'publish_plan_cleared', 'publish_bulk_sync',
]


def _bus(bus: Optional[EventBus]) -> EventBus:
    return bus if bus is not None else GLOBAL_EVENT_BUS


def publish_plan_saved(page: str, date_key: str, result: Any, bus: Optional[EventBus] = None):
    """Publish a plan.saved event (local write done, remote outcome in `result`)."""
    _bus(bus).publish(PLAN_SAVED, {'page': page, 'date': date_key, 'result': result})


def publish_sync_failed(page: str, date_key: str, result: Any, error: str, bus: Optional[EventBus] = None):
    _bus(bus).publish(PLAN_SYNC_FAILED, {
        'page': page,
        'date': date_key,
        'result': result,
        'error': error,
    })


def publish_plan_cleared(page: str, date_key: str, bus: Optional[EventBus] = None):
    _bus(bus).publish(PLAN_CLEARED, {'page': page, 'date': date_key})


def publish_bulk_sync(pushed: Iterable[str], failed: Iterable[str], bus: Optional[EventBus] = None):
    """Publish the outcome of pushing every cached entry to the remote store.

    Payload structure:
        {'pushed': <int>, 'failed': <int>, 'failed_keys': ['planner:2025-01-01', ...]}
    """
    pushed_list = list(pushed)
    failed_list = list(failed)
    _bus(bus).publish(SYNC_BULK_COMPLETED, {
        'pushed': len(pushed_list),
        'failed': len(failed_list),
        'failed_keys': failed_list,
    })
