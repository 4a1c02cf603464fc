"""Simple Event Bus / Observer implementation for persistence and sync status.

Event names used so far:
  plan.saved -> payload {"page": str, "date": str, "result": SaveResult}
  plan.sync_failed -> payload {"page": str, "date": str, "result": SaveResult, "error": str}
  plan.cleared -> payload {"page": str, "date": str}
  sync.bulk_completed -> payload {"pushed": int, "failed": int, "failed_keys": [...]}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PLAN_SAVED = "plan.saved"
PLAN_SYNC_FAILED = "plan.sync_failed"
PLAN_CLEARED = "plan.cleared"
SYNC_BULK_COMPLETED = "sync.bulk_completed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		# subscriber errors never reach the publisher
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception(f"Error delivering {event_name} to {cb}")


GLOBAL_EVENT_BUS = EventBus()

__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS',
	'PLAN_SAVED', 'PLAN_SYNC_FAILED', 'PLAN_CLEARED', 'SYNC_BULK_COMPLETED'
]
