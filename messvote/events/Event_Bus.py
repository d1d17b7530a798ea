"""Simple Event Bus / Observer implementation for store and voting changes.

Event names:
  plans.changed -> payload {"date": "YYYY-MM-DD" | None, "plans": [plan dict, ...]}
  settings.changed -> payload {"voting_start_time", "voting_end_time", "menu_cycle_days"}
  votes.recorded -> payload {"date", "meal_type", "changed": bool}
  store.changed -> payload {"collection": str, "key": tuple, "op": "set" | "update" | "delete"}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from threading import Lock
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
PLANS_CHANGED = "plans.changed"
SETTINGS_CHANGED = "settings.changed"
VOTES_RECORDED = "votes.recorded"
STORE_CHANGED = "store.changed"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)
		self._lock = Lock()

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		with self._lock:
			if callback not in self._subscribers[event_name]:
				self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		with self._lock:
			try:
				self._subscribers[event_name].remove(callback)
			except (ValueError, KeyError):
				pass

	def subscriber_count(self, event_name: str) -> int:
		with self._lock:
			return len(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any):
		with self._lock:
			callbacks = list(self._subscribers.get(event_name, []))
		for cb in callbacks:
			# One failing listener must not starve the others
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = ['EventBus', 'PLANS_CHANGED', 'SETTINGS_CHANGED', 'VOTES_RECORDED', 'STORE_CHANGED']
