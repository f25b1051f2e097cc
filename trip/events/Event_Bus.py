"""Simple Event Bus / Observer implementation for sync notifications.

Event names used so far:
  sync.save_failed -> payload {"trip_id": str, "entity": str, "error": str, "retryable": bool}
  sync.fallback -> payload {"trip_id": str, "entity": str, "operation": "load"|"save", "error": str}
  sync.integrity_mismatch -> payload {"trip_id": str, "expected": int, "actual": int}
  sync.rolled_back -> payload {"trip_id": str, "entity": str, "error": str}
  shopping.changed -> payload {"trip_id": str, "count": int}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from threading import Lock
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
SYNC_SAVE_FAILED = "sync.save_failed"
SYNC_FALLBACK = "sync.fallback"
SYNC_INTEGRITY_MISMATCH = "sync.integrity_mismatch"
SYNC_ROLLED_BACK = "sync.rolled_back"
SHOPPING_CHANGED = "shopping.changed"


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
			if callback in self._subscribers.get(event_name, []):
				self._subscribers[event_name].remove(callback)

	def publish(self, event_name: str, payload: Any):
		with self._lock:
			callbacks = list(self._subscribers.get(event_name, []))
		for cb in callbacks:
			try:
				cb(event_name, payload)
			except Exception as e:  # pragma: no cover
				logger.error(f"Error delivering {event_name} to {cb}: {e}")


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish',
	'SYNC_SAVE_FAILED', 'SYNC_FALLBACK', 'SYNC_INTEGRITY_MISMATCH', 'SYNC_ROLLED_BACK', 'SHOPPING_CHANGED'
]
