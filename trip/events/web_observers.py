"""Web-facing observers for sync events.

This module subscribes to the GLOBAL_EVENT_BUS for every sync.* event and
shopping.changed, and stores a lightweight in-memory ring buffer of recent
events that the web layer can poll to show "saved locally only" or
"verification failed" notices.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * Debounced saves run on timer threads, so the buffer is guarded by a Lock.
  * A MAX_EVENTS cap prevents unbounded memory growth.
"""
from __future__ import annotations
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    GLOBAL_EVENT_BUS, SYNC_SAVE_FAILED, SYNC_FALLBACK, SYNC_INTEGRITY_MISMATCH,
    SYNC_ROLLED_BACK, SHOPPING_CHANGED,
)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300
_started = False
_OBSERVED = (SYNC_SAVE_FAILED, SYNC_FALLBACK, SYNC_INTEGRITY_MISMATCH, SYNC_ROLLED_BACK, SHOPPING_CHANGED)


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            for k in ('trip_id', 'entity', 'operation', 'error', 'retryable', 'expected', 'actual', 'count'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in _OBSERVED:
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True


def stop():
    global _started
    for name in _OBSERVED:
        GLOBAL_EVENT_BUS.unsubscribe(name, _record)
    _started = False


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


__all__ = ['start', 'stop', 'get_events']
