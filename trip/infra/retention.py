"""Retention sweeper for ephemeral local data.

Temporary and cache entries in the local store (keys starting with
``temp_`` or ``cache_``) carry a ``timestamp`` field in epoch seconds. The
sweeper deletes those older than the retention window, once when started and
then on a fixed interval until stopped. Canonical trip collections are never
touched.
"""
import logging
from threading import Lock
from typing import List, Optional

from trip.infra.Local_Store import LocalStore
from trip.utilities.constants import CLEANUP_INTERVAL_SECONDS, TEMP_RETENTION_SECONDS, EPHEMERAL_KEY_PREFIXES
from trip.utilities.scheduler import ThreadScheduler

logger = logging.getLogger(__name__)


def is_ephemeral_key(key: str) -> bool:
    return key.startswith(EPHEMERAL_KEY_PREFIXES)


def expired_keys(store: LocalStore, now: float, retention: float = TEMP_RETENTION_SECONDS) -> List[str]:
    """Ephemeral keys whose timestamp is older than ``now - retention``.

    Entries with a timestamp that is not a number are treated as corrupt and
    returned as well; entries without a timestamp are kept.
    """
    cutoff = now - retention
    stale = []
    for key in store.keys():
        if not is_ephemeral_key(key):
            continue
        value = store.load(key)
        if not isinstance(value, dict) or 'timestamp' not in value:
            continue
        ts = value['timestamp']
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            stale.append(key)
        elif ts < cutoff:
            stale.append(key)
    return stale


class RetentionSweeper:
    def __init__(self, store: LocalStore, scheduler=None, interval: float = CLEANUP_INTERVAL_SECONDS,
                 retention: float = TEMP_RETENTION_SECONDS):
        self.store = store
        self.scheduler = scheduler or ThreadScheduler()
        self.interval = interval
        self.retention = retention
        self._handle = None
        self._running = False
        self._lock = Lock()
        self.last_removed = 0

    @property
    def running(self) -> bool:
        return self._running

    def sweep(self) -> int:
        """Delete expired ephemeral entries now. Returns how many were removed."""
        stale = expired_keys(self.store, self.scheduler.now(), self.retention)
        removed = self.store.delete_many(stale) if stale else 0
        self.last_removed = removed
        if removed:
            logger.info(f"Removed {removed} expired temporary entries from local store")
        return removed

    def _tick(self):
        with self._lock:
            if not self._running:
                return
        try:
            self.sweep()
        except OSError as e:
            logger.error(f"Retention sweep failed: {e}")
        with self._lock:
            if self._running:
                self._handle = self.scheduler.call_later(self.interval, self._tick)

    def start(self):
        """Run one sweep immediately, then every ``interval`` seconds. Idempotent."""
        with self._lock:
            if self._running:
                return
            self._running = True
        self._tick()

    def stop(self):
        with self._lock:
            self._running = False
            handle: Optional[object] = self._handle
            self._handle = None
        if handle is not None:
            handle.cancel()


__all__ = ['RetentionSweeper', 'expired_keys', 'is_ephemeral_key']
