"""Write coalescer: optimistic in-memory state with debounced persistence.

One coalescer owns one collection of one trip (e.g. the packing items of
trip ``t1``). ``update`` replaces the in-memory state right away; persisting
it is either immediate or deferred until no further update has arrived for
``delay`` seconds, so a burst of edits turns into a single write carrying the
final state. Each new update cancels the pending timer of the previous one.

Writes are serialized. Every snapshot gets a sequence number when it is
taken, and a snapshot older than the last one written is dropped instead of
overwriting newer state.

Persistence failures never propagate out of the timer. They are appended to
``errors``, logged and handed to ``on_error``. Only ``commit_with_rollback``
raises, after reverting its own change.
"""
import logging
from threading import Lock, RLock
from typing import Any, Callable, List, Optional, Tuple

from trip.domain.errors import BackendUnavailable, TripDataError
from trip.logic.sync.optimistic import apply_patch, diff_patch, inverse_patch
from trip.utilities.constants import SAVE_DEBOUNCE_SECONDS
from trip.utilities.scheduler import ThreadScheduler

logger = logging.getLogger(__name__)


class WriteCoalescer:
    def __init__(self, persist: Callable[[List[Any]], Any], scheduler=None, delay: float = SAVE_DEBOUNCE_SECONDS,
                 on_error: Optional[Callable[[Exception], None]] = None, name: str = 'collection'):
        self._persist = persist
        self.scheduler = scheduler or ThreadScheduler()
        self.delay = delay
        self.on_error = on_error
        self.name = name
        self.errors: List[Exception] = []
        self._state: List[Any] = []
        self._pending = False
        self._handle = None
        self._loaded = False
        self._lock = RLock()
        self._write_lock = Lock()
        self._seq = 0
        self._written_seq = 0

    @property
    def state(self) -> List[Any]:
        with self._lock:
            return list(self._state)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    def load(self, items: List[Any]):
        """Replace the state with already-persisted data, without writing it back."""
        with self._lock:
            self._cancel_timer()
            self._pending = False
            self._state = list(items)
            self._loaded = True

    def update(self, items: List[Any], immediate: bool = False):
        with self._lock:
            self._state = list(items)
            self._loaded = True
            self._cancel_timer()
            if not immediate:
                self._pending = True
                self._handle = self.scheduler.call_later(self.delay, self._fire)
                return
            self._pending = False
            seq, snapshot = self._snapshot()
        self._write(seq, snapshot)

    def flush(self) -> bool:
        """Persist a pending update now. Returns False when nothing was pending."""
        with self._lock:
            if not self._pending:
                return False
            self._cancel_timer()
            self._pending = False
            seq, snapshot = self._snapshot()
        self._write(seq, snapshot)
        return True

    def close(self):
        """Final save of the current state. A coalescer that never held data writes nothing."""
        with self._lock:
            self._cancel_timer()
            self._pending = False
            if not self._loaded:
                return
            seq, snapshot = self._snapshot()
        self._write(seq, snapshot)

    def commit_with_rollback(self, items: List[Any]):
        """Persist ``items`` immediately; revert the change and raise if that fails.

        The revert is applied on top of the current state, so edits made while
        the write was in flight are kept. The reverted state is then saved on
        the normal debounce path. Failures that are not ``TripDataError`` (a
        full disk, say) are raised as ``BackendUnavailable``.
        """
        with self._lock:
            patch = diff_patch(self._state, items)
            self._state = list(items)
            self._loaded = True
            self._cancel_timer()
            self._pending = False
            seq, snapshot = self._snapshot()
        try:
            self._persist_in_order(seq, snapshot)
        except Exception as e:
            logger.warning(f"Rolling back {self.name} after failed save: {e}")
            with self._lock:
                self._state = apply_patch(self._state, inverse_patch(patch))
                self._pending = True
                self._handle = self.scheduler.call_later(self.delay, self._fire)
            if isinstance(e, TripDataError):
                self._report(e)
                raise
            error = BackendUnavailable(f"Failed to save {self.name}: {e}", retryable=True)
            self._report(error)
            raise error from e

    # --- internals ----------------------------------------------------------
    def _cancel_timer(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _snapshot(self) -> Tuple[int, List[Any]]:
        # Caller holds self._lock
        self._seq += 1
        return self._seq, list(self._state)

    def _fire(self):
        with self._lock:
            if not self._pending:
                return
            self._pending = False
            self._handle = None
            seq, snapshot = self._snapshot()
        self._write(seq, snapshot)

    def _persist_in_order(self, seq: int, snapshot: List[Any]) -> bool:
        with self._write_lock:
            if seq < self._written_seq:
                logger.debug(f"Dropping stale snapshot {seq} of {self.name}")
                return False
            self._written_seq = seq
            self._persist(snapshot)
            return True

    def _write(self, seq: int, snapshot: List[Any]):
        try:
            self._persist_in_order(seq, snapshot)
        except Exception as e:
            logger.error(f"Failed to save {self.name}: {e}")
            self._report(e)

    def _report(self, error: Exception):
        self.errors.append(error)
        if self.on_error is not None:
            self.on_error(error)


__all__ = ['WriteCoalescer']
