"""Timer scheduling used by the write coalescer and the retention sweeper.

``ThreadScheduler`` runs callbacks on daemon ``threading.Timer`` threads.
``ManualScheduler`` keeps a virtual clock that only moves when ``advance`` is
called, so timer-driven behavior can be tested deterministically.
"""
from __future__ import annotations
import heapq
import itertools
import threading
import time
from typing import Callable, List, Tuple


class ThreadScheduler:
    def now(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callable[[], None]):
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class _ManualHandle:
    def __init__(self, when: float):
        self.when = when
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, _ManualHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self._now + delay)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h, _ in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every callback that falls due. Returns how many ran."""
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            callback()
            ran += 1
        self._now = target
        return ran


__all__ = ['ThreadScheduler', 'ManualScheduler']
