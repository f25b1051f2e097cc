"""Per-process registry of loaded trips.

The API keeps one ``TripData`` per trip so every request for that trip goes
through the same coalescers. Loading a trip can hit the remote store, so it
happens under a lock of its own: a slow trip only blocks requests for that
trip.
"""
import logging
from threading import Lock
from typing import Dict

from trip.logic.sync.trip_data import TripData
from trip.utilities.constants import SAVE_DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)


class TripRegistry:
    def __init__(self, repository, scheduler=None, delay: float = SAVE_DEBOUNCE_SECONDS):
        self.repository = repository
        self.scheduler = scheduler
        self.delay = delay
        self._trips: Dict[str, TripData] = {}
        self._loading: Dict[str, Lock] = {}
        self._lock = Lock()

    def get(self, trip_id: str) -> TripData:
        with self._lock:
            data = self._trips.get(trip_id)
            if data is not None:
                return data
            trip_lock = self._loading.setdefault(trip_id, Lock())
        with trip_lock:
            with self._lock:
                data = self._trips.get(trip_id)
            if data is not None:
                return data
            data = TripData(trip_id, self.repository, scheduler=self.scheduler, delay=self.delay).load()
            with self._lock:
                self._trips[trip_id] = data
                self._loading.pop(trip_id, None)
            logger.info(f"Loaded trip {trip_id}")
            return data

    def close_all(self):
        with self._lock:
            trips = list(self._trips.values())
            self._trips.clear()
        for data in trips:
            data.close()
