"""Error taxonomy for the trip data layer.

None of these are fatal: loads degrade to the local cache and saves always
land in the local store at least.
"""
from typing import Any, List, Optional


class TripDataError(Exception):
    """Base class for every error raised by the persistence layer."""


class BackendUnavailable(TripDataError):
    """The remote transport failed. Data was kept locally."""

    def __init__(self, message: str, entity: Optional[str] = None, retryable: bool = True):
        super().__init__(message)
        self.entity = entity
        self.retryable = retryable


class PersistenceIntegrityMismatch(TripDataError):
    """Post-write verification read back a different number of group assignments."""

    def __init__(self, trip_id: str, expected: int, actual: int):
        super().__init__(f"Trip {trip_id}: expected {expected} group-assigned items after save, found {actual}")
        self.trip_id = trip_id
        self.expected = expected
        self.actual = actual


class ValidationRejected(TripDataError):
    """A record failed schema validation. Not retried."""

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(message)
        self.details = details or []


class NotFound(TripDataError):
    """An operation referenced a record id that no longer exists."""

    def __init__(self, record_id: str, entity: str = "record"):
        super().__init__(f"{entity} '{record_id}' not found")
        self.record_id = record_id
        self.entity = entity
