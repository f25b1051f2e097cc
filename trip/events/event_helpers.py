"""Event helper utilities.

Typed helpers for publishing sync events on the global event bus, so callers
do not build payload dicts by hand.

Quick import:
    from trip.events.event_helpers import (
        publish_save_failed, publish_fallback, publish_integrity_mismatch,
        publish_rolled_back, publish_shopping_changed
    )
"""
from __future__ import annotations
from .Event_Bus import (
    publish,
    SYNC_SAVE_FAILED, SYNC_FALLBACK, SYNC_INTEGRITY_MISMATCH, SYNC_ROLLED_BACK, SHOPPING_CHANGED,
)

__all__ = [
    'publish_save_failed', 'publish_fallback', 'publish_integrity_mismatch',
    'publish_rolled_back', 'publish_shopping_changed',
]


def publish_save_failed(trip_id: str, entity: str, error: Exception):
    """Publish a sync.save_failed event (error channel of the write coalescer)."""
    publish(SYNC_SAVE_FAILED, {
        'trip_id': trip_id,
        'entity': entity,
        'error': str(error),
        'retryable': bool(getattr(error, 'retryable', False)),
    })


def publish_fallback(trip_id: str, entity: str, operation: str, error: Exception):
    """Publish a sync.fallback event when the remote store failed and local data was used."""
    publish(SYNC_FALLBACK, {
        'trip_id': trip_id,
        'entity': entity,
        'operation': operation,
        'error': str(error),
    })


def publish_integrity_mismatch(trip_id: str, expected: int, actual: int):
    publish(SYNC_INTEGRITY_MISMATCH, {
        'trip_id': trip_id,
        'expected': expected,
        'actual': actual,
    })


def publish_rolled_back(trip_id: str, entity: str, error: Exception):
    publish(SYNC_ROLLED_BACK, {
        'trip_id': trip_id,
        'entity': entity,
        'error': str(error),
    })


def publish_shopping_changed(trip_id: str, count: int):
    publish(SHOPPING_CHANGED, {'trip_id': trip_id, 'count': count})
