"""Default packing/meal collections for trips that have none yet.

Template content itself is supplied by the application; the repository only
asks for it the first time a trip's collection comes back empty.
"""
from typing import Dict, List, Optional
from uuid import uuid4

from trip.domain.Meal import Meal
from trip.domain.PackingItem import PackingItem


class TemplateProvider:
    """Provider that has no defaults. Subclass or use StaticTemplateProvider."""

    def packing_items(self, trip: dict) -> List[PackingItem]:
        return []

    def meals(self, trip: dict) -> List[Meal]:
        return []


class StaticTemplateProvider(TemplateProvider):
    """Serves fixed template tables keyed by trip type, with fresh ids per trip."""

    def __init__(self, packing: Optional[Dict[str, List[dict]]] = None, meals: Optional[Dict[str, List[dict]]] = None):
        self._packing = packing or {}
        self._meals = meals or {}

    @staticmethod
    def _trip_type(trip: dict) -> str:
        return (trip or {}).get('tripType', '')

    def packing_items(self, trip: dict) -> List[PackingItem]:
        rows = self._packing.get(self._trip_type(trip), [])
        return [PackingItem.from_dict({**row, 'id': str(uuid4())}) for row in rows]

    def meals(self, trip: dict) -> List[Meal]:
        rows = self._meals.get(self._trip_type(trip), [])
        return [Meal.from_dict({**row, 'id': str(uuid4())}) for row in rows]


__all__ = ['TemplateProvider', 'StaticTemplateProvider']
