"""Hybrid repository: remote store while a session is active, local store otherwise.

Rules:
  - Loads try the remote store first when signed in and fall back to the
    local copy on failure, without retrying.
  - Saves go to the remote store when signed in and are always mirrored to
    the local store. When the remote write fails the collection is still
    written locally and ``BackendUnavailable`` is raised so the caller can
    retry or report it.
  - After a successful remote save of packing items, the count of
    group-assigned items is re-read and compared. A mismatch is logged and
    published as an event, never raised or retried.
  - With no active session the remote store is never touched.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from trip.domain.Meal import Meal
from trip.domain.PackingItem import PackingItem
from trip.domain.ShoppingItem import ShoppingItem
from trip.domain.TodoItem import TodoItem
from trip.domain.errors import BackendUnavailable, NotFound, PersistenceIntegrityMismatch
from trip.events.event_helpers import publish_fallback, publish_integrity_mismatch, publish_shopping_changed
from trip.infra.Local_Store import LocalTransport
from trip.infra.retention import RetentionSweeper
from trip.infra.session import SessionState
from trip.infra.templates import TemplateProvider
from trip.logic.packing.dedup import dedup_packing_items
from trip.logic.shopping.materializer import materialize, shopping_list_changed
from trip.utilities.constants import (
    PACKING_ITEMS, MEALS, SHOPPING_ITEMS, TODO_ITEMS, DELETED_INGREDIENTS, ENTITY_STREAMS,
)
from trip.utilities.validators import (
    PackingItemInput, MealInput, ShoppingItemInput, TodoItemInput, validate_records,
)

logger = logging.getLogger(__name__)

SCHEMAS = {
    PACKING_ITEMS: PackingItemInput,
    MEALS: MealInput,
    SHOPPING_ITEMS: ShoppingItemInput,
    TODO_ITEMS: TodoItemInput,
}


def select_transport(session_active: bool, remote, local):
    """Remote store while signed in (and configured), local store otherwise."""
    if session_active and remote is not None:
        return remote
    return local


def _normalize(name: str) -> str:
    return (name or '').strip().lower()


class HybridRepository:
    def __init__(self, local: LocalTransport, remote=None, session: Optional[SessionState] = None,
                 templates: Optional[TemplateProvider] = None, sweeper: Optional[RetentionSweeper] = None,
                 verify_group_assignments: bool = True):
        self.local = local
        self.remote = remote
        self.session = session or SessionState()
        self.templates = templates or TemplateProvider()
        self.verify_group_assignments = verify_group_assignments
        self.integrity_failures: List[PersistenceIntegrityMismatch] = []
        self.sweeper = sweeper
        if self.sweeper is not None:
            self.sweeper.start()

    def close(self):
        if self.sweeper is not None:
            self.sweeper.stop()

    # --- backend selection --------------------------------------------------
    def _transport(self):
        return select_transport(self.session.is_active(), self.remote, self.local)

    def _load(self, entity: str, trip_id: str) -> List[Any]:
        transport = self._transport()
        if transport is self.local:
            return self.local.load(entity, trip_id)
        try:
            return transport.load(entity, trip_id)
        except BackendUnavailable as e:
            logger.warning(f"Failed to load {entity} for trip {trip_id} from remote, falling back to local: {e}")
            publish_fallback(trip_id, entity, 'load', e)
            return self.local.load(entity, trip_id)

    def _save(self, entity: str, trip_id: str, records: List[Any]) -> Dict[str, Any]:
        schema = SCHEMAS.get(entity)
        if schema is not None:
            validate_records(schema, records, entity)
        transport = self._transport()
        if transport is self.local:
            self.local.save(entity, trip_id, records)
            return {'backend': 'local', 'count': len(records)}
        try:
            transport.save(entity, trip_id, records)
        except BackendUnavailable as e:
            logger.error(f"Failed to save {entity} for trip {trip_id} remotely, saving locally: {e}")
            self.local.save(entity, trip_id, records)
            publish_fallback(trip_id, entity, 'save', e)
            raise BackendUnavailable(f"{entity} saved locally only: {e}", entity=entity, retryable=True) from e
        # Mirror locally
        self.local.save(entity, trip_id, records)
        return {'backend': 'remote', 'count': len(records)}

    # --- packing items ------------------------------------------------------
    def load_packing_items(self, trip_id: str, trip: Optional[dict] = None) -> List[PackingItem]:
        items = [PackingItem.from_dict(r) for r in self._load(PACKING_ITEMS, trip_id)]
        unique = dedup_packing_items(items)
        if len(unique) != len(items):
            logger.info(f"Merged {len(items) - len(unique)} duplicate packing items for trip {trip_id}")
        if not unique and trip is not None:
            unique = self.templates.packing_items(trip)
            if unique:
                logger.info(f"Seeding trip {trip_id} with {len(unique)} template packing items")
                self.save_packing_items(trip_id, unique)
        return unique

    def save_packing_items(self, trip_id: str, items: List[PackingItem]) -> Dict[str, Any]:
        records = [i.to_dict() for i in items]
        result = self._save(PACKING_ITEMS, trip_id, records)
        if result['backend'] == 'remote' and self.verify_group_assignments:
            result['verified'] = self._verify_group_assignments(trip_id, records)
        return result

    def _verify_group_assignments(self, trip_id: str, records: List[dict]) -> Optional[bool]:
        expected = sum(1 for r in records if r.get('assignedGroupId'))
        try:
            stored = self.remote.load(PACKING_ITEMS, trip_id)
        except BackendUnavailable as e:
            logger.warning(f"Could not verify packing items for trip {trip_id}: {e}")
            return None
        actual = sum(1 for r in stored if r.get('assignedGroupId'))
        if actual != expected:
            mismatch = PersistenceIntegrityMismatch(trip_id, expected, actual)
            logger.error(f"Persistence integrity failure: {mismatch}")
            self.integrity_failures.append(mismatch)
            publish_integrity_mismatch(trip_id, expected, actual)
            return False
        return True

    # --- meals --------------------------------------------------------------
    def load_meals(self, trip_id: str, trip: Optional[dict] = None) -> List[Meal]:
        meals = [Meal.from_dict(r) for r in self._load(MEALS, trip_id)]
        if not meals and trip is not None:
            meals = self.templates.meals(trip)
            if meals:
                logger.info(f"Seeding trip {trip_id} with {len(meals)} template meals")
                self.save_meals(trip_id, meals)
        return meals

    def save_meals(self, trip_id: str, meals: List[Meal]) -> Dict[str, Any]:
        return self._save(MEALS, trip_id, [m.to_dict() for m in meals])

    def clear_meals(self, trip_id: str) -> List[ShoppingItem]:
        """Remove every meal, forget deleted ingredients and refresh the shopping list."""
        self.save_meals(trip_id, [])
        self.save_deleted_ingredients(trip_id, [])
        return self.refresh_shopping_list(trip_id, meals=[])

    # --- shopping items -----------------------------------------------------
    def load_shopping_items(self, trip_id: str) -> List[ShoppingItem]:
        return [ShoppingItem.from_dict(r) for r in self._load(SHOPPING_ITEMS, trip_id)]

    def save_shopping_items(self, trip_id: str, items: List[ShoppingItem]) -> Dict[str, Any]:
        return self._save(SHOPPING_ITEMS, trip_id, [i.to_dict() for i in items])

    def refresh_shopping_list(self, trip_id: str, packing: Optional[List[PackingItem]] = None,
                              meals: Optional[List[Meal]] = None,
                              previous: Optional[List[ShoppingItem]] = None) -> List[ShoppingItem]:
        """Rematerialize the shopping list from current sources; persist only when it changed."""
        if packing is None:
            packing = self.load_packing_items(trip_id)
        if meals is None:
            meals = self.load_meals(trip_id)
        if previous is None:
            previous = self.load_shopping_items(trip_id)
        deleted = self.load_deleted_ingredients(trip_id)
        current = materialize(packing, meals, deleted, previous)
        if not shopping_list_changed(previous, current):
            return previous
        try:
            self.save_shopping_items(trip_id, current)
        except BackendUnavailable as e:
            logger.warning(f"Shopping list for trip {trip_id} kept locally: {e}")
        publish_shopping_changed(trip_id, len(current))
        return current

    def remove_shopping_item(self, trip_id: str, item_id: str) -> List[ShoppingItem]:
        """Delete a shopping item; meal ingredients are also blacklisted so they stay gone."""
        items = self.load_shopping_items(trip_id)
        target = next((i for i in items if i.id == item_id), None)
        if target is None:
            raise NotFound(item_id, entity="shopping item")
        if target.is_meal_derived:
            deleted = self.load_deleted_ingredients(trip_id)
            self.save_deleted_ingredients(trip_id, deleted + [target.name])
        remaining = [i for i in items if i.id != item_id]
        self.save_shopping_items(trip_id, remaining)
        return remaining

    def add_manual_shopping_item(self, trip_id: str, name: str, quantity: int = 1,
                                 category: str = 'camping') -> ShoppingItem:
        item = ShoppingItem(id=str(uuid4()), name=name.strip(), quantity=quantity, category=category)
        if category == 'food':
            deleted = self.load_deleted_ingredients(trip_id)
            if _normalize(name) in deleted:
                self.save_deleted_ingredients(trip_id, [d for d in deleted if d != _normalize(name)])
        self.save_shopping_items(trip_id, self.load_shopping_items(trip_id) + [item])
        return item

    # --- deleted ingredients ------------------------------------------------
    def load_deleted_ingredients(self, trip_id: str) -> List[str]:
        return sorted({_normalize(n) for n in self._load(DELETED_INGREDIENTS, trip_id)
                       if isinstance(n, str) and _normalize(n)})

    def save_deleted_ingredients(self, trip_id: str, names: Iterable[str]) -> Dict[str, Any]:
        cleaned = sorted({_normalize(n) for n in names if _normalize(n)})
        return self._save(DELETED_INGREDIENTS, trip_id, cleaned)

    # --- to-do items --------------------------------------------------------
    def load_todo_items(self, trip_id: str) -> List[TodoItem]:
        items = [TodoItem.from_dict(r) for r in self._load(TODO_ITEMS, trip_id)]
        return sorted(items, key=lambda t: t.display_order)

    def save_todo_items(self, trip_id: str, items: List[TodoItem]) -> Dict[str, Any]:
        return self._save(TODO_ITEMS, trip_id, [t.to_dict() for t in items])

    # --- migration ----------------------------------------------------------
    def migrate_local_to_remote(self, trip_ids: Iterable[str]) -> Dict[str, int]:
        """Push every local collection of the given trips to the remote store after sign-in.

        Returns a mapping entity -> number of records migrated. Remote failures propagate.
        """
        migrated = {entity: 0 for entity in ENTITY_STREAMS}
        if self.remote is None or not self.session.is_active():
            logger.warning("Cannot migrate data: user not signed in")
            return migrated
        for trip_id in trip_ids:
            for entity in migrated:
                records = self.local.load(entity, trip_id)
                if records:
                    self.remote.save(entity, trip_id, records)
                    migrated[entity] += len(records)
                    logger.info(f"Migrated {len(records)} {entity} for trip {trip_id}")
        return migrated


__all__ = ['HybridRepository', 'select_transport']
