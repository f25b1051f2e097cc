"""Per-trip data facade.

Holds one ``WriteCoalescer`` per collection of a trip and keeps the derived
shopping list in step with its sources: every change to packing items, meals
or the deleted-ingredient blacklist re-runs the materializer, and the
shopping list is only written when the result actually differs.
"""
import logging
from typing import Dict, List, Optional
from uuid import uuid4

from trip.domain.Meal import Meal
from trip.domain.PackingItem import PackingItem
from trip.domain.ShoppingItem import ShoppingItem
from trip.domain.TodoItem import TodoItem
from trip.domain.errors import NotFound, TripDataError
from trip.events.event_helpers import publish_rolled_back, publish_save_failed, publish_shopping_changed
from trip.logic.packing.status import TRANSITIONS, apply_status_to, reset_statuses
from trip.logic.shopping.materializer import materialize, shopping_list_changed
from trip.logic.sync.coalescer import WriteCoalescer
from trip.utilities.constants import (
    PACKING_ITEMS, MEALS, SHOPPING_ITEMS, TODO_ITEMS, DELETED_INGREDIENTS, SAVE_DEBOUNCE_SECONDS,
)

logger = logging.getLogger(__name__)


class TripData:
    def __init__(self, trip_id: str, repository, scheduler=None, delay: float = SAVE_DEBOUNCE_SECONDS,
                 trip: Optional[dict] = None):
        self.trip_id = trip_id
        self.repository = repository
        self.trip = trip
        self.packing = self._coalescer(PACKING_ITEMS, repository.save_packing_items, scheduler, delay)
        self.meals = self._coalescer(MEALS, repository.save_meals, scheduler, delay)
        self.shopping = self._coalescer(SHOPPING_ITEMS, repository.save_shopping_items, scheduler, delay)
        self.todos = self._coalescer(TODO_ITEMS, repository.save_todo_items, scheduler, delay)
        self.deleted_ingredients = self._coalescer(
            DELETED_INGREDIENTS, repository.save_deleted_ingredients, scheduler, delay)

    def _coalescer(self, entity: str, save, scheduler, delay: float) -> WriteCoalescer:
        def persist(items):
            return save(self.trip_id, items)

        def on_error(error: Exception):
            publish_save_failed(self.trip_id, entity, error)

        return WriteCoalescer(persist, scheduler=scheduler, delay=delay, on_error=on_error,
                              name=f"{entity} of trip {self.trip_id}")

    @property
    def coalescers(self) -> Dict[str, WriteCoalescer]:
        return {
            PACKING_ITEMS: self.packing,
            MEALS: self.meals,
            SHOPPING_ITEMS: self.shopping,
            TODO_ITEMS: self.todos,
            DELETED_INGREDIENTS: self.deleted_ingredients,
        }

    def load(self) -> "TripData":
        repo = self.repository
        self.packing.load(repo.load_packing_items(self.trip_id, self.trip))
        self.meals.load(repo.load_meals(self.trip_id, self.trip))
        self.deleted_ingredients.load(repo.load_deleted_ingredients(self.trip_id))
        self.shopping.load(repo.load_shopping_items(self.trip_id))
        self.todos.load(repo.load_todo_items(self.trip_id))
        self._rematerialize()
        return self

    # --- packing ------------------------------------------------------------
    @property
    def packing_items(self) -> List[PackingItem]:
        return self.packing.state

    def set_packing_items(self, items: List[PackingItem]):
        self.packing.update(items)
        self._rematerialize()

    def toggle_packing_status(self, item_id: str, transition: str) -> PackingItem:
        """Flip one status flag and save immediately. Reverts and re-raises if the save fails."""
        step = TRANSITIONS.get(transition)
        if step is None:
            raise ValueError(f"Unknown packing status '{transition}'")
        items = apply_status_to(self.packing.state, item_id, step)
        try:
            self.packing.commit_with_rollback(items)
        except TripDataError as e:
            publish_rolled_back(self.trip_id, PACKING_ITEMS, e)
            raise
        finally:
            self._rematerialize()
        return self._packing_item(item_id)

    def _packing_item(self, item_id: str) -> PackingItem:
        for item in self.packing.state:
            if item.id == item_id:
                return item
        raise NotFound(item_id, entity="packing item")

    def reset_packing_statuses(self):
        self.packing.update(reset_statuses(self.packing.state))
        self._rematerialize()

    # --- meals --------------------------------------------------------------
    @property
    def meal_list(self) -> List[Meal]:
        return self.meals.state

    def set_meals(self, meals: List[Meal]):
        self.meals.update(meals)
        self._rematerialize()

    def clear_meals(self):
        self.meals.update([])
        self.deleted_ingredients.update([])
        self._rematerialize()

    # --- shopping -----------------------------------------------------------
    @property
    def shopping_items(self) -> List[ShoppingItem]:
        return self.shopping.state

    def refresh_shopping_list(self) -> List[ShoppingItem]:
        self._rematerialize()
        return self.shopping.state

    def set_shopping_items(self, items: List[ShoppingItem]):
        self.shopping.update(items)

    def remove_shopping_item(self, item_id: str) -> List[ShoppingItem]:
        items = self.shopping.state
        target = next((i for i in items if i.id == item_id), None)
        if target is None:
            raise NotFound(item_id, entity="shopping item")
        if target.is_meal_derived:
            name = target.name.strip().lower()
            blacklist = self.deleted_ingredients.state
            if name not in blacklist:
                self.deleted_ingredients.update(blacklist + [name])
        remaining = [i for i in items if i.id != item_id]
        self.shopping.update(remaining)
        return remaining

    def add_shopping_item(self, name: str, quantity: int = 1, category: str = 'camping') -> ShoppingItem:
        item = ShoppingItem(id=str(uuid4()), name=name.strip(), quantity=quantity, category=category)
        if category == 'food':
            name_key = item.name.lower()
            blacklist = self.deleted_ingredients.state
            if name_key in blacklist:
                self.deleted_ingredients.update([n for n in blacklist if n != name_key])
        self.shopping.update(self.shopping.state + [item])
        return item

    def _rematerialize(self):
        previous = self.shopping.state
        current = materialize(self.packing.state, self.meals.state, self.deleted_ingredients.state, previous)
        if shopping_list_changed(previous, current):
            logger.debug(f"Shopping list of trip {self.trip_id} changed: {len(previous)} -> {len(current)} items")
            self.shopping.update(current)
            publish_shopping_changed(self.trip_id, len(current))

    # --- to-dos -------------------------------------------------------------
    @property
    def todo_items(self) -> List[TodoItem]:
        return self.todos.state

    def set_todo_items(self, items: List[TodoItem]):
        ordered = [t.copy(display_order=i) for i, t in enumerate(items)]
        self.todos.update(ordered)

    # --- lifecycle ----------------------------------------------------------
    def flush(self):
        for coalescer in self.coalescers.values():
            coalescer.flush()

    def close(self):
        for coalescer in self.coalescers.values():
            coalescer.close()


__all__ = ['TripData']
