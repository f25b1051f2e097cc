"""Shopping list materializer.

The shopping list of a trip is mostly derived data. ``materialize`` rebuilds
it from the packing items, the meals and the deleted-ingredient blacklist,
reusing the previous list so that checked state and ids survive:

- packing items that need to be bought and are not owned become ``camping``
  items linked through ``source_item_id``;
- meal ingredients (minus the blacklist and names too long to store) become
  ``food`` items whose quantity is the number of meals using them. An
  ingredient shared by meals of different groups is left unassigned;
- camping items without a source are manual and always kept;
- everything else that no longer has a source is an orphan and is dropped.

The function is pure and idempotent: running it again on its own output with
the same sources returns an identical list.
"""
import logging
from collections import OrderedDict
from typing import Callable, Dict, Iterable, List, Optional
from uuid import uuid4
from trip.domain.Meal import Meal
from trip.domain.PackingItem import PackingItem
from trip.domain.ShoppingItem import ShoppingItem
from trip.utilities.constants import MAX_NAME_LENGTH

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return (name or '').strip().lower()


def _new_id() -> str:
    return str(uuid4())


def packing_candidates(packing: Iterable[PackingItem]) -> "OrderedDict[str, PackingItem]":
    """Packing items that belong on the shopping list, keyed by id."""
    out: "OrderedDict[str, PackingItem]" = OrderedDict()
    for item in packing:
        if item.needs_to_buy and not item.is_owned and item.id not in out:
            out[item.id] = item
    return out


def ingredient_totals(meals: Iterable[Meal], deleted_ingredients: Iterable[str] = ()) -> "OrderedDict[str, Dict]":
    """Count ingredient usage across meals.

    Returns an ordered mapping normalized name -> {name, quantity, group}, where
    group is the single group shared by every meal using the ingredient, or
    None when the meals disagree (an unassigned meal counts as its own value).
    """
    blacklist = {_normalize(n) for n in deleted_ingredients}
    totals: "OrderedDict[str, Dict]" = OrderedDict()
    for meal in meals:
        for raw in meal.ingredients:
            key = _normalize(raw)
            if not key or key in blacklist:
                continue
            if len(key) > MAX_NAME_LENGTH:
                logger.warning(f"Skipping ingredient longer than {MAX_NAME_LENGTH} characters in meal {meal.id}")
                continue
            entry = totals.get(key)
            if entry is None:
                entry = totals[key] = {'name': raw.strip(), 'quantity': 0, 'groups': set()}
            entry['quantity'] += 1
            entry['groups'].add(meal.assigned_group_id or None)
    for entry in totals.values():
        groups = entry.pop('groups')
        entry['group'] = next(iter(groups)) if len(groups) == 1 else None
    return totals


def materialize(packing: Iterable[PackingItem], meals: Iterable[Meal], deleted_ingredients: Iterable[str],
                previous: Iterable[ShoppingItem], *, id_factory: Optional[Callable[[], str]] = None) -> List[ShoppingItem]:
    """Recompute the shopping list of a trip.

    Args:
        packing: current packing items.
        meals: current meals.
        deleted_ingredients: ingredient names the user removed from the list.
        previous: the shopping list as currently stored.
        id_factory: id generator for newly synthesized items (uuid4 by default).

    Returns:
        The reconciled list. Surviving items keep their previous position; new
        packing-derived items are appended first, then new ingredients.
    """
    make_id = id_factory or _new_id
    wanted_packing = packing_candidates(packing)
    wanted_food = ingredient_totals(meals, deleted_ingredients)

    result: List[ShoppingItem] = []
    seen_sources = set()
    seen_food = set()

    for item in previous:
        if item.source_item_id:
            # Derived from a packing item: keep verbatim while the source still qualifies
            if item.source_item_id in wanted_packing and item.source_item_id not in seen_sources:
                seen_sources.add(item.source_item_id)
                result.append(item)
            continue
        if item.category == 'camping':
            result.append(item)
            continue
        key = _normalize(item.name)
        if key in wanted_food and key not in seen_food:
            seen_food.add(key)
            entry = wanted_food[key]
            if item.quantity == entry['quantity'] and item.assigned_group_id == entry['group']:
                result.append(item)
            else:
                result.append(item.copy(quantity=entry['quantity'], assigned_group_id=entry['group']))

    for source_id, source in wanted_packing.items():
        if source_id in seen_sources:
            continue
        result.append(ShoppingItem(
            id=make_id(),
            name=source.name,
            quantity=source.quantity,
            category='camping',
            is_checked=False,
            needs_to_buy=True,
            is_owned=False,
            source_item_id=source_id,
            assigned_group_id=source.assigned_group_id,
        ))

    for key, entry in wanted_food.items():
        if key in seen_food:
            continue
        result.append(ShoppingItem(
            id=make_id(),
            name=entry['name'],
            quantity=entry['quantity'],
            category='food',
            is_checked=False,
            needs_to_buy=True,
            is_owned=False,
            assigned_group_id=entry['group'],
        ))
    return result


def shopping_list_changed(previous: List[ShoppingItem], current: List[ShoppingItem]) -> bool:
    """True when the lists differ in length or in id/quantity/group at any position."""
    if len(previous) != len(current):
        return True
    for before, after in zip(previous, current):
        if (before.id != after.id or before.quantity != after.quantity
                or before.assigned_group_id != after.assigned_group_id):
            return True
    return False


__all__ = ['materialize', 'shopping_list_changed', 'ingredient_totals', 'packing_candidates']
