"""Packing item status transitions.

The three flags {needs_to_buy, is_owned, is_packed} are constrained:
owning an item clears "needs to buy" and marking it "needs to buy" clears
ownership. ``is_packed`` is independent and is allowed even when the item is
not owned.
"""
from typing import Callable, List
from trip.domain.PackingItem import PackingItem
from trip.domain.errors import NotFound


def set_owned(item: PackingItem, value: bool = True) -> PackingItem:
    if value:
        return item.copy(is_owned=True, needs_to_buy=False)
    return item.copy(is_owned=False)


def set_needs_to_buy(item: PackingItem, value: bool = True) -> PackingItem:
    if value:
        return item.copy(needs_to_buy=True, is_owned=False)
    return item.copy(needs_to_buy=False)


def set_packed(item: PackingItem, value: bool = True) -> PackingItem:
    return item.copy(is_packed=value)


def toggle_owned(item: PackingItem) -> PackingItem:
    return set_owned(item, not item.is_owned)


def toggle_needs_to_buy(item: PackingItem) -> PackingItem:
    return set_needs_to_buy(item, not item.needs_to_buy)


def toggle_packed(item: PackingItem) -> PackingItem:
    return set_packed(item, not item.is_packed)


TRANSITIONS = {
    'owned': toggle_owned,
    'needs-to-buy': toggle_needs_to_buy,
    'packed': toggle_packed,
}


def apply_status_to(items: List[PackingItem], item_id: str,
                    transition: Callable[[PackingItem], PackingItem]) -> List[PackingItem]:
    '''Returns a new list with ``transition`` applied to the item with ``item_id``.'''
    found = False
    updated = []
    for item in items:
        if item.id == item_id:
            updated.append(transition(item))
            found = True
        else:
            updated.append(item)
    if not found:
        raise NotFound(item_id, entity="packing item")
    return updated


def reset_statuses(items: List[PackingItem]) -> List[PackingItem]:
    '''Clears every status flag and group assignment, keeping the items themselves.'''
    return [item.copy(is_owned=False, needs_to_buy=False, is_packed=False, assigned_group_id=None)
            for item in items]


__all__ = ['set_owned', 'set_needs_to_buy', 'set_packed', 'toggle_owned', 'toggle_needs_to_buy',
           'toggle_packed', 'apply_status_to', 'reset_statuses', 'TRANSITIONS']
