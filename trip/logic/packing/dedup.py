"""Packing item deduplication.

Concurrent saves, multi-tab writes and legacy migrations can leave several
copies of the same packing item. ``dedup_packing_items`` keeps one record per
identity key ``(name, category, is_personal)`` and prefers the copy that
carries the most user intent.
"""
import json
from typing import Dict, Iterable, List, Tuple
from trip.domain.PackingItem import PackingItem
from trip.utilities.constants import SCORE_FLAG, SCORE_GROUP


def _normalize(value: str) -> str:
    return (value or '').strip().lower()


def identity_key(item: PackingItem) -> Tuple[str, str, bool]:
    return (_normalize(item.name), _normalize(item.category), bool(item.is_personal))


def retention_score(item: PackingItem) -> int:
    """Weight of the user edits carried by a record. Group assignment counts most."""
    score = 0
    if item.is_owned:
        score += SCORE_FLAG
    if item.is_packed:
        score += SCORE_FLAG
    if item.needs_to_buy:
        score += SCORE_FLAG
    if item.notes:
        score += SCORE_FLAG
    if item.assigned_group_id:
        score += SCORE_GROUP
    return score


def _rank(item: PackingItem):
    # Last component only breaks exact ties so the winner never depends on input order
    return (retention_score(item), bool(item.assigned_group_id),
            json.dumps(item.to_dict(), sort_keys=True, default=str))


def dedup_packing_items(items: Iterable[PackingItem]) -> List[PackingItem]:
    """Merge duplicate packing items, keeping the higher-scoring copy of each.

    Args:
        items: packing items, possibly with duplicates.

    Returns:
        A new list with at most one item per identity key, ordered by the first
        appearance of each key.
    """
    winners: Dict[Tuple[str, str, bool], PackingItem] = {}
    order: List[Tuple[str, str, bool]] = []
    for item in items:
        key = identity_key(item)
        current = winners.get(key)
        if current is None:
            winners[key] = item
            order.append(key)
        elif _rank(item) > _rank(current):
            winners[key] = item
    return [winners[k] for k in order]


def count_duplicates(items: Iterable[PackingItem]) -> int:
    items = list(items)
    return len(items) - len(dedup_packing_items(items))


__all__ = ['dedup_packing_items', 'retention_score', 'identity_key', 'count_duplicates']
