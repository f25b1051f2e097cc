"""Optimistic update patches.

A patch records what changed between two versions of a collection, keyed by
record id, so that a failed write can be undone on top of whatever the
collection looks like by the time the failure is known:

    patch = diff_patch(before, after)
    ...
    reverted = apply_patch(current, inverse_patch(patch))

Records only need an ``id`` attribute and value equality.
"""
from typing import Any, Dict, List, Sequence


def diff_patch(before: Sequence[Any], after: Sequence[Any]) -> Dict[str, Any]:
    old = {item.id: item for item in before}
    new = {item.id: item for item in after}
    return {
        'added': {i: new[i] for i in new if i not in old},
        'removed': {i: old[i] for i in old if i not in new},
        'changed': {i: (old[i], new[i]) for i in new if i in old and old[i] != new[i]},
        'order': ([item.id for item in before], [item.id for item in after]),
    }


def inverse_patch(patch: Dict[str, Any]) -> Dict[str, Any]:
    before_order, after_order = patch['order']
    return {
        'added': dict(patch['removed']),
        'removed': dict(patch['added']),
        'changed': {i: (new, old) for i, (old, new) in patch['changed'].items()},
        'order': (after_order, before_order),
    }


def apply_patch(items: Sequence[Any], patch: Dict[str, Any]) -> List[Any]:
    """Apply ``patch`` to ``items`` and return a new list.

    Records the patch does not mention are left as they are. Ordering follows
    the patch's target order; records it does not know keep their relative
    position after the ones it does.
    """
    current = {item.id: item for item in items}
    for record_id in patch['removed']:
        current.pop(record_id, None)
    for record_id, (_, new) in patch['changed'].items():
        if record_id in current:
            current[record_id] = new
    for record_id, record in patch['added'].items():
        current[record_id] = record

    _, target_order = patch['order']
    result = [current.pop(i) for i in target_order if i in current]
    result.extend(item for item in (current.get(it.id) for it in items) if item is not None)
    return result


def is_empty(patch: Dict[str, Any]) -> bool:
    before_order, after_order = patch['order']
    return not (patch['added'] or patch['removed'] or patch['changed']) and before_order == after_order


__all__ = ['diff_patch', 'inverse_patch', 'apply_patch', 'is_empty']
