"""ShoppingItem domain entity.

Most shopping items are derived: camping items carry a ``source_item_id`` that
points back at the packing item that generated them, food items without a
source id come from meal ingredients. Camping items without a source id are
added by hand.
"""
from typing import Optional


class ShoppingItem:
    def __init__(self, id: str, name: str = "", quantity: int = 1, category: str = "food",
                 is_checked: bool = False, needs_to_buy: bool = True, is_owned: bool = False,
                 source_item_id: Optional[str] = None, assigned_group_id: Optional[str] = None):
        self.id = id
        self.name = name
        self.quantity = quantity
        self.category = category
        self.is_checked = is_checked
        self.needs_to_buy = needs_to_buy
        self.is_owned = is_owned
        self.source_item_id = source_item_id or None
        self.assigned_group_id = assigned_group_id or None

    @property
    def is_manual(self) -> bool:
        '''Camping items with no source packing item belong to the user.'''
        return self.category == "camping" and not self.source_item_id

    @property
    def is_meal_derived(self) -> bool:
        return self.category == "food" and not self.source_item_id

    def copy(self, **changes) -> "ShoppingItem":
        data = self.to_dict()
        for snake, camel in _TO_CAMEL.items():
            if snake in changes:
                changes[camel] = changes.pop(snake)
        data.update(changes)
        return ShoppingItem.from_dict(data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ShoppingItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        src = f" <- {self.source_item_id}" if self.source_item_id else ""
        return f"{self.name} x{self.quantity} [{self.category}]{src}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return ShoppingItem(
            id=str(d.get("id", "")),
            name=d.get("name") or "",
            quantity=d.get("quantity") or 1,
            category=d.get("category") if d.get("category") in ("food", "camping") else "food",
            is_checked=bool(d.get("isChecked", False)),
            needs_to_buy=bool(d.get("needsToBuy", True)),
            is_owned=bool(d.get("isOwned", False)),
            source_item_id=d.get("sourceItemId"),
            assigned_group_id=d.get("assignedGroupId"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "category": self.category,
            "isChecked": self.is_checked,
            "needsToBuy": self.needs_to_buy,
            "isOwned": self.is_owned,
            "sourceItemId": self.source_item_id,
            "assignedGroupId": self.assigned_group_id,
        }


_TO_CAMEL = {
    "is_checked": "isChecked",
    "needs_to_buy": "needsToBuy",
    "is_owned": "isOwned",
    "source_item_id": "sourceItemId",
    "assigned_group_id": "assignedGroupId",
}
