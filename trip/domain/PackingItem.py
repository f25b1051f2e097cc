"""PackingItem domain entity: gear to bring on a trip plus its owned/buy/packed status."""
from typing import List, Optional
from trip.utilities.constants import DEFAULT_PACKING_CATEGORY


class PackingItem:
    def __init__(self, id: str, name: str = "", category: str = DEFAULT_PACKING_CATEGORY, quantity: int = 1,
                 is_owned: bool = False, needs_to_buy: bool = False, is_packed: bool = False,
                 weight: Optional[float] = None, assigned_group_id: Optional[str] = None,
                 is_personal: bool = False, notes: Optional[str] = None,
                 source_activity_ids: Optional[List[str]] = None, required: bool = False):
        self.id = id
        self.name = name
        self.category = category
        self.quantity = quantity
        self.is_owned = is_owned
        self.needs_to_buy = needs_to_buy
        self.is_packed = is_packed
        self.weight = weight
        self.assigned_group_id = assigned_group_id or None
        self.is_personal = is_personal
        self.notes = notes
        self.source_activity_ids = source_activity_ids[:] if source_activity_ids else []
        self.required = required

    def copy(self, **changes) -> "PackingItem":
        '''Returns a new item with the given attributes replaced.'''
        data = self.to_dict()
        data.update(PackingItem._camel(changes))
        return PackingItem.from_dict(data)

    @staticmethod
    def _camel(changes: dict) -> dict:
        return {_TO_CAMEL.get(k, k): v for k, v in changes.items()}

    def __eq__(self, other) -> bool:
        if not isinstance(other, PackingItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        flags = [name for name, on in (("owned", self.is_owned), ("buy", self.needs_to_buy),
                                       ("packed", self.is_packed)) if on]
        return f"{self.name} x{self.quantity} ({self.category}) [{', '.join(flags)}]"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a PackingItem from a camelCase dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return PackingItem(
            id=str(d.get("id", "")),
            name=d.get("name") or "",
            category=d.get("category") or DEFAULT_PACKING_CATEGORY,
            quantity=d.get("quantity") or 1,
            is_owned=bool(d.get("isOwned", False)),
            needs_to_buy=bool(d.get("needsToBuy", False)),
            is_packed=bool(d.get("isPacked", False)),
            weight=d.get("weight"),
            assigned_group_id=d.get("assignedGroupId"),
            is_personal=bool(d.get("isPersonal", False)),
            notes=d.get("notes"),
            source_activity_ids=d.get("sourceActivityIds"),
            required=bool(d.get("required", False)),
        )

    def to_dict(self):
        '''Converts the PackingItem to a camelCase dictionary for JSON persistence.'''
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "isOwned": self.is_owned,
            "needsToBuy": self.needs_to_buy,
            "isPacked": self.is_packed,
            "weight": self.weight,
            "assignedGroupId": self.assigned_group_id,
            "isPersonal": self.is_personal,
            "notes": self.notes,
            "sourceActivityIds": list(self.source_activity_ids),
            "required": self.required,
        }


_TO_CAMEL = {
    "is_owned": "isOwned",
    "needs_to_buy": "needsToBuy",
    "is_packed": "isPacked",
    "assigned_group_id": "assignedGroupId",
    "is_personal": "isPersonal",
    "source_activity_ids": "sourceActivityIds",
}
