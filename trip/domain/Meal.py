"""Meal domain entity: one planned meal on a trip day with its ingredient names."""
from typing import List, Optional


class Meal:
    def __init__(self, id: str, name: str = "", day: int = 1, type: str = "dinner",
                 ingredients: Optional[List[str]] = None, assigned_group_id: Optional[str] = None,
                 servings: int = 1, is_custom: bool = False):
        self.id = id
        self.name = name
        self.day = day
        self.type = type
        self.ingredients = ingredients[:] if ingredients else []
        self.assigned_group_id = assigned_group_id or None
        self.servings = servings
        self.is_custom = is_custom

    def copy(self, **changes) -> "Meal":
        data = self.to_dict()
        if "assigned_group_id" in changes:
            changes["assignedGroupId"] = changes.pop("assigned_group_id")
        if "is_custom" in changes:
            changes["isCustom"] = changes.pop("is_custom")
        data.update(changes)
        return Meal.from_dict(data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Meal):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return f"Day {self.day} {self.type}: {self.name} ({', '.join(self.ingredients)})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Meal(
            id=str(d.get("id", "")),
            name=d.get("name") or "",
            day=d.get("day") or 1,
            type=d.get("type") or "dinner",
            ingredients=[i for i in (d.get("ingredients") or []) if isinstance(i, str)],
            assigned_group_id=d.get("assignedGroupId"),
            servings=d.get("servings") or 1,
            is_custom=bool(d.get("isCustom", False)),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "day": self.day,
            "type": self.type,
            "ingredients": list(self.ingredients),
            "assignedGroupId": self.assigned_group_id,
            "servings": self.servings,
            "isCustom": self.is_custom,
        }
