"""TodoItem domain entity: a checklist entry for trip preparation."""


class TodoItem:
    def __init__(self, id: str, text: str = "", is_completed: bool = False, display_order: int = 0):
        self.id = id
        self.text = text
        self.is_completed = is_completed
        self.display_order = display_order

    def copy(self, **changes) -> "TodoItem":
        data = {"id": self.id, "text": self.text, "is_completed": self.is_completed,
                "display_order": self.display_order}
        data.update(changes)
        return TodoItem(**data)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TodoItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        mark = "x" if self.is_completed else " "
        return f"[{mark}] {self.text}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return TodoItem(
            id=str(d.get("id", "")),
            text=d.get("text") or "",
            is_completed=bool(d.get("isCompleted", False)),
            display_order=int(d.get("order", d.get("displayOrder", 0)) or 0),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "isCompleted": self.is_completed,
            "order": self.display_order,
        }
