"""Task entities: top-three priority slots and ordered to-do items."""
from uuid import uuid4


def new_id() -> str:
    """Return a fresh item id (unique within a plan in practice)."""
    return uuid4().hex[:16]


class TopThreeItem:
    def __init__(self, id: str = "", text: str = "", done: bool = False):
        self.id = id or new_id()
        self.text = text
        self.done = done

    def __eq__(self, other):
        return isinstance(other, TopThreeItem) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        mark = "x" if self.done else " "
        return f"[{mark}] {self.text or '-'} ({self.id})"

    @staticmethod
    def from_dict(data):
        '''Creates a TopThreeItem from a dictionary. Ignores unknown keys.'''
        return TopThreeItem(
            id=data.get("id", ""),
            text=data.get("text", ""),
            done=bool(data.get("done", False)),
        )

    def to_dict(self):
        return {"id": self.id, "text": self.text, "done": self.done}


class TodoItem:
    def __init__(self, id: str = "", text: str = "", done: bool = False, order: int = 0):
        self.id = id or new_id()
        self.text = text
        self.done = done
        self.order = order

    def __eq__(self, other):
        return isinstance(other, TodoItem) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        mark = "x" if self.done else " "
        return f"{self.order}. [{mark}] {self.text} ({self.id})"

    @staticmethod
    def from_dict(data):
        '''Creates a TodoItem from a dictionary. Ignores unknown keys.'''
        return TodoItem(
            id=data.get("id", ""),
            text=data.get("text", ""),
            done=bool(data.get("done", False)),
            order=int(data.get("order", 0)),
        )

    def to_dict(self):
        return {"id": self.id, "text": self.text, "done": self.done, "order": self.order}
