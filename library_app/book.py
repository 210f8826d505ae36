from __future__ import annotations

from bson import ObjectId


class Book:
    """Represents a single book item in the library."""

    def __init__(self, title: str, author: str, id: ObjectId | None = None) -> None:
        self.id = id
        self.title = (title or "").strip()
        self.author = (author or "").strip()

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ID: {self.id})"

    def to_dict(self) -> dict:
        """JSON-ready representation; the id is left out until one is assigned."""
        data = {"title": self.title, "author": self.author}
        if self.id is not None:
            data = {"id": str(self.id), **data}
        return data

    def to_document(self) -> dict:
        doc = {"title": self.title, "author": self.author}
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # MongoDB documents carry the identifier under "_id"
        raw_id = data.get("_id", data.get("id"))
        if raw_id is not None and not isinstance(raw_id, ObjectId):
            raw_id = ObjectId(str(raw_id))
        return Book(title=data.get("title", ""), author=data.get("author", ""), id=raw_id)
