from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..database.capabilities import Creatable, IntoValue, Patchable
from ..database.values import Array, Object, String, Value


class Content(BaseModel, IntoValue):
    """One cell of a todo body. Replaced wholesale, never merged."""

    model_config = ConfigDict(frozen=True)

    content_type: str
    content_body: str

    def into_value(self) -> Value:
        return Object({
            "content_type": String(self.content_type),
            "content_body": String(self.content_body),
        })


def body_into_value(body: List[List[Content]]) -> Array:
    """Serialize a body grid as an Array of Arrays of cell Objects."""
    return Array([Array([cell.into_value() for cell in row]) for row in body])


class Todo(BaseModel, Creatable):
    id: Optional[str] = None  # absent until the store assigns one
    title: str
    body: List[List[Content]]

    def into_value(self) -> Value:
        fields: Dict[str, Value] = {}
        if self.id is not None:
            fields["id"] = String(self.id)
        fields["title"] = String(self.title)
        fields["body"] = body_into_value(self.body)
        return Object(fields)


class TodoPatch(BaseModel, Patchable):
    """Sparse update: None means "leave the stored field alone"."""

    title: Optional[str] = None
    body: Optional[List[List[Content]]] = None

    def into_value(self) -> Value:
        fields: Dict[str, Value] = {}
        if self.title is not None:
            fields["title"] = String(self.title)
        if self.body is not None:
            fields["body"] = body_into_value(self.body)
        return Object(fields)
