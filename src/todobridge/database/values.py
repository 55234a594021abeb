"""Dynamic values as the document store sees them.

The store is schema-less: every bound variable and every returned row is one
of a small closed set of value kinds. This module defines that set and the
fallible narrowing used to get typed data back out of it.

Key rules:

1. ``from_python`` is total over JSON-shaped data; anything else is a
   ``ConversionError``
2. ``Object`` keeps "key absent" and "key present with Null" distinct
3. ``narrow`` never returns a value of the wrong kind; it raises instead
"""

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..exceptions import ConversionError, InvalidIdentifierError

IDENT_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

V = TypeVar("V", bound="Value")
M = TypeVar("M", bound=BaseModel)


class Value:
    """Base class of the closed set of store values."""

    kind: ClassVar[str] = "Value"

    def to_python(self) -> Any:
        raise NotImplementedError

    def first(self) -> Optional["Value"]:
        """Return the value itself; arrays override this with their head."""
        return self


@dataclass(frozen=True)
class Null(Value):
    kind: ClassVar[str] = "Null"

    def to_python(self) -> Any:
        return None


NULL = Null()


@dataclass(frozen=True)
class Bool(Value):
    value: bool
    kind: ClassVar[str] = "Bool"

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class Number(Value):
    value: Union[int, float]
    kind: ClassVar[str] = "Number"

    def to_python(self) -> Union[int, float]:
        return self.value


@dataclass(frozen=True)
class String(Value):
    value: str
    kind: ClassVar[str] = "String"

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class Thing(Value):
    """A typed record identifier: table name plus record key."""

    tb: str
    id: str
    kind: ClassVar[str] = "Thing"

    def __post_init__(self) -> None:
        validate_ident(self.tb, "table name")
        validate_ident(self.id, "record id")

    def __str__(self) -> str:
        return f"{self.tb}:{self.id}"

    def to_python(self) -> str:
        return str(self)


@dataclass
class Array(Value):
    items: List[Value] = field(default_factory=list)
    kind: ClassVar[str] = "Array"

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def first(self) -> Optional[Value]:
        return self.items[0] if self.items else None

    def to_python(self) -> List[Any]:
        return [item.to_python() for item in self.items]


@dataclass
class Object(Value):
    """A mapping of field name to value; one returned row."""

    fields: Dict[str, Value] = field(default_factory=dict)
    kind: ClassVar[str] = "Object"

    def __getitem__(self, key: str) -> Value:
        return self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, key: str, default: Optional[Value] = None) -> Optional[Value]:
        return self.fields.get(key, default)

    def keys(self):
        return self.fields.keys()

    def to_python(self) -> Dict[str, Any]:
        return {key: value.to_python() for key, value in self.fields.items()}


def validate_ident(part: str, what: str = "identifier") -> str:
    """Check one identifier segment against the allow-listed grammar."""
    if not isinstance(part, str) or not part:
        raise InvalidIdentifierError(f"invalid {what}: must be a non-empty string")
    if not IDENT_PATTERN.match(part):
        raise InvalidIdentifierError(f"invalid {what}: {part!r}")
    return part


def thing(text: str) -> Thing:
    """Parse ``"<table>:<id>"`` into a Thing."""
    tb, sep, raw_id = (text or "").partition(":")
    if not sep:
        raise InvalidIdentifierError(f"invalid record identifier: {text!r}")
    return Thing(tb, raw_id)


def from_python(obj: Any) -> Value:
    """Convert JSON-shaped Python data into a store value."""
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NULL
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, (int, float)):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (list, tuple)):
        return Array([from_python(item) for item in obj])
    if isinstance(obj, dict):
        fields: Dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise ConversionError("String key", type(key).__name__)
            fields[key] = from_python(item)
        return Object(fields)
    raise ConversionError("Value", type(obj).__name__)


def kind_of(value: Optional[Value]) -> str:
    if value is None:
        return "None"
    return getattr(value, "kind", type(value).__name__)


def narrow(value: Optional[Value], target: Type[V]) -> V:
    """
    Narrow a dynamic value to one variant.

    Args:
        value: Value to narrow (None stands for "no value")
        target: Variant class, e.g. Object or Array

    Returns:
        The same value, typed as the target variant

    Raises:
        ConversionError: If the value is of another kind
    """
    if isinstance(value, target):
        return value
    raise ConversionError(target.kind, kind_of(value))


def into_model(obj: Object, model: Type[M]) -> M:
    """Re-type a returned row into a pydantic model via its JSON shape."""
    try:
        return model.model_validate(obj.to_python())
    except ValidationError as e:
        raise ConversionError(model.__name__, kind_of(obj), str(e)) from e
