"""Capabilities a record type opts into to be written by the record repo."""

from abc import ABC, abstractmethod

from .values import Value


class IntoValue(ABC):
    """A type with a total conversion into a store value."""

    @abstractmethod
    def into_value(self) -> Value:
        """Serialize this record. Must not fail."""


class Creatable(IntoValue):
    """May be the content of a CREATE statement (full record)."""


class Patchable(IntoValue):
    """May be the content of an UPDATE ... MERGE statement (sparse patch)."""
