"""Error taxonomy for the todo data-access layer."""


class TodoStoreError(RuntimeError):
    """Base class for every error raised by todobridge."""


class BackendError(TodoStoreError):
    """The store reported a query-execution failure."""

    def __init__(self, message: str, query: str | None = None):
        super().__init__(message)
        self.message = message
        self.query = query


class MissingResultError(TodoStoreError):
    """The store returned no result-set or no row where one was expected."""


class ConversionError(TodoStoreError):
    """A dynamic value could not be coerced to the requested shape."""

    def __init__(self, expected: str, got: str, detail: str | None = None):
        message = f"expected {expected} got {got}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.expected = expected
        self.got = got


class IndexOutOfBoundsError(TodoStoreError):
    """A nested-cell index is outside the current body grid."""

    def __init__(self, row: int, column: int):
        super().__init__(f"Index out of bounds: ({row}, {column})")
        self.row = row
        self.column = column


class InvalidIdentifierError(TodoStoreError):
    """A record or table identifier failed validation."""


CLIENT_ERRORS = (InvalidIdentifierError, IndexOutOfBoundsError)

__all__ = [
    "BackendError",
    "CLIENT_ERRORS",
    "ConversionError",
    "IndexOutOfBoundsError",
    "InvalidIdentifierError",
    "MissingResultError",
    "TodoStoreError",
]
