"""Contract for the document-store collaborator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..exceptions import BackendError
from .values import Value


@dataclass(frozen=True)
class Session:
    """Namespace and database a statement runs against."""

    namespace: str
    database: str


@dataclass
class Response:
    """One result-set: the store's answer to a single statement."""

    result: Optional[Value] = None
    error: Optional[str] = None
    time: Optional[str] = None

    def output(self) -> Value:
        """Return the payload, or raise the execution error the store reported."""
        if self.error is not None:
            raise BackendError(self.error)
        if self.result is None:
            raise BackendError("result-set carried neither a result nor an error")
        return self.result


class Datastore(ABC):
    """Abstract base class for store adapters."""

    @abstractmethod
    async def execute(
        self,
        query: str,
        session: Session,
        vars: Optional[Dict[str, Value]] = None,
        one_shot: bool = False,
    ) -> List[Response]:
        """
        Execute a query template.

        Args:
            query: SurrealQL template with ``$name`` placeholders
            session: Namespace/database to run against
            vars: Bound variables
            one_shot: Caller only consumes the first result-set

        Returns:
            One Response per statement, in order

        Raises:
            BackendError: If the query could not be executed at all
        """

    def close(self) -> None:
        """Release adapter resources. Default is a no-op."""
