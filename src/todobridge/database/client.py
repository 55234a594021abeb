from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, List, Optional

from ..config.loader import get_datastore_settings
from .datastore import Datastore, Response, Session
from .http_datastore import HttpDatastore
from .values import Value


@dataclass
class Repo:
    """Handle pairing a datastore with the session statements run in."""

    datastore: Datastore
    session: Session

    async def execute(
        self,
        sql: str,
        vars: Optional[Dict[str, Value]] = None,
        one_shot: bool = False,
    ) -> List[Response]:
        return await self.datastore.execute(sql, self.session, vars, one_shot)


def get_repo(config: Dict[str, Any] | None = None) -> Repo:
    """Build a Repo over HTTP from the ``datastore`` config section (caller must close it)."""
    settings = get_datastore_settings(config)
    datastore = HttpDatastore(
        settings["url"],
        username=settings["username"],
        password=settings["password"],
        timeout_seconds=settings["timeout_seconds"],
    )
    return Repo(datastore, Session(settings["namespace"], settings["database"]))


@asynccontextmanager
async def repo_context(config: Dict[str, Any] | None = None) -> AsyncGenerator[Repo, None]:
    """
    Async context manager for a Repo.

    Usage:
        async with repo_context(config) as repo:
            row = await record_repo.get(repo, "abc123")
    """
    repo = get_repo(config)
    try:
        yield repo
    finally:
        repo.datastore.close()
