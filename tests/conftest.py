"""Pytest configuration and fixtures."""

import uuid
from typing import Dict, List, Optional, Tuple

import pytest

from todobridge.database.client import Repo
from todobridge.database.datastore import Datastore, Response, Session
from todobridge.database.values import Array, Object, String, Thing, Value


class FakeDatastore(Datastore):
    """In-memory stand-in for the store that understands the repo's templates.

    Every call is recorded in ``calls``. Responses queued on ``scripted`` are
    returned verbatim (one list per call) before any template is interpreted.
    """

    def __init__(self):
        self.tables: Dict[str, Dict[str, Object]] = {}
        self.calls: List[Tuple[str, Optional[Dict[str, Value]], bool]] = []
        self.scripted: List[List[Response]] = []
        self.closed = False

    def seed(self, tb: str, rid: str, fields: Dict[str, Value]) -> Object:
        row = Object({"id": Thing(tb, rid), **fields})
        self.tables.setdefault(tb, {})[rid] = row
        return row

    async def execute(self, query, session, vars=None, one_shot=False):
        self.calls.append((query, dict(vars) if vars is not None else None, one_shot))
        if self.scripted:
            return self.scripted.pop(0)
        vars = vars or {}

        if query.startswith("CREATE"):
            tb = vars["tb"].value
            data = dict(vars["data"].fields)
            supplied = data.pop("id", None)
            rid = supplied.value.split(":")[-1] if isinstance(supplied, String) else uuid.uuid4().hex[:20]
            return [Response(result=Array([self.seed(tb, rid, data)]))]

        if query == "SELECT * FROM $th":
            th = vars["th"]
            row = self.tables.get(th.tb, {}).get(th.id)
            return [Response(result=Array([row] if row is not None else []))]

        if query.startswith("SELECT * FROM "):
            tb = query[len("SELECT * FROM "):]
            return [Response(result=Array(list(self.tables.get(tb, {}).values())))]

        if query.startswith("UPDATE"):
            th = vars["th"]
            row = self.tables.get(th.tb, {}).get(th.id)
            if row is None:
                return [Response(result=Array([]))]
            row.fields.update(vars["data"].fields)
            return [Response(result=Array([row]))]

        if query.startswith("DELETE"):
            th = vars["th"]
            self.tables.get(th.tb, {}).pop(th.id, None)
            return [Response(result=Array([]))]

        return [Response(error=f"Parse error: {query}")]

    def writes(self) -> List[str]:
        return [query for query, _, _ in self.calls if not query.startswith("SELECT")]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def datastore():
    return FakeDatastore()


@pytest.fixture
def repo(datastore):
    """Repo over a fresh in-memory datastore."""
    return Repo(datastore, Session("test", "test"))


@pytest.fixture
def grid_body():
    """A 2x3 body grid as JSON-shaped cells."""
    return [
        [{"content_type": "text", "content_body": f"r{r}c{c}"} for c in range(3)]
        for r in range(2)
    ]
