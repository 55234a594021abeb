"""SurrealDB adapter speaking to the HTTP ``/sql`` endpoint."""

import asyncio
import json
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import BackendError
from ..utils.logging import get_logger
from .datastore import Datastore, Response, Session
from .values import Array, Bool, Null, Number, Object, String, Thing, Value, from_python, validate_ident

logger = get_logger(__name__)


def render_literal(value: Value) -> str:
    """Render a value as a SurrealQL literal."""
    if isinstance(value, Null):
        return "NULL"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Number):
        return json.dumps(value.value)
    if isinstance(value, String):
        return json.dumps(value.value)
    if isinstance(value, Thing):
        return f"type::thing({json.dumps(value.tb)}, {json.dumps(value.id)})"
    if isinstance(value, Array):
        return "[" + ", ".join(render_literal(item) for item in value) + "]"
    if isinstance(value, Object):
        pairs = (f"{json.dumps(key)}: {render_literal(item)}" for key, item in value.fields.items())
        return "{" + ", ".join(pairs) + "}"
    raise TypeError(f"Cannot render {type(value).__name__} as a literal")


def render_statements(query: str, vars: Optional[Dict[str, Value]]) -> str:
    """Prefix the query with one LET statement per bound variable."""
    lets = [
        f"LET ${validate_ident(name, 'variable name')} = {render_literal(value)};"
        for name, value in (vars or {}).items()
    ]
    lets.append(query.rstrip().rstrip(";") + ";")
    return "\n".join(lets)


def _parse_result_set(entry: Any) -> Response:
    if not isinstance(entry, dict):
        raise BackendError(f"Unexpected result-set entry: {entry!r}")
    time = entry.get("time")
    if entry.get("status") == "OK":
        return Response(result=from_python(entry.get("result")), time=time)
    message = entry.get("result") or entry.get("detail") or "query failed"
    return Response(error=str(message), time=time)


class HttpDatastore(Datastore):
    """Datastore backed by a SurrealDB server over HTTP."""

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout_seconds: float = 10,
        http: Optional[requests.Session] = None,
    ):
        self.url = url.rstrip("/")
        self.username = username
        self.password = password
        self.timeout = timeout_seconds
        self.http = http or requests.Session()

    def _get_headers(self, session: Session) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "text/plain",
            "NS": session.namespace,
            "DB": session.database,
        }

    def _post(self, text: str, session: Session) -> Any:
        auth = (self.username, self.password or "") if self.username else None
        try:
            response = self.http.post(
                f"{self.url}/sql",
                data=text.encode("utf-8"),
                headers=self._get_headers(session),
                auth=auth,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendError(f"Request to {self.url} failed: {e}", query=text) from e

        if not response.ok:
            raise BackendError(f"HTTP {response.status_code}: {response.text}", query=text)
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Response is not JSON: {e}", query=text) from e

    async def execute(
        self,
        query: str,
        session: Session,
        vars: Optional[Dict[str, Value]] = None,
        one_shot: bool = False,
    ) -> List[Response]:
        # one_shot only matters for engines that batch result-sets
        text = render_statements(query, vars)
        logger.debug("POST %s/sql ns=%s db=%s", self.url, session.namespace, session.database)
        payload = await asyncio.to_thread(self._post, text, session)
        if not isinstance(payload, list):
            raise BackendError(f"Expected a list of result-sets, got {type(payload).__name__}", query=text)

        result_sets = [_parse_result_set(entry) for entry in payload]
        lets = len(vars or {})
        for let_result in result_sets[:lets]:
            if let_result.error is not None:
                raise BackendError(let_result.error, query=text)
        return result_sets[lets:]

    def close(self) -> None:
        self.http.close()
