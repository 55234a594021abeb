"""Repository functions for record persistence in the document store.

Every function is generic over the record kind: writes go through the
Creatable/Patchable capabilities, reads come back as ``Object`` rows. Nothing
here knows what a Todo looks like.
"""

from typing import Dict, List

from ..exceptions import MissingResultError
from ..utils.logging import get_logger
from .capabilities import Creatable, Patchable
from .client import Repo
from .datastore import Response
from .values import Array, Null, Object, String, Thing, Value, narrow, validate_ident

logger = get_logger(__name__)

DEFAULT_TABLE = "todo"

CREATE_SQL = "CREATE type::table($tb) CONTENT $data RETURN *"
SELECT_ONE_SQL = "SELECT * FROM $th"
SELECT_ALL_SQL = "SELECT * FROM {tb}"
UPDATE_SQL = "UPDATE $th MERGE $data RETURN *"
DELETE_SQL = "DELETE $th RETURN *"


async def _execute(repo: Repo, sql: str, vars: Dict[str, Value] | None, one_shot: bool) -> List[Response]:
    logger.debug("Executing %r vars=%s one_shot=%s", sql, sorted(vars or {}), one_shot)
    return await repo.execute(sql, vars, one_shot)


def _first_result(responses: List[Response], sql: str) -> Value:
    """Payload of the first result-set; raises the store's error if it failed."""
    if not responses:
        raise MissingResultError(f"No result-set returned for {sql!r}")
    return responses[0].output()


def _first_row(responses: List[Response], sql: str) -> Object:
    row = _first_result(responses, sql).first()
    if row is None or isinstance(row, Null):
        raise MissingResultError(f"No row returned for {sql!r}")
    return narrow(row, Object)


def record_thing(tid: str, tb: str = DEFAULT_TABLE) -> Thing:
    """
    Build the typed identifier ``<tb>:<tid>``.

    Raises:
        InvalidIdentifierError: If either part is empty or outside [A-Za-z0-9_]
    """
    return Thing(tb, tid)


async def create(repo: Repo, tb: str, data: Creatable) -> Object:
    """
    Insert a full record and return the stored row.

    Args:
        repo: Store handle
        tb: Table name
        data: Record to insert; an absent id lets the store assign one

    Returns:
        The created row, including the store-assigned id
    """
    validate_ident(tb, "table name")
    content = narrow(data.into_value(), Object)
    vars: Dict[str, Value] = {"tb": String(tb), "data": content}
    responses = await _execute(repo, CREATE_SQL, vars, one_shot=False)
    return _first_row(responses, CREATE_SQL)


async def get(repo: Repo, tid: str, tb: str = DEFAULT_TABLE) -> Object:
    """Fetch one row by record id."""
    vars: Dict[str, Value] = {"th": record_thing(tid, tb)}
    responses = await _execute(repo, SELECT_ONE_SQL, vars, one_shot=True)
    return _first_row(responses, SELECT_ONE_SQL)


async def get_all(repo: Repo, tb: str = DEFAULT_TABLE) -> List[Object]:
    """Fetch every row of a table. Any row that is not an Object fails the call."""
    sql = SELECT_ALL_SQL.format(tb=validate_ident(tb, "table name"))
    responses = await _execute(repo, sql, None, one_shot=True)
    rows = narrow(_first_result(responses, sql), Array)
    return [narrow(row, Object) for row in rows]


async def update(repo: Repo, tid: str, data: Patchable, tb: str = DEFAULT_TABLE) -> Object:
    """
    Merge a patch into a stored record.

    Fields absent from the patch are left untouched by the store; present
    fields replace the stored value wholesale.
    """
    vars: Dict[str, Value] = {"th": record_thing(tid, tb), "data": data.into_value()}
    responses = await _execute(repo, UPDATE_SQL, vars, one_shot=True)
    return _first_row(responses, UPDATE_SQL)


async def delete(repo: Repo, tid: str, tb: str = DEFAULT_TABLE) -> str:
    """
    Delete a record.

    Returns:
        The identifier ``<tb>:<tid>`` as a receipt, whatever the store echoed
    """
    th = record_thing(tid, tb)
    responses = await _execute(repo, DELETE_SQL, {"th": th}, one_shot=False)
    _first_result(responses, DELETE_SQL)
    logger.info("Deleted %s", th)
    return str(th)
