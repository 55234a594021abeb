"""Todos API: typed surface over the record repo for transport layers."""

from typing import List

from ..database import record_repo
from ..database.client import Repo
from ..database.values import into_model
from ..exceptions import CLIENT_ERRORS, IndexOutOfBoundsError
from ..todos.todo_models import Content, Todo, TodoPatch
from ..utils.logging import get_logger

logger = get_logger(__name__)

TODO_TABLE = "todo"


async def create_todo(repo: Repo, new_todo: Todo) -> Todo:
    """Create a todo. Any client-supplied id is dropped so the store assigns one."""
    data = new_todo.model_copy(update={"id": None})
    row = await record_repo.create(repo, TODO_TABLE, data)
    return into_model(row, Todo)


async def get_todo(repo: Repo, todo_id: str) -> Todo:
    row = await record_repo.get(repo, todo_id, TODO_TABLE)
    return into_model(row, Todo)


async def list_todos(repo: Repo) -> List[Todo]:
    rows = await record_repo.get_all(repo, TODO_TABLE)
    return [into_model(row, Todo) for row in rows]


async def update_todo(repo: Repo, todo_id: str, patch: TodoPatch) -> Todo:
    row = await record_repo.update(repo, todo_id, patch, TODO_TABLE)
    return into_model(row, Todo)


async def delete_todo(repo: Repo, todo_id: str) -> str:
    return await record_repo.delete(repo, todo_id, TODO_TABLE)


async def update_todo_item(
    repo: Repo,
    todo_id: str,
    row: int,
    column: int,
    new_value: Content,
) -> Todo:
    """
    Replace a single body cell.

    Fetches the stored todo, checks both indices against the grid it actually
    has, swaps the cell and merges the whole body back. The fetch and the merge
    are two separate store calls: a concurrent writer in between is
    overwritten (last write wins).

    Args:
        repo: Store handle
        todo_id: Record id without the table prefix
        row: Zero-based row index into body
        column: Zero-based index into body[row]
        new_value: Replacement cell

    Returns:
        The updated todo

    Raises:
        IndexOutOfBoundsError: If either index is outside the stored grid
        ConversionError: If the stored row is not a valid todo
    """
    todo = await get_todo(repo, todo_id)
    body = [list(cells) for cells in todo.body]

    if not (0 <= row < len(body) and 0 <= column < len(body[row])):
        logger.info("Rejected cell (%s, %s) for todo:%s: out of bounds", row, column, todo_id)
        raise IndexOutOfBoundsError(row, column)

    body[row][column] = new_value
    logger.debug("Replacing cell (%s, %s) of todo:%s", row, column, todo_id)
    return await update_todo(repo, todo_id, TodoPatch(body=body))


def http_status_for(error: Exception) -> int:
    """Transport status for an error: client-input errors are 400, the rest 500."""
    if isinstance(error, CLIENT_ERRORS):
        return 400
    return 500
