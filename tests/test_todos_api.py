"""Tests for the todos API, including the nested-cell update."""

import pytest

from todobridge.api.todos_api import (
    create_todo,
    delete_todo,
    get_todo,
    http_status_for,
    list_todos,
    update_todo,
    update_todo_item,
)
from todobridge.database.values import Array, Number, String
from todobridge.exceptions import (
    BackendError,
    ConversionError,
    IndexOutOfBoundsError,
    InvalidIdentifierError,
    MissingResultError,
)
from todobridge.todos.todo_models import Content, Todo, TodoPatch

NEW_CELL = Content(content_type="code", content_body="print()")


async def _seed_grid(repo, grid_body) -> str:
    created = await create_todo(repo, Todo(title="grid", body=grid_body))
    return created.id.split(":", 1)[1]


@pytest.mark.asyncio
async def test_create_then_get_round_trips(repo, datastore):
    original = Todo(title="t", body=[[Content(content_type="text", content_body="hi")]])

    created = await create_todo(repo, original)
    rid = created.id.split(":", 1)[1]
    fetched = await get_todo(repo, rid)

    assert created.id == f"todo:{rid}"
    assert fetched == created
    assert (fetched.title, fetched.body) == (original.title, original.body)


@pytest.mark.asyncio
async def test_create_drops_client_supplied_id(repo, datastore):
    created = await create_todo(repo, Todo(id="todo:chosen", title="t", body=[]))

    _, vars, _ = datastore.calls[0]
    assert "id" not in vars["data"]
    assert created.id != "todo:chosen"


@pytest.mark.asyncio
async def test_list_todos_empty_store(repo):
    assert await list_todos(repo) == []


@pytest.mark.asyncio
async def test_list_todos_retypes_rows(repo, grid_body):
    await _seed_grid(repo, grid_body)

    todos = await list_todos(repo)

    assert len(todos) == 1
    assert todos[0].body[1][2].content_body == "r1c2"


@pytest.mark.asyncio
async def test_update_todo_keeps_untouched_fields(repo, grid_body):
    rid = await _seed_grid(repo, grid_body)

    updated = await update_todo(repo, rid, TodoPatch(title="renamed"))

    assert updated.title == "renamed"
    assert len(updated.body) == 2


@pytest.mark.asyncio
async def test_delete_todo_receipt(repo, grid_body):
    rid = await _seed_grid(repo, grid_body)

    assert await delete_todo(repo, rid) == f"todo:{rid}"
    with pytest.raises(MissingResultError):
        await get_todo(repo, rid)


@pytest.mark.asyncio
async def test_update_item_replaces_single_cell(repo, datastore, grid_body):
    rid = await _seed_grid(repo, grid_body)
    datastore.calls.clear()

    updated = await update_todo_item(repo, rid, 1, 2, NEW_CELL)

    assert updated.body[1][2] == NEW_CELL
    assert updated.body[0][0].content_body == "r0c0"
    assert updated.title == "grid"

    queries = [query for query, _, _ in datastore.calls]
    assert queries == ["SELECT * FROM $th", "UPDATE $th MERGE $data RETURN *"]
    patch = datastore.calls[1][1]["data"]
    assert list(patch.keys()) == ["body"]


@pytest.mark.asyncio
@pytest.mark.parametrize("row,column", [(2, 0), (0, 3), (-1, 0), (0, -1)])
async def test_update_item_out_of_bounds_performs_no_write(repo, datastore, grid_body, row, column):
    rid = await _seed_grid(repo, grid_body)
    datastore.calls.clear()

    with pytest.raises(IndexOutOfBoundsError):
        await update_todo_item(repo, rid, row, column, NEW_CELL)

    assert datastore.writes() == []


@pytest.mark.asyncio
async def test_update_item_checks_bounds_against_jagged_rows(repo, datastore):
    body = [[Content(content_type="text", content_body="a")], []]
    created = await create_todo(repo, Todo(title="jagged", body=body))
    rid = created.id.split(":", 1)[1]

    with pytest.raises(IndexOutOfBoundsError):
        await update_todo_item(repo, rid, 1, 0, NEW_CELL)


@pytest.mark.asyncio
async def test_update_item_on_unparseable_row(repo, datastore):
    datastore.seed("todo", "bad", {"title": String("t"), "body": Number(5)})

    with pytest.raises(ConversionError):
        await update_todo_item(repo, "bad", 0, 0, NEW_CELL)
    assert datastore.writes() == []


@pytest.mark.asyncio
async def test_update_item_missing_todo(repo):
    with pytest.raises(MissingResultError):
        await update_todo_item(repo, "absent", 0, 0, NEW_CELL)


@pytest.mark.asyncio
async def test_empty_id_rejected_without_store_calls(repo, datastore):
    with pytest.raises(InvalidIdentifierError):
        await get_todo(repo, "")
    with pytest.raises(InvalidIdentifierError):
        await update_todo(repo, "", TodoPatch(title="x"))
    with pytest.raises(InvalidIdentifierError):
        await delete_todo(repo, "")
    with pytest.raises(InvalidIdentifierError):
        await update_todo_item(repo, "", 0, 0, NEW_CELL)

    assert datastore.calls == []


def test_http_status_for_error_kinds():
    assert http_status_for(InvalidIdentifierError("invalid ID")) == 400
    assert http_status_for(IndexOutOfBoundsError(2, 0)) == 400
    assert http_status_for(BackendError("boom")) == 500
    assert http_status_for(ConversionError("Array", "Number")) == 500
    assert http_status_for(MissingResultError("none")) == 500


@pytest.mark.asyncio
async def test_get_populates_store_assigned_id(repo, datastore):
    hi = Content(content_type="text", content_body="hi")
    datastore.seed("todo", "abc123", {
        "title": String("t"),
        "body": Array([Array([hi.into_value()])]),
    })

    fetched = await get_todo(repo, "abc123")

    assert fetched.id == "todo:abc123"
    assert fetched.title == "t"
    assert fetched.body == [[hi]]
