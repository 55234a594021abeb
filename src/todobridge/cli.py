"""CLI entrypoint for todobridge."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional

from pydantic import ValidationError

from todobridge.api.todos_api import (
    create_todo,
    delete_todo,
    get_todo,
    http_status_for,
    list_todos,
    update_todo,
    update_todo_item,
)
from todobridge.config.loader import load_config
from todobridge.database.client import Repo, repo_context
from todobridge.exceptions import TodoStoreError
from todobridge.todos.todo_models import Content, Todo, TodoPatch
from todobridge.utils.logging import get_logger

logger = get_logger(__name__)


def _parse_body(raw: Optional[str]) -> Optional[List[List[dict]]]:
    """Parse a --body argument: a JSON array of arrays of cells."""
    if raw is None:
        return None
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"--body is not valid JSON: {e}") from e
    if not isinstance(body, list):
        raise argparse.ArgumentTypeError("--body must be a JSON array of arrays")
    return body


def _dump(result: Any) -> str:
    if isinstance(result, list):
        return json.dumps([item.model_dump() for item in result], indent=2)
    if hasattr(result, "model_dump"):
        return json.dumps(result.model_dump(), indent=2)
    return json.dumps(result)


async def cmd_create(repo: Repo, args: argparse.Namespace) -> Any:
    todo = Todo(title=args.title, body=_parse_body(args.body) or [])
    return await create_todo(repo, todo)


async def cmd_get(repo: Repo, args: argparse.Namespace) -> Any:
    return await get_todo(repo, args.id)


async def cmd_list(repo: Repo, args: argparse.Namespace) -> Any:
    return await list_todos(repo)


async def cmd_update(repo: Repo, args: argparse.Namespace) -> Any:
    patch = TodoPatch(title=args.title, body=_parse_body(args.body))
    return await update_todo(repo, args.id, patch)


async def cmd_delete(repo: Repo, args: argparse.Namespace) -> Any:
    return await delete_todo(repo, args.id)


async def cmd_set_cell(repo: Repo, args: argparse.Namespace) -> Any:
    content = Content(content_type=args.content_type, content_body=args.content_body)
    return await update_todo_item(repo, args.id, args.row, args.column, content)


async def _run(config: dict, func: Callable[[Repo, argparse.Namespace], Awaitable[Any]], args: argparse.Namespace) -> Any:
    async with repo_context(config) as repo:
        return await func(repo, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todobridge", description="Todo records over SurrealDB")
    parser.add_argument("--config", type=Path, default=None, help="Path to todobridge.config.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser("create", help="Create a todo")
    create_parser.add_argument("--title", required=True)
    create_parser.add_argument("--body", default=None, help="JSON array of arrays of cells")
    create_parser.set_defaults(func=cmd_create)

    get_parser = subparsers.add_parser("get", help="Fetch a todo by id")
    get_parser.add_argument("id")
    get_parser.set_defaults(func=cmd_get)

    list_parser = subparsers.add_parser("list", help="List all todos")
    list_parser.set_defaults(func=cmd_list)

    update_parser = subparsers.add_parser("update", help="Merge fields into a todo")
    update_parser.add_argument("id")
    update_parser.add_argument("--title", default=None)
    update_parser.add_argument("--body", default=None, help="JSON array of arrays of cells")
    update_parser.set_defaults(func=cmd_update)

    delete_parser = subparsers.add_parser("delete", help="Delete a todo")
    delete_parser.add_argument("id")
    delete_parser.set_defaults(func=cmd_delete)

    cell_parser = subparsers.add_parser("set-cell", help="Replace one body cell")
    cell_parser.add_argument("id")
    cell_parser.add_argument("row", type=int)
    cell_parser.add_argument("column", type=int)
    cell_parser.add_argument("--type", dest="content_type", required=True)
    cell_parser.add_argument("--body", dest="content_body", required=True)
    cell_parser.set_defaults(func=cmd_set_cell)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        if args.config is not None:
            raise
        config = {}

    try:
        result = asyncio.run(_run(config, args.func, args))
    except (argparse.ArgumentTypeError, ValidationError) as e:
        print(f"[todobridge] invalid input: {e}", file=sys.stderr)
        return 2
    except TodoStoreError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"[todobridge] {e}", file=sys.stderr)
        return 2 if http_status_for(e) == 400 else 1

    print(_dump(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
