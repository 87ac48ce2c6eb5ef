#!/usr/bin/env python3
"""
Todo CLI - command line access to the same service the HTTP API uses

Usage:
    python -m src.todo.cli list [--all] [--format json|text]
    python -m src.todo.cli add --description "text" --due-datetime 2026-01-15T18:00:00
    python -m src.todo.cli get --id ID
    python -m src.todo.cli describe --id ID --description "new text"
    python -m src.todo.cli status --id ID --status "done"|"not done"
    python -m src.todo.cli done --id ID
    python -m src.todo.cli undo --id ID
    python -m src.todo.cli sweep
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from .exceptions import TodoError
from .models import TodoItem
from .repository import TodoRepository
from .service import TodoService

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def format_todo_text(todo: TodoItem) -> str:
    """Render a todo item as one line of text"""
    done = f" | done: {_iso(todo.done_at)}" if todo.done_at else ""
    return f"[{todo.id}] {todo.status.value} | due: {_iso(todo.due_at)}{done} | {todo.description}"


def format_todo_json(todo: TodoItem) -> Dict[str, Any]:
    """Render a todo item with the same keys as the HTTP API"""
    return {
        "id": todo.id,
        "description": todo.description,
        "status": todo.status.value,
        "creation_datetime": _iso(todo.created_at),
        "due_datetime": _iso(todo.due_at),
        "done_datetime": _iso(todo.done_at),
    }


def _emit(todo: TodoItem, output_format: str, prefix: str = "") -> None:
    if output_format == "json":
        print(json.dumps(format_todo_json(todo), ensure_ascii=False))
    else:
        print(f"{prefix}{format_todo_text(todo)}")


def _run(action: Callable[[], int], failure: str) -> int:
    try:
        return action()
    except TodoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception:
        logger.exception(failure)
        print(f"Error: {failure}", file=sys.stderr)
        return 1


def cmd_list(service: TodoService, include_all: bool, output_format: str) -> int:
    """List todo items"""

    def action() -> int:
        items = service.list(include_all=include_all)
        if output_format == "json":
            print(json.dumps([format_todo_json(item) for item in items], ensure_ascii=False))
        elif not items:
            print("No todo items.")
        else:
            for item in items:
                print(format_todo_text(item))
        return 0

    return _run(action, "failed to list todo items")


def cmd_add(service: TodoService, description: str, due_datetime: str, output_format: str) -> int:
    """Create a todo item"""
    try:
        due_at = datetime.fromisoformat(due_datetime)
    except ValueError:
        print(f"Error: invalid --due-datetime: {due_datetime}", file=sys.stderr)
        return 1

    def action() -> int:
        _emit(service.create(description, due_at), output_format, prefix="Added: ")
        return 0

    return _run(action, "failed to add todo item")


def cmd_get(service: TodoService, todo_id: int, output_format: str) -> int:
    def action() -> int:
        _emit(service.get_by_id(todo_id), output_format)
        return 0

    return _run(action, "failed to get todo item")


def cmd_describe(service: TodoService, todo_id: int, description: str, output_format: str) -> int:
    def action() -> int:
        _emit(service.update_description(todo_id, description), output_format, prefix="Updated: ")
        return 0

    return _run(action, "failed to update todo item")


def cmd_status(service: TodoService, todo_id: int, status: str, output_format: str) -> int:
    def action() -> int:
        _emit(service.update_status(todo_id, status), output_format, prefix="Updated: ")
        return 0

    return _run(action, "failed to update todo status")


def cmd_sweep(service: TodoService, output_format: str) -> int:
    """Run one past due sweep"""

    def action() -> int:
        count = service.update_past_due_items()
        if output_format == "json":
            print(json.dumps({"updated": count}))
        else:
            print(f"Marked {count} item(s) past due.")
        return 0

    return _run(action, "past due sweep failed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Todo CLI with automatic past due handling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="SQLite database path (default: $TODO_DB_PATH or data/todo.db)",
    )

    subparsers = parser.add_subparsers(dest="command", help="command to run", required=True)

    def add_format(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--format",
            choices=["json", "text"],
            default="text",
            help="output format (default: text)",
        )

    parser_list = subparsers.add_parser("list", help="list todo items")
    parser_list.add_argument(
        "--all", action="store_true", help="include done and past due items"
    )
    add_format(parser_list)

    parser_add = subparsers.add_parser("add", help="create a todo item")
    parser_add.add_argument("--description", required=True, help="what needs doing")
    parser_add.add_argument(
        "--due-datetime", required=True, help="ISO 8601 due time (naive values are UTC)"
    )
    add_format(parser_add)

    parser_get = subparsers.add_parser("get", help="show one todo item")
    parser_get.add_argument("--id", type=int, required=True)
    add_format(parser_get)

    parser_describe = subparsers.add_parser("describe", help="change the description")
    parser_describe.add_argument("--id", type=int, required=True)
    parser_describe.add_argument("--description", required=True)
    add_format(parser_describe)

    parser_status = subparsers.add_parser("status", help="set status to 'done' or 'not done'")
    parser_status.add_argument("--id", type=int, required=True)
    parser_status.add_argument("--status", required=True)
    add_format(parser_status)

    parser_done = subparsers.add_parser("done", help="mark as done")
    parser_done.add_argument("--id", type=int, required=True)
    add_format(parser_done)

    parser_undo = subparsers.add_parser("undo", help="mark as not done")
    parser_undo.add_argument("--id", type=int, required=True)
    add_format(parser_undo)

    parser_sweep = subparsers.add_parser("sweep", help="mark overdue items past due")
    add_format(parser_sweep)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point"""
    args = build_parser().parse_args(argv)

    repo = TodoRepository(db_path=args.db_path if args.db_path else None)
    service = TodoService(repo)

    if args.command == "list":
        return cmd_list(service, args.all, args.format)
    elif args.command == "add":
        return cmd_add(service, args.description, args.due_datetime, args.format)
    elif args.command == "get":
        return cmd_get(service, args.id, args.format)
    elif args.command == "describe":
        return cmd_describe(service, args.id, args.description, args.format)
    elif args.command == "status":
        return cmd_status(service, args.id, args.status, args.format)
    elif args.command == "done":
        return cmd_status(service, args.id, "done", args.format)
    elif args.command == "undo":
        return cmd_status(service, args.id, "not done", args.format)
    elif args.command == "sweep":
        return cmd_sweep(service, args.format)
    else:
        print(f"Error: unknown command: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
