"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from functools import lru_cache

from src.todo import PastDueScheduler, TodoItem, TodoRepository, TodoService
from src.todo_app.config import Config
from src.todo_app.logger import setup_logger

from .schemas import TodoResponse

config = Config.from_yaml()
setup_logger(log_level=config.log_level, log_file=config.log_file)


@lru_cache(maxsize=1)
def get_todo_repository() -> TodoRepository:
    """Singleton TodoRepository."""
    return TodoRepository(
        db_path=config.database.resolved_path(),
        timeout_seconds=config.database.timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_todo_service() -> TodoService:
    """Singleton TodoService bound to the shared repository."""
    return TodoService(get_todo_repository())


@lru_cache(maxsize=1)
def get_scheduler() -> PastDueScheduler:
    """Lazily create the past due scheduler (not started)."""
    return PastDueScheduler(
        get_todo_service(),
        interval_seconds=config.sweep.interval_seconds,
    )


def serialize_todo(item: TodoItem) -> TodoResponse:
    """Convert domain TodoItem to API response."""
    return TodoResponse(
        id=item.id,
        description=item.description,
        status=item.status.value,
        creation_datetime=item.created_at,
        due_datetime=item.due_at,
        done_datetime=item.done_at,
    )
