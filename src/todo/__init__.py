"""Past-due aware todo items shared by the HTTP server and the CLI."""

from .exceptions import (
    InvalidTransitionError,
    TodoConflictError,
    TodoError,
    TodoImmutableError,
    TodoNotFoundError,
    TodoValidationError,
)
from .guard import MutationGuard
from .models import TodoItem, TodoStatus, ensure_utc, utc_now
from .repository import TodoRepository
from .scheduler import PastDueScheduler
from .service import TodoService

__all__ = [
    "InvalidTransitionError",
    "MutationGuard",
    "PastDueScheduler",
    "TodoConflictError",
    "TodoError",
    "TodoImmutableError",
    "TodoItem",
    "TodoNotFoundError",
    "TodoRepository",
    "TodoService",
    "TodoStatus",
    "TodoValidationError",
    "ensure_utc",
    "utc_now",
]
