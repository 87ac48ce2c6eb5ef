"""Immutability barrier for todo mutations.

Every mutating operation goes through :meth:`MutationGuard.apply`, which
re-derives the past-due state itself (and persists it when storage lags)
before deciding, so the barrier never depends on the sweep having run.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from .exceptions import TodoConflictError, TodoImmutableError, TodoNotFoundError
from .models import TodoItem, TodoStatus
from .repository import TodoRepository
from .status import needs_past_due_correction

logger = logging.getLogger(__name__)

Mutation = Callable[[TodoItem], TodoItem]


class MutationGuard:
    """Applies a mutation to a stored record unless it is past due."""

    def __init__(self, repository: TodoRepository, max_attempts: int = 5):
        self.repository = repository
        self.max_attempts = max_attempts

    def check(self, item: TodoItem, now: datetime) -> None:
        """Raise TodoImmutableError if ``item`` is past due at ``now``.

        A stored NOT_DONE item whose due time has passed is corrected to
        PAST_DUE in storage before the rejection is raised.
        """
        if item.status == TodoStatus.PAST_DUE:
            logger.info("Rejected mutation of past due todo id=%s", item.id)
            raise TodoImmutableError(item.id)

        if needs_past_due_correction(item.status, item.due_at, now):
            try:
                corrected = self.repository.transition(
                    item.id, TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, now
                )
            except Exception as exc:
                logger.exception("Failed to persist past due correction for todo id=%s", item.id)
                raise TodoImmutableError(item.id) from exc
            if corrected:
                logger.info("Todo id=%s marked past due on write", item.id)
            raise TodoImmutableError(item.id)

    def apply(self, todo_id: int, mutation: Mutation, now: datetime) -> TodoItem:
        """Load, check and write ``mutation(item)`` with a status precondition.

        If another writer changes the status between our read and write, the
        record is reloaded and checked again.
        """
        for _ in range(self.max_attempts):
            item = self.repository.get(todo_id)
            if item is None:
                raise TodoNotFoundError(todo_id)

            self.check(item, now)

            updated = self.repository.put(mutation(item), expected_status=item.status)
            if updated is not None:
                return updated
            logger.debug("Status of todo id=%s changed concurrently, retrying", todo_id)

        raise TodoConflictError(todo_id, self.max_attempts)
