"""Todo service: create/read/update/list plus the past-due sweep."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from .exceptions import TodoNotFoundError, TodoValidationError
from .guard import MutationGuard
from .models import TodoItem, TodoStatus, ensure_utc, utc_now
from .repository import TodoRepository
from .status import effective_status, needs_past_due_correction, parse_requested_status

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TodoService:
    """Composes the status rules and the mutation guard over a TodoRepository.

    Items returned from read paths carry their effective status. Reads also
    persist any pending past-due correction for the records they touch, so
    storage and what callers see do not diverge once a record has been read.
    """

    def __init__(
        self,
        repository: TodoRepository,
        clock: Optional[Clock] = None,
        guard: Optional[MutationGuard] = None,
    ):
        self.repository = repository
        self.clock = clock or utc_now
        self.guard = guard or MutationGuard(repository)

    def now(self) -> datetime:
        return ensure_utc(self.clock())

    def create(self, description: str, due_at: datetime) -> TodoItem:
        description = (description or "").strip()
        if not description:
            raise TodoValidationError("description is required")

        logger.info("Creating todo item: %s", description)
        now = self.now()
        item = self.repository.insert(
            description=description,
            due_at=ensure_utc(due_at),
            created_at=now,
        )
        logger.info("Created todo item id=%s", item.id)
        return self._present(item, now)

    def get_by_id(self, todo_id: int) -> TodoItem:
        item = self.repository.get(todo_id)
        if item is None:
            raise TodoNotFoundError(todo_id)
        return self._present(item, self.now(), persist=True)

    def list(self, include_all: bool = False) -> List[TodoItem]:
        if include_all:
            items = self.repository.scan_all()
        else:
            items = self.repository.scan_by_status(TodoStatus.NOT_DONE)
        now = self.now()
        return [self._present(item, now, persist=True) for item in items]

    def update_description(self, todo_id: int, description: str) -> TodoItem:
        description = (description or "").strip()
        if not description:
            raise TodoValidationError("description is required")

        logger.info("Updating description for todo id=%s", todo_id)
        now = self.now()
        updated = self.guard.apply(
            todo_id, lambda item: item.with_changes(description=description), now
        )
        return self._present(updated, now)

    def update_status(self, todo_id: int, status: str | TodoStatus) -> TodoItem:
        # Rejected before any lookup: PAST_DUE is never a valid request.
        new_status = parse_requested_status(status)

        logger.info("Updating status for todo id=%s to %s", todo_id, new_status.value)
        now = self.now()
        done_at = now if new_status == TodoStatus.DONE else None
        updated = self.guard.apply(
            todo_id,
            lambda item: item.with_changes(status=new_status, done_at=done_at),
            now,
        )
        return self._present(updated, now)

    def mark_done(self, todo_id: int) -> TodoItem:
        return self.update_status(todo_id, TodoStatus.DONE)

    def mark_not_done(self, todo_id: int) -> TodoItem:
        return self.update_status(todo_id, TodoStatus.NOT_DONE)

    def update_past_due_items(self, now: Optional[datetime] = None) -> int:
        """Move every overdue NOT_DONE record to PAST_DUE in one statement."""
        now = ensure_utc(now) if now else self.now()
        count = self.repository.bulk_transition(TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, now)
        if count > 0:
            logger.info("Updated %s items to past due status", count)
        else:
            logger.debug("Past due sweep found nothing to update")
        return count

    def _present(self, item: TodoItem, now: datetime, persist: bool = False) -> TodoItem:
        if persist and needs_past_due_correction(item.status, item.due_at, now):
            if self.repository.transition(item.id, TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, now):
                logger.info("Todo id=%s marked past due on read", item.id)
            else:
                # Lost the race to another writer; show what is stored now.
                item = self.repository.get(item.id) or item
        return item.with_changes(status=effective_status(item.status, item.due_at, now))
