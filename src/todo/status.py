"""Past-due rules.

Everything here is pure: callers pass ``now`` in, nothing reads the clock.
A due time equal to ``now`` is not yet past due.
"""

from __future__ import annotations

from datetime import datetime

from .exceptions import InvalidTransitionError
from .models import TodoStatus

# Statuses a caller may request. PAST_DUE is produced only by the engine.
REQUESTABLE_STATUSES = frozenset({TodoStatus.NOT_DONE, TodoStatus.DONE})


def is_effectively_past_due(status: TodoStatus, due_at: datetime, now: datetime) -> bool:
    if status == TodoStatus.PAST_DUE:
        return True
    return status == TodoStatus.NOT_DONE and due_at < now


def effective_status(status: TodoStatus, due_at: datetime, now: datetime) -> TodoStatus:
    """Status a reader should see. DONE is never reported as past due."""
    if is_effectively_past_due(status, due_at, now):
        return TodoStatus.PAST_DUE
    return status


def needs_past_due_correction(status: TodoStatus, due_at: datetime, now: datetime) -> bool:
    """True when the stored status lags behind the effective one."""
    return status == TodoStatus.NOT_DONE and due_at < now


def parse_requested_status(value: str | TodoStatus) -> TodoStatus:
    """Map caller input to a settable status or raise InvalidTransitionError."""
    if isinstance(value, TodoStatus):
        status = value
    else:
        try:
            status = TodoStatus.from_value(value)
        except ValueError as exc:
            raise InvalidTransitionError(
                f"Invalid status: {value!r}. Status must be either 'done' or 'not done'"
            ) from exc

    if status not in REQUESTABLE_STATUSES:
        raise InvalidTransitionError(
            "Cannot set status to 'past due'. This status is set automatically."
        )
    return status
