from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class TodoStatus(str, Enum):
    """Todo lifecycle status. PAST_DUE is terminal and only set by the system."""

    NOT_DONE = "not done"
    DONE = "done"
    PAST_DUE = "past due"

    @classmethod
    def from_value(cls, raw: str) -> "TodoStatus":
        """Case-insensitive lookup by wire value."""
        normalized = (raw or "").strip().lower()
        for status in cls:
            if status.value == normalized:
                return status
        raise ValueError(f"Unknown status: {raw}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(slots=True)
class TodoItem:
    """Persisted todo item as stored (status is the stored, not effective, value)."""

    id: int
    description: str
    status: TodoStatus
    created_at: datetime
    due_at: datetime
    done_at: Optional[datetime] = None

    def with_changes(self, **changes) -> "TodoItem":
        return replace(self, **changes)
