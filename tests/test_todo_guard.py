from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from src.todo import (
    MutationGuard,
    TodoConflictError,
    TodoImmutableError,
    TodoNotFoundError,
    TodoStatus,
)

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def rename(item):
    return item.with_changes(description="renamed")


def test_mutation_applied_when_not_due(repo):
    item = repo.insert("Task", due_at=NOW + timedelta(hours=1), created_at=NOW)
    guard = MutationGuard(repo)

    updated = guard.apply(item.id, rename, NOW)

    assert updated.description == "renamed"
    assert repo.get(item.id).description == "renamed"


def test_stored_past_due_is_rejected_without_write(repo):
    item = repo.insert(
        "Task", due_at=NOW - timedelta(days=1), created_at=NOW, status=TodoStatus.PAST_DUE
    )
    before = repo.get(item.id)
    guard = MutationGuard(repo)

    with pytest.raises(TodoImmutableError):
        guard.apply(item.id, rename, NOW)

    assert repo.get(item.id) == before


def test_elapsed_due_time_is_persisted_then_rejected(repo):
    item = repo.insert("Task", due_at=NOW - timedelta(seconds=1), created_at=NOW)
    guard = MutationGuard(repo)

    with pytest.raises(TodoImmutableError):
        guard.apply(item.id, rename, NOW)

    stored = repo.get(item.id)
    assert stored.status is TodoStatus.PAST_DUE
    assert stored.description == "Task"


def test_done_item_past_its_due_time_can_still_change(repo):
    item = repo.insert(
        "Task",
        due_at=NOW - timedelta(hours=1),
        created_at=NOW,
        status=TodoStatus.DONE,
        done_at=NOW - timedelta(hours=2),
    )
    guard = MutationGuard(repo)

    updated = guard.apply(item.id, rename, NOW)

    assert updated.status is TodoStatus.DONE
    assert updated.description == "renamed"


def test_missing_record(repo):
    with pytest.raises(TodoNotFoundError):
        MutationGuard(repo).apply(42, rename, NOW)


def test_failed_correction_still_rejects(repo):
    item = repo.insert("Task", due_at=NOW - timedelta(seconds=1), created_at=NOW)
    store = MagicMock(wraps=repo)
    store.transition.side_effect = RuntimeError("disk full")
    guard = MutationGuard(store)

    with pytest.raises(TodoImmutableError) as excinfo:
        guard.apply(item.id, rename, NOW)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    store.put.assert_not_called()


def test_concurrent_status_change_is_rechecked(repo):
    item = repo.insert("Task", due_at=NOW + timedelta(hours=1), created_at=NOW)
    guard = MutationGuard(repo)

    def sweep_sneaks_in(current):
        # Another writer moves the record to PAST_DUE between read and write.
        repo.put(current.with_changes(status=TodoStatus.PAST_DUE))
        return current.with_changes(description="lost update")

    with pytest.raises(TodoImmutableError):
        guard.apply(item.id, sweep_sneaks_in, NOW)

    stored = repo.get(item.id)
    assert stored.status is TodoStatus.PAST_DUE
    assert stored.description == "Task"


def test_gives_up_after_max_attempts():
    store = MagicMock()
    current = MagicMock(status=TodoStatus.NOT_DONE, due_at=NOW + timedelta(hours=1), id=7)
    store.get.return_value = current
    store.put.return_value = None
    guard = MutationGuard(store, max_attempts=3)

    with pytest.raises(TodoConflictError):
        guard.apply(7, lambda item: item, NOW)

    assert store.put.call_count == 3
