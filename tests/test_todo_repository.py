import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from src.todo.repository import TodoRepository, TodoStatus

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_todo_repository_crud_cycle(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")

    created = repo.insert(
        description="Write report",
        due_at=NOW + timedelta(days=1),
        created_at=NOW,
    )
    assert created.description == "Write report"
    assert created.status is TodoStatus.NOT_DONE
    assert created.created_at == NOW
    assert created.due_at == NOW + timedelta(days=1)
    assert created.done_at is None

    assert repo.count() == 1
    assert repo.get(created.id) == created

    updated = repo.put(
        created.with_changes(status=TodoStatus.DONE, done_at=NOW, description="Finished")
    )
    assert updated is not None
    assert updated.status is TodoStatus.DONE
    assert updated.done_at == NOW
    assert updated.description == "Finished"

    assert repo.get(9999) is None


def test_put_never_rewrites_created_at(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    created = repo.insert("Task", due_at=NOW + timedelta(hours=1), created_at=NOW)

    updated = repo.put(created.with_changes(created_at=NOW + timedelta(days=5)))

    assert updated.created_at == NOW


def test_put_with_stale_expected_status_is_refused(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    created = repo.insert("Task", due_at=NOW + timedelta(hours=1), created_at=NOW)
    repo.put(created.with_changes(status=TodoStatus.DONE, done_at=NOW))

    result = repo.put(
        created.with_changes(description="stale"), expected_status=TodoStatus.NOT_DONE
    )

    assert result is None
    assert repo.get(created.id).description == "Task"


def test_put_missing_row_returns_none(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    created = repo.insert("Task", due_at=NOW, created_at=NOW)
    assert repo.put(created.with_changes(id=created.id + 100)) is None


def test_scan_by_status(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    first = repo.insert("First", due_at=NOW, created_at=NOW)
    repo.insert("Second", due_at=NOW, created_at=NOW, status=TodoStatus.DONE, done_at=NOW)
    third = repo.insert("Third", due_at=NOW, created_at=NOW)

    assert [item.id for item in repo.scan_by_status(TodoStatus.NOT_DONE)] == [first.id, third.id]
    assert len(repo.scan_by_status(TodoStatus.DONE)) == 1
    assert repo.scan_by_status(TodoStatus.PAST_DUE) == []
    assert len(repo.scan_all()) == 3


def test_bulk_transition_only_touches_matching_rows(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    overdue = repo.insert("Overdue", due_at=NOW - timedelta(minutes=1), created_at=NOW)
    due_now = repo.insert("Due now", due_at=NOW, created_at=NOW)
    done = repo.insert(
        "Done",
        due_at=NOW - timedelta(hours=1),
        created_at=NOW,
        status=TodoStatus.DONE,
        done_at=NOW,
    )

    count = repo.bulk_transition(TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, NOW)

    assert count == 1
    assert repo.get(overdue.id).status is TodoStatus.PAST_DUE
    assert repo.get(due_now.id).status is TodoStatus.NOT_DONE
    assert repo.get(done.id).status is TodoStatus.DONE


def test_transition_is_conditional(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    item = repo.insert("Task", due_at=NOW - timedelta(seconds=1), created_at=NOW)

    assert repo.transition(item.id, TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, NOW) is True
    assert repo.transition(item.id, TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, NOW) is False
    assert repo.get(item.id).status is TodoStatus.PAST_DUE
    assert repo.get(item.id).description == "Task"


def test_naive_datetimes_are_stored_as_utc(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    item = repo.insert("Task", due_at=datetime(2026, 3, 2, 9, 30), created_at=NOW)
    assert item.due_at == datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


def test_db_path_from_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env" / "todo.db"
    monkeypatch.setenv("TODO_DB_PATH", str(db_path))
    repo = TodoRepository()
    assert repo.db_path == db_path
    assert db_path.exists()


def test_connections_are_closed_after_each_call(tmp_path):
    repo = TodoRepository(db_path=tmp_path / "todo.db")
    opened = []
    connect = repo._connect

    def tracking_connect():
        conn = connect()
        opened.append(conn)
        return conn

    repo._connect = tracking_connect

    item = repo.insert("Task", due_at=NOW + timedelta(days=1), created_at=NOW)
    repo.get(item.id)
    repo.scan_all()
    repo.put(item.with_changes(description="Changed"), expected_status=TodoStatus.NOT_DONE)
    repo.transition(item.id, TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, NOW)
    repo.bulk_transition(TodoStatus.NOT_DONE, TodoStatus.PAST_DUE, NOW)
    repo.count()

    assert len(opened) == 7
    for conn in opened:
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")
