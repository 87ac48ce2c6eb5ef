from datetime import datetime, timedelta, timezone

import pytest

from src.todo import TodoRepository, TodoService


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def repo(tmp_path):
    return TodoRepository(db_path=tmp_path / "todo.db")


@pytest.fixture
def service(repo, clock):
    return TodoService(repo, clock=clock)
