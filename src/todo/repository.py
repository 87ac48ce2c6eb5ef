from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models import TodoItem, TodoStatus, ensure_utc

logger = logging.getLogger(__name__)


def _to_db(value: Optional[datetime]) -> Optional[str]:
    # Fixed-width UTC text so that SQL string comparison orders like time.
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="microseconds")


def _from_db(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value))


class TodoRepository:
    """SQLite-backed todo store.

    Each call opens (and closes) its own connection, so one instance can be shared between
    request threads and the sweep thread. Writes that depend on a status read
    earlier take that status as a precondition in the UPDATE itself.
    """

    def __init__(self, db_path: Optional[Path] = None, timeout_seconds: float = 30.0):
        root = Path(__file__).resolve().parents[2]
        default_path = root / "data" / "todo.db"
        env_path = os.getenv("TODO_DB_PATH")
        if db_path:
            self.db_path = Path(db_path)
        elif env_path:
            self.db_path = Path(env_path)
        else:
            self.db_path = default_path
        self.timeout_seconds = timeout_seconds
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    description TEXT NOT NULL,
                    status TEXT NOT NULL CHECK (status IN ('not done','done','past due')),
                    created_at TEXT NOT NULL,
                    due_at TEXT NOT NULL,
                    done_at TEXT
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_todos_status_due ON todos(status, due_at)"
            )
            conn.commit()
        logger.debug("Todo store ready at %s", self.db_path)

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> TodoItem:
        return TodoItem(
            id=row["id"],
            description=row["description"],
            status=TodoStatus(row["status"]),
            created_at=_from_db(row["created_at"]),
            due_at=_from_db(row["due_at"]),
            done_at=_from_db(row["done_at"]),
        )

    def count(self) -> int:
        with closing(self._connect()) as conn, conn:
            (total,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
        return int(total)

    def get(self, todo_id: int) -> Optional[TodoItem]:
        with closing(self._connect()) as conn, conn:
            row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
        return self._row_to_item(row) if row else None

    def scan_all(self) -> list[TodoItem]:
        with closing(self._connect()) as conn, conn:
            rows = conn.execute("SELECT * FROM todos ORDER BY id").fetchall()
        return [self._row_to_item(row) for row in rows]

    def scan_by_status(self, status: TodoStatus) -> list[TodoItem]:
        with closing(self._connect()) as conn, conn:
            rows = conn.execute(
                "SELECT * FROM todos WHERE status = ? ORDER BY id", (status.value,)
            ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def insert(
        self,
        description: str,
        due_at: datetime,
        created_at: datetime,
        status: TodoStatus = TodoStatus.NOT_DONE,
        done_at: Optional[datetime] = None,
    ) -> TodoItem:
        with closing(self._connect()) as conn, conn:
            cursor = conn.execute(
                """
                INSERT INTO todos (description, status, created_at, due_at, done_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (description, status.value, _to_db(created_at), _to_db(due_at), _to_db(done_at)),
            )
            conn.commit()
            todo_id = cursor.lastrowid
            row = conn.execute("SELECT * FROM todos WHERE id = ?", (todo_id,)).fetchone()
        return self._row_to_item(row)

    def put(
        self,
        item: TodoItem,
        *,
        expected_status: Optional[TodoStatus] = None,
    ) -> Optional[TodoItem]:
        """Overwrite the mutable fields of ``item``.

        ``created_at`` is never rewritten. With ``expected_status`` the write
        only happens if the stored status still matches; returns None when
        the precondition fails or the row no longer exists.
        """
        sql = "UPDATE todos SET description = ?, status = ?, due_at = ?, done_at = ? WHERE id = ?"
        params: list[object] = [
            item.description,
            item.status.value,
            _to_db(item.due_at),
            _to_db(item.done_at),
            item.id,
        ]
        if expected_status is not None:
            sql += " AND status = ?"
            params.append(expected_status.value)

        with closing(self._connect()) as conn, conn:
            cursor = conn.execute(sql, params)
            conn.commit()
            if cursor.rowcount != 1:
                return None
            row = conn.execute("SELECT * FROM todos WHERE id = ?", (item.id,)).fetchone()
        return self._row_to_item(row) if row else None

    def transition(
        self,
        todo_id: int,
        from_status: TodoStatus,
        to_status: TodoStatus,
        before: datetime,
    ) -> bool:
        """Single-record conditional transition; only the status column changes."""
        with closing(self._connect()) as conn, conn:
            cursor = conn.execute(
                "UPDATE todos SET status = ? WHERE id = ? AND status = ? AND due_at < ?",
                (to_status.value, todo_id, from_status.value, _to_db(before)),
            )
            conn.commit()
            return cursor.rowcount == 1

    def bulk_transition(
        self,
        from_status: TodoStatus,
        to_status: TodoStatus,
        before: datetime,
    ) -> int:
        """Set-based transition of every ``from_status`` row due before ``before``."""
        with closing(self._connect()) as conn, conn:
            cursor = conn.execute(
                "UPDATE todos SET status = ? WHERE status = ? AND due_at < ?",
                (to_status.value, from_status.value, _to_db(before)),
            )
            conn.commit()
            return cursor.rowcount
