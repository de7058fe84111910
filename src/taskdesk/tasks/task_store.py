# src/taskdesk/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from ..errors import StorageInitError, StoreNotInitializedError, TaskStoreError
from .task_collection import TaskCollection
from .task_models import DEFAULT_CATEGORY, Priority, Task

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, description, priority, due_date, completed, category"


class TaskStore:
    """
    SQLite task store.

    Schema handling is "create table if missing" only; there are no
    migrations.

    Every public method opens its own connection and closes it before
    returning, on success and on error. The store keeps no state besides the
    database path and whether initialize() has succeeded.

    sqlite3 errors never leave this class: they are re-raised as
    TaskStoreError with the original exception chained.
    """

    def __init__(self, db_path: str | Path = "taskmanager.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._initialized = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _session(self, action: str) -> Iterator[sqlite3.Connection]:
        if not self._initialized:
            raise StoreNotInitializedError()
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            logger.exception("TaskStore: cannot open %s (%s)", self._db_path, action)
            raise TaskStoreError(f"Failed to {action}: cannot open database", e) from e
        try:
            yield conn
        except sqlite3.Error as e:
            logger.exception("TaskStore: failed to %s", action)
            raise TaskStoreError(f"Failed to {action}", e) from e
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        try:
            due = date.fromisoformat(str(row["due_date"]))
        except (TypeError, ValueError) as e:
            raise TaskStoreError(f"Stored task {row['id']} has an invalid due_date", e) from e
        return Task(
            title=str(row["title"] or ""),
            description=row["description"],
            priority=Priority.from_db(row["priority"]),
            due_date=due,
            completed=bool(row["completed"]),
            category=row["category"] or DEFAULT_CATEGORY,
            id=str(row["id"]),
        )

    @staticmethod
    def _task_params(task: Task) -> tuple[object, ...]:
        try:
            priority = Priority(task.priority).value
            due = task.due_date.isoformat()
        except (AttributeError, TypeError, ValueError) as e:
            raise TaskStoreError(f"Task {task.id} cannot be stored: bad priority or due_date", e) from e
        return (
            task.id,
            task.title,
            task.description,
            priority,
            due,
            1 if task.completed else 0,
            task.category or DEFAULT_CATEGORY,
        )

    # ---- public API ----

    def initialize(self) -> None:
        """Create the data directory and the tasks table if missing. Idempotent."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS tasks (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL,
                        description TEXT,
                        priority TEXT NOT NULL,
                        due_date TEXT NOT NULL,
                        completed INTEGER NOT NULL,
                        category TEXT NOT NULL
                    )
                    """
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            logger.exception("Database initialization failed db=%s", self._db_path)
            raise StorageInitError(f"Failed to initialize database at {self._db_path}", e) from e

        self._initialized = True
        logger.info("TaskStore ready db=%s", self._db_path)

    def count_tasks(self) -> int:
        with self._session("count tasks") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def save(self, task: Task) -> bool:
        """Insert the task, or overwrite every column of the row with the same id."""
        with self._session(f"save task {task.id}") as conn:
            cur = conn.execute(
                f"""
                INSERT INTO tasks ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    priority = excluded.priority,
                    due_date = excluded.due_date,
                    completed = excluded.completed,
                    category = excluded.category
                """,
                self._task_params(task),
            )
            conn.commit()
            affected = cur.rowcount
        logger.debug("Saved task %s (%s rows affected)", task.id, affected)
        return affected > 0

    def get(self, task_id: str) -> Task | None:
        with self._session(f"load task {task_id}") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        return self._row_to_task(row) if row else None

    def load_all(self) -> TaskCollection:
        """
        Load every stored task, ids preserved.

        Order is whatever SQLite returns; it is not guaranteed to match the
        order the tasks were created in.
        """
        with self._session("load tasks") as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM tasks").fetchall()

        tasks = TaskCollection("All Tasks")
        for row in rows:
            tasks.add(self._row_to_task(row))
        logger.info("Loaded %d tasks from database", tasks.count())
        return tasks

    def delete_by_id(self, task_id: str) -> bool:
        """Delete the row for task_id. False (not an error) when nothing matched."""
        with self._session(f"delete task {task_id}") as conn:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            conn.commit()
            affected = cur.rowcount
        logger.debug("Deleted task %s (%s rows affected)", task_id, affected)
        return affected > 0
