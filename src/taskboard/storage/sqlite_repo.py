# src/taskboard/storage/sqlite_repo.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..errors import PersistenceError
from ..tasks.task_models import SubTask, Task, TaskStatus, subtasks_from_list, subtasks_to_list

logger = logging.getLogger(__name__)


class SqliteTaskRepo:
    """
    SQLite task repository.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Board order is kept in a `position` column; the subtask tree is stored as
    JSON in the wire shape.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteTaskRepo ready db=%s", self._db_path)

    def close(self) -> None:
        """Shutdown hook (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL DEFAULT 0,
                    title TEXT NOT NULL DEFAULT '',
                    description TEXT NOT NULL DEFAULT '',
                    status TEXT NOT NULL DEFAULT 'pending',
                    created_at INTEGER NOT NULL DEFAULT 0,
                    subtasks TEXT NOT NULL DEFAULT '[]'
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("SqliteTaskRepo migration: added column %s", name)

            add_col("position", "INTEGER NOT NULL DEFAULT 0")
            add_col("title", "TEXT NOT NULL DEFAULT ''")
            add_col("description", "TEXT NOT NULL DEFAULT ''")
            add_col("status", "TEXT NOT NULL DEFAULT 'pending'")
            add_col("created_at", "INTEGER NOT NULL DEFAULT 0")
            add_col("subtasks", "TEXT NOT NULL DEFAULT '[]'")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_position ON tasks(position)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _tree_to_str(tree: tuple[SubTask, ...]) -> str:
        return json.dumps(subtasks_to_list(tree), ensure_ascii=False)

    @staticmethod
    def _str_to_tree(s: str | None) -> tuple[SubTask, ...]:
        if not s:
            return ()
        try:
            val = json.loads(s)
        except ValueError:
            logger.warning("Corrupt subtasks JSON; loading an empty checklist.")
            return ()
        return subtasks_from_list(val) if isinstance(val, list) else ()

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            description=str(row["description"] or ""),
            status=TaskStatus.from_db(row["status"]),
            created_at=int(row["created_at"] or 0),
            subtasks=self._str_to_tree(row["subtasks"]),
        )

    def _write(self, label: str, sql: str, params: tuple[Any, ...] | list[Any]) -> bool:
        conn = self._get_conn()
        try:
            conn.execute(sql, params)
            conn.commit()
            return True
        except sqlite3.Error:
            logger.exception("SqliteTaskRepo %s failed", label)
            return False
        finally:
            conn.close()

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def load_all(self) -> list[Task]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM tasks ORDER BY position ASC, created_at ASC").fetchall()
            return [self._row_to_task(r) for r in rows]
        except sqlite3.Error as e:
            raise PersistenceError(f"failed to load tasks from {self._db_path}") from e
        finally:
            conn.close()

    def insert(self, task: Task, index: int | None = None) -> bool:
        """
        Insert at the end, or at `index` in board order (restoring a deleted
        task). Rows at or after `index` are shifted down by one.
        """
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if index is None:
                (pos,) = cur.execute("SELECT COALESCE(MAX(position) + 1, 0) FROM tasks").fetchone()
            else:
                ids = [r["id"] for r in cur.execute("SELECT id FROM tasks ORDER BY position ASC, created_at ASC")]
                index = max(0, min(index, len(ids)))
                for p, tid in enumerate(ids):
                    cur.execute(
                        "UPDATE tasks SET position = ? WHERE id = ?",
                        (p if p < index else p + 1, tid),
                    )
                pos = index
            cur.execute(
                """
                INSERT INTO tasks(id, position, title, description, status, created_at, subtasks)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    int(pos),
                    task.title,
                    task.description,
                    task.status.value,
                    int(task.created_at),
                    self._tree_to_str(task.subtasks),
                ),
            )
            conn.commit()
            logger.debug("Task row inserted id=%s position=%s", task.id, pos)
            return True
        except sqlite3.Error:
            conn.rollback()
            logger.exception("SqliteTaskRepo insert failed id=%s", task.id)
            return False
        finally:
            conn.close()

    def update(self, task_id: str, fields: Mapping[str, Any]) -> bool:
        sets: list[str] = []
        params: list[Any] = []

        if "title" in fields:
            sets.append("title = ?")
            params.append(str(fields["title"]))

        if "description" in fields:
            sets.append("description = ?")
            params.append(str(fields["description"] or ""))

        if "status" in fields:
            sets.append("status = ?")
            params.append(TaskStatus.parse(fields["status"]).value)

        if "subtasks" in fields:
            tree = tuple(
                s if isinstance(s, SubTask) else SubTask.from_dict(s) for s in fields["subtasks"]
            )
            sets.append("subtasks = ?")
            params.append(self._tree_to_str(tree))

        if not sets:
            return True

        params.append(task_id)
        return self._write("update", f"UPDATE tasks SET {', '.join(sets)} WHERE id = ?", params)

    def delete(self, task_id: str) -> bool:
        return self._write("delete", "DELETE FROM tasks WHERE id = ?", (task_id,))

    def update_subtasks(self, task_id: str, subtasks: tuple[SubTask, ...]) -> bool:
        return self._write(
            "update_subtasks",
            "UPDATE tasks SET subtasks = ? WHERE id = ?",
            (self._tree_to_str(subtasks), task_id),
        )
