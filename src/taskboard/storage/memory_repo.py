# src/taskboard/storage/memory_repo.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..tasks.task_models import SubTask, Task

logger = logging.getLogger(__name__)


class InMemoryTaskRepo:
    """
    List-backed TaskRepo.

    Records are stored in wire form (dicts), so whatever the board hands in is
    copied on the way in and rebuilt on the way out, like a real backend.
    """

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._rows: list[dict[str, Any]] = [t.to_dict() for t in tasks]

    def load_all(self) -> list[Task]:
        return [Task.from_dict(r) for r in self._rows]

    def insert(self, task: Task, index: int | None = None) -> bool:
        row = task.to_dict()
        if index is None:
            self._rows.append(row)
        else:
            self._rows.insert(max(0, min(index, len(self._rows))), row)
        return True

    def update(self, task_id: str, fields: Mapping[str, Any]) -> bool:
        row = self._find(task_id)
        if row is None:
            logger.debug("update: no row id=%s", task_id)
            return True
        current = Task.from_dict(row).merged(fields)
        row.clear()
        row.update(current.to_dict())
        return True

    def delete(self, task_id: str) -> bool:
        self._rows = [r for r in self._rows if r.get("id") != task_id]
        return True

    def update_subtasks(self, task_id: str, subtasks: tuple[SubTask, ...]) -> bool:
        row = self._find(task_id)
        if row is not None:
            row["subtasks"] = [s.to_dict() for s in subtasks]
        return True

    def _find(self, task_id: str) -> dict[str, Any] | None:
        for row in self._rows:
            if row.get("id") == task_id:
                return row
        return None
