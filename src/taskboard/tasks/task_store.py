# src/taskboard/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from .structures import TaskIndexes
from .task_models import Task, TaskStatus, new_id

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    """
    Authoritative, order-preserving in-memory task collection.

    - Records are frozen; "mutation" replaces a record at the same position.
    - Missing ids are silent no-ops (update/delete return None).
    - The linear views in `indexes` are rebuilt after every change.

    No persistence and no history here: TaskBoard layers both on top.
    """

    def __init__(
        self,
        tasks: Iterable[Task] = (),
        *,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._tasks: list[Task] = list(tasks)
        self._id_factory = id_factory
        self._clock = clock
        self.indexes = TaskIndexes()
        self._reindex()

    # ---- queries ----

    def all(self) -> list[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def find(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    # ---- high-level operations ----

    def build(
        self,
        title: str,
        description: str = "",
        status: TaskStatus | str = TaskStatus.PENDING,
    ) -> Task:
        """Allocate id + timestamp for a new record without storing it."""
        return Task(
            id=self._id_factory(),
            title=title,
            description=description,
            status=TaskStatus.parse(status),
            created_at=self._clock(),
        )

    def create(
        self,
        title: str,
        description: str = "",
        status: TaskStatus | str = TaskStatus.PENDING,
    ) -> Task:
        task = self.build(title, description, status)
        self.append(task)
        return task

    def update(self, task_id: str, fields: Mapping[str, Any]) -> Task | None:
        current = self.find(task_id)
        if current is None:
            return None
        updated = current.merged(fields)
        self.replace(updated)
        return updated

    def delete(self, task_id: str) -> tuple[int, Task] | None:
        return self.remove(task_id)

    # ---- primitives ----

    def reset(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)
        self._reindex()
        logger.debug("TaskStore reset total=%d", len(self._tasks))

    def append(self, task: Task) -> None:
        self._tasks.append(task)
        self._reindex()
        logger.debug("Task appended id=%s total=%d", task.id, len(self._tasks))

    def insert_at(self, index: int, task: Task) -> None:
        index = max(0, min(index, len(self._tasks)))
        self._tasks.insert(index, task)
        self._reindex()
        logger.debug("Task inserted id=%s index=%d", task.id, index)

    def replace(self, task: Task) -> bool:
        idx = self.index_of(task.id)
        if idx is None:
            return False
        self._tasks[idx] = task
        self._reindex()
        logger.debug("Task replaced id=%s index=%d", task.id, idx)
        return True

    def remove(self, task_id: str) -> tuple[int, Task] | None:
        idx = self.index_of(task_id)
        if idx is None:
            return None
        task = self._tasks.pop(idx)
        self._reindex()
        logger.debug("Task removed id=%s index=%d", task_id, idx)
        return idx, task

    def _reindex(self) -> None:
        self.indexes.rebuild(self._tasks)
