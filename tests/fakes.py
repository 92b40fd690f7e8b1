# tests/fakes.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from taskboard.core.ports import Severity
from taskboard.storage.memory_repo import InMemoryTaskRepo
from taskboard.tasks.task_models import SubTask, Task


class SequentialIds:
    """Deterministic id factory: p0001, p0002, ..."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"{self.prefix}{self.n:04d}"


class FakeClock:
    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


@dataclass(slots=True)
class Notice:
    message: str
    severity: Severity


@dataclass(slots=True)
class RecordingNotifier:
    notices: list[Notice] = field(default_factory=list)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.notices.append(Notice(message=message, severity=Severity(severity)))

    @property
    def last(self) -> Notice | None:
        return self.notices[-1] if self.notices else None


class FlakyTaskRepo(InMemoryTaskRepo):
    """
    InMemoryTaskRepo that can be told to fail writes.

    - fail_next: the next write returns False
    - raise_next: the next write raises RuntimeError
    Writes that went through are counted in `writes`.
    """

    def __init__(self, tasks=()) -> None:
        super().__init__(tasks)
        self.fail_next = False
        self.raise_next = False
        self.writes: list[str] = []

    def _gate(self, name: str) -> bool:
        if self.raise_next:
            self.raise_next = False
            raise RuntimeError(f"backend down during {name}")
        if self.fail_next:
            self.fail_next = False
            return False
        self.writes.append(name)
        return True

    def insert(self, task: Task, index: int | None = None) -> bool:
        return self._gate("insert") and super().insert(task, index)

    def update(self, task_id: str, fields: Mapping[str, Any]) -> bool:
        return self._gate("update") and super().update(task_id, fields)

    def delete(self, task_id: str) -> bool:
        return self._gate("delete") and super().delete(task_id)

    def update_subtasks(self, task_id: str, subtasks: tuple[SubTask, ...]) -> bool:
        return self._gate("update_subtasks") and super().update_subtasks(task_id, subtasks)
