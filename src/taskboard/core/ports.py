# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The board depends on Protocols instead of concrete implementations.
This keeps storage backends and notification sinks swappable and makes testing easier.
"""

from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Any, Protocol

from ..tasks.task_models import SubTask, Task


class Severity(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class TaskRepo(Protocol):
    """
    Persistence collaborator.

    Writes return True on acknowledgement. False (or a raised exception) means
    the write did not happen and the board abandons the operation.
    """

    def load_all(self) -> Sequence[Task]: ...
    def insert(self, task: Task, index: int | None = None) -> bool: ...
    def update(self, task_id: str, fields: Mapping[str, Any]) -> bool: ...
    def delete(self, task_id: str) -> bool: ...
    def update_subtasks(self, task_id: str, subtasks: tuple[SubTask, ...]) -> bool: ...


class Notifier(Protocol):
    """Fire-and-forget user notice (the UI's toast)."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None: ...
