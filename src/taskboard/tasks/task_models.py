# src/taskboard/tasks/task_models.py

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Column a task lives in.

    Values are the wire/storage values; the board renders them as
    "Pending", "In progress" and "Completed".
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | TaskStatus) -> TaskStatus:
        """Strict parse used for user input. Raises ValueError on unknown values."""
        if isinstance(raw, TaskStatus):
            return raw
        key = str(raw or "").strip().lower()
        key = _STATUS_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown task status: {raw!r}") from None

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls.parse(raw)
        except ValueError:
            return cls.PENDING


_STATUS_ALIASES = {
    "todo": "pending",
    "in_progress": "in-progress",
    "inprogress": "in-progress",
    "doing": "in-progress",
    "done": "completed",
}


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class SubTask:
    """
    One checklist node. Children are an immutable tuple, so a tree that was
    handed out (or snapshotted) can never change underneath its holder.
    """

    id: str
    text: str
    completed: bool = False
    subtasks: tuple[SubTask, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "subtasks": [s.to_dict() for s in self.subtasks],
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> SubTask:
        return cls(
            id=str(raw["id"]),
            text=str(raw.get("text", "")),
            completed=bool(raw.get("completed", False)),
            subtasks=subtasks_from_list(raw.get("subtasks") or []),
        )


def subtasks_from_list(items: Any) -> tuple[SubTask, ...]:
    return tuple(SubTask.from_dict(s) for s in items if isinstance(s, Mapping))


def subtasks_to_list(tree: tuple[SubTask, ...]) -> list[dict[str, Any]]:
    return [s.to_dict() for s in tree]


# Fields a partial update may touch. id and createdAt are fixed at creation.
UPDATABLE_FIELDS = frozenset({"title", "description", "status", "subtasks"})


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    created_at: int = 0  # epoch milliseconds
    subtasks: tuple[SubTask, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "subtasks": subtasks_to_list(self.subtasks),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title", "")),
            description=str(raw.get("description") or ""),
            status=TaskStatus.from_db(raw.get("status")),
            created_at=int(raw.get("createdAt") or 0),
            subtasks=subtasks_from_list(raw.get("subtasks") or []),
        )

    def snapshot(self) -> Task:
        """Structurally independent deep copy (serialization round trip)."""
        return Task.from_dict(self.to_dict())

    def fields(self) -> dict[str, Any]:
        """Every updatable field in wire form; used to overwrite a stored record."""
        data = self.to_dict()
        return {k: data[k] for k in UPDATABLE_FIELDS}

    def merged(self, updates: Mapping[str, Any]) -> Task:
        """
        Apply a partial update. Keys outside UPDATABLE_FIELDS are ignored;
        status goes through TaskStatus.parse, subtasks may be given in wire form.
        """
        changes: dict[str, Any] = {}
        for key, value in updates.items():
            if key not in UPDATABLE_FIELDS:
                continue
            if key == "status":
                changes["status"] = TaskStatus.parse(value)
            elif key == "subtasks":
                changes["subtasks"] = tuple(
                    s if isinstance(s, SubTask) else SubTask.from_dict(s) for s in value
                )
            else:
                changes[key] = str(value)
        return replace(self, **changes) if changes else self
