# src/taskboard/tasks/history.py

"""
Undo/redo action log.

Two LIFO stacks of Actions. Recording a new action clears redo (no branching
history). Undo moves the top action to redo and applies its reverse effect;
redo moves it back and re-applies the forward effect.

UPDATE actions carry a single snapshot that is swapped on every move: on undo
it is replaced with the record as it was just before undoing (the state redo
must restore), and on redo with the record just before redoing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class ActionKind(StrEnum):
    ADD = "ADD"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(slots=True)
class Action:
    kind: ActionKind
    # ADD: the created record. UPDATE: the record to restore on the next move.
    # DELETE: the removed record.
    data: Task
    # DELETE only: position in the store before removal.
    index: int | None = None


class ActionLog:
    def __init__(self) -> None:
        self._undo: list[Action] = []
        self._redo: list[Action] = []

    # ---- inspection ----

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def peek_undo(self) -> Action | None:
        return self._undo[-1] if self._undo else None

    def peek_redo(self) -> Action | None:
        return self._redo[-1] if self._redo else None

    # ---- recording ----

    def record(self, action: Action) -> None:
        self._undo.append(action)
        self.clear_redo()
        logger.debug(
            "Action recorded kind=%s task=%s undo_depth=%d",
            action.kind,
            action.data.id,
            len(self._undo),
        )

    def record_add(self, task: Task) -> None:
        self.record(Action(ActionKind.ADD, task.snapshot()))

    def record_update(self, before: Task) -> None:
        self.record(Action(ActionKind.UPDATE, before.snapshot()))

    def record_delete(self, task: Task, index: int) -> None:
        self.record(Action(ActionKind.DELETE, task.snapshot(), index=index))

    def clear_redo(self) -> None:
        self._redo.clear()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    # ---- transitions ----

    def undo(self, store: TaskStore) -> Action | None:
        """Reverse the newest action against `store`. None when there is nothing to undo."""
        if not self._undo:
            return None
        action = self._undo.pop()

        if action.kind is ActionKind.UPDATE:
            restore = action.data
            current = store.find(restore.id)
            action.data = current.snapshot() if current is not None else restore.snapshot()
            self._redo.append(action)
            store.replace(restore)
        elif action.kind is ActionKind.DELETE:
            self._redo.append(action)
            store.insert_at(action.index if action.index is not None else len(store), action.data)
        else:
            self._redo.append(action)
            store.remove(action.data.id)

        logger.info("Undo kind=%s task=%s", action.kind, action.data.id)
        return action

    def redo(self, store: TaskStore) -> Action | None:
        """Re-apply the newest undone action. None when there is nothing to redo."""
        if not self._redo:
            return None
        action = self._redo.pop()

        if action.kind is ActionKind.UPDATE:
            apply = action.data
            current = store.find(apply.id)
            action.data = current.snapshot() if current is not None else apply.snapshot()
            self._undo.append(action)
            store.replace(apply)
        elif action.kind is ActionKind.DELETE:
            self._undo.append(action)
            store.remove(action.data.id)
        else:
            self._undo.append(action)
            store.append(action.data)

        logger.info("Redo kind=%s task=%s", action.kind, action.data.id)
        return action
