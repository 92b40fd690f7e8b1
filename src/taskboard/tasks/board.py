# src/taskboard/tasks/board.py

"""
TaskBoard: the public operations the presentation layer calls.

Every mutating call follows the same sequence:
  1. compute the intended change from the current store,
  2. write it through the TaskRepo,
  3. only on acknowledgement: commit to the TaskStore (which rebuilds its
     linear views) and push/pop the ActionLog,
  4. notify.
A failed write (False or an exception) stops at step 2, so the store and the
history are exactly as before the call.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from ..core.ports import Notifier, Severity, TaskRepo
from .history import Action, ActionKind, ActionLog
from .subtasks import (
    Progress,
    aggregate_progress,
    format_tree,
    insert_subtask,
    remove_subtask,
    toggle_subtask,
)
from .task_models import UPDATABLE_FIELDS, SubTask, Task, TaskStatus, new_id
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskBoard:
    def __init__(
        self,
        repo: TaskRepo,
        notifier: Notifier,
        *,
        store: TaskStore | None = None,
        history: ActionLog | None = None,
        subtask_id_factory: Callable[[], str] = new_id,
    ) -> None:
        self.repo = repo
        self.notifier = notifier
        self.store = store if store is not None else TaskStore()
        self.history = history if history is not None else ActionLog()
        self._subtask_id_factory = subtask_id_factory
        # Undo/redo pop-then-push sequences must not interleave.
        self._lock = threading.RLock()

    # ---- helpers ----

    def _notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        try:
            self.notifier.notify(message, severity)
        except Exception:
            logger.debug("Notifier failed.", exc_info=True)

    def _persist(self, label: str, write: Callable[..., bool], *args: Any) -> bool:
        try:
            ok = bool(write(*args))
        except Exception:
            logger.exception("Persistence %s raised", label)
            ok = False
        if not ok:
            logger.warning("Persistence %s failed; operation abandoned.", label)
            self._notify(f"Could not save changes ({label}). Nothing was modified.", Severity.ERROR)
        return ok

    # ---- queries ----

    def load(self) -> int:
        """Replace the in-memory collection with the repo contents. History starts empty."""
        with self._lock:
            tasks = list(self.repo.load_all())
            self.store.reset(tasks)
            self.history.clear()
            logger.info("Board loaded total=%d", len(tasks))
            return len(tasks)

    def tasks(self) -> list[Task]:
        return self.store.all()

    def find(self, task_id: str) -> Task | None:
        return self.store.find(task_id)

    def by_status(self) -> dict[TaskStatus, list[Task]]:
        columns: dict[TaskStatus, list[Task]] = {s: [] for s in TaskStatus}
        for task in self.store.all():
            columns[task.status].append(task)
        return columns

    def progress(self, task_id: str) -> Progress | None:
        task = self.store.find(task_id)
        if task is None:
            return None
        return aggregate_progress(task.subtasks)

    # ---- task operations ----

    def create(
        self,
        title: str,
        description: str = "",
        status: TaskStatus | str = TaskStatus.PENDING,
    ) -> Task | None:
        with self._lock:
            task = self.store.build(title, description, status)
            if not self._persist("insert", self.repo.insert, task):
                return None
            self.store.append(task)
            self.history.record_add(task)
            self._notify(f'Task "{task.title}" created.', Severity.SUCCESS)
            return task

    def update(self, task_id: str, fields: Mapping[str, Any]) -> Task | None:
        """Merge `fields` into the task. Unknown id: silent no-op (None)."""
        with self._lock:
            current = self.store.find(task_id)
            if current is None:
                logger.debug("update: unknown task id=%s", task_id)
                return None
            updated = current.merged(fields)
            wire = updated.fields()
            changed = {k: wire[k] for k in fields if k in UPDATABLE_FIELDS}
            if not self._persist("update", self.repo.update, task_id, changed):
                return None
            self.history.record_update(current)
            self.store.replace(updated)
            self._notify("Task updated.", Severity.INFO)
            return updated

    def delete(self, task_id: str) -> bool:
        """Remove the task. Unknown id: silent no-op (False)."""
        with self._lock:
            index = self.store.index_of(task_id)
            if index is None:
                logger.debug("delete: unknown task id=%s", task_id)
                return False
            task = self.store.all()[index]
            if not self._persist("delete", self.repo.delete, task_id):
                return False
            self.history.record_delete(task, index)
            self.store.remove(task_id)
            self._notify(f'Task "{task.title}" deleted.', Severity.ERROR)
            return True

    # ---- subtask operations (clear redo, not recorded for undo) ----

    def _commit_tree(self, label: str, task: Task, tree: tuple[SubTask, ...]) -> bool:
        if not self._persist(label, self.repo.update_subtasks, task.id, tree):
            return False
        self.store.update(task.id, {"subtasks": tree})
        self.history.clear_redo()
        return True

    def add_subtask(self, task_id: str, text: str, parent_id: str | None = None) -> SubTask | None:
        """
        Append a new unchecked item under `parent_id` (or at the root). An
        unknown parent leaves the tree unchanged; an unknown task is a no-op.
        """
        with self._lock:
            task = self.store.find(task_id)
            if task is None:
                return None
            node = SubTask(id=self._subtask_id_factory(), text=text)
            tree = insert_subtask(task.subtasks, node, parent_id)
            if not self._commit_tree("add_subtask", task, tree):
                return None
            return node if tree is not task.subtasks else None

    def toggle_subtask(self, task_id: str, subtask_id: str) -> bool:
        with self._lock:
            task = self.store.find(task_id)
            if task is None:
                return False
            tree = toggle_subtask(task.subtasks, subtask_id)
            if not self._commit_tree("toggle_subtask", task, tree):
                return False
            return tree is not task.subtasks

    def remove_subtask(self, task_id: str, subtask_id: str) -> bool:
        with self._lock:
            task = self.store.find(task_id)
            if task is None:
                return False
            tree = remove_subtask(task.subtasks, subtask_id)
            if not self._commit_tree("remove_subtask", task, tree):
                return False
            self._notify("Subtask removed.", Severity.ERROR)
            return tree is not task.subtasks

    # ---- history ----

    def _persist_effect(self, label: str, kind: ActionKind, action: Action) -> bool:
        """Write the effect of applying `kind` with the snapshot held by `action`."""
        if kind is ActionKind.ADD:
            # index is set for DELETE actions only; None appends.
            return self._persist(label, self.repo.insert, action.data, action.index)
        if kind is ActionKind.DELETE:
            return self._persist(label, self.repo.delete, action.data.id)
        return self._persist(label, self.repo.update, action.data.id, action.data.fields())

    def undo(self) -> bool:
        with self._lock:
            action = self.history.peek_undo()
            if action is None:
                self._notify("Nothing to undo.", Severity.INFO)
                return False

            title = action.data.title
            # Reverse effect: ADD -> delete, DELETE -> re-insert at index, UPDATE -> overwrite.
            reverse = {
                ActionKind.ADD: ActionKind.DELETE,
                ActionKind.DELETE: ActionKind.ADD,
                ActionKind.UPDATE: ActionKind.UPDATE,
            }[action.kind]
            if not self._persist_effect("undo", reverse, action):
                return False

            self.history.undo(self.store)
            if action.kind is ActionKind.UPDATE:
                self._notify(f'Undone: task "{title}" reverted.', Severity.INFO)
            elif action.kind is ActionKind.DELETE:
                self._notify(f'Undone: task "{title}" restored.', Severity.INFO)
            else:
                self._notify("Undone: created task removed.", Severity.INFO)
            return True

    def redo(self) -> bool:
        with self._lock:
            action = self.history.peek_redo()
            if action is None:
                self._notify("Nothing to redo.", Severity.INFO)
                return False

            title = action.data.title
            if not self._persist_effect("redo", action.kind, action):
                return False

            self.history.redo(self.store)
            if action.kind is ActionKind.UPDATE:
                self._notify(f'Redone: task "{title}" updated.', Severity.INFO)
            elif action.kind is ActionKind.DELETE:
                self._notify("Redone: task deleted again.", Severity.INFO)
            else:
                self._notify(f'Redone: task "{title}" restored.', Severity.INFO)
            return True

    # ---- inspection ----

    def describe_structures(self) -> str:
        idx = self.store.indexes
        lines = [
            f"Doubly linked list (current): {idx.linked.describe()}",
            f"Stack (top to bottom): {idx.stack.describe()}",
            f"Queue (front to back): {idx.queue.describe()}",
            "Subtask trees:",
        ]
        for task in self.store.all():
            if task.subtasks:
                lines.append(f"  Task: {task.title}")
                lines.extend("    " + line for line in format_tree(task.subtasks))
        text = "\n".join(lines)
        logger.debug("Structures:\n%s", text)
        return text

    def pop_from_stack(self) -> Task | None:
        with self._lock:
            item = self.store.indexes.stack.pop()
            if item is None:
                self._notify("Stack is empty.", Severity.WARNING)
            else:
                self._notify(f"Stack pop: {item.title}", Severity.INFO)
            return item

    def dequeue_from_queue(self) -> Task | None:
        with self._lock:
            item = self.store.indexes.queue.dequeue()
            if item is None:
                self._notify("Queue is empty.", Severity.WARNING)
            else:
                self._notify(f"Queue dequeue: {item.title}", Severity.INFO)
            return item
