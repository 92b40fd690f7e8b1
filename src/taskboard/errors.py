# src/taskboard/errors.py

from __future__ import annotations


class TaskBoardError(Exception):
    """Base class for board errors."""


class PersistenceError(TaskBoardError):
    """A storage backend could not complete a write (or a load)."""
