# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backend and notifier into a TaskBoard,
- loads the stored tasks,
- tears everything down again on exit.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Notifier, Severity, TaskRepo
from ..core.state import AppState
from ..errors import PersistenceError
from ..notify import ConsoleNotifier, LoggingNotifier
from ..storage.memory_repo import InMemoryTaskRepo
from ..storage.sqlite_repo import SqliteTaskRepo
from ..tasks.board import TaskBoard

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_repo(settings) -> TaskRepo:
    backend = str(getattr(settings, "storage", "sqlite")).lower()
    if backend == "memory":
        return InMemoryTaskRepo()
    return SqliteTaskRepo(settings.tasks_db_path)


def create_initial_state(*, settings=None, notifier: Notifier | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repo = build_repo(settings)
    if notifier is None:
        notifier = ConsoleNotifier() if getattr(settings, "console_notify", True) else LoggingNotifier()

    board = TaskBoard(repo, notifier)
    try:
        board.load()
    except PersistenceError:
        logger.exception("Failed to load tasks; starting with an empty board.")
        notifier.notify("Stored tasks could not be loaded.", Severity.ERROR)

    return AppState(settings=settings, repo=repo, notifier=notifier, board=board)


def shutdown_state(state: AppState) -> None:
    """Best-effort teardown (no exceptions should escape)."""
    close = getattr(state.repo, "close", None)
    if callable(close):
        try:
            close()
        except Exception:
            logger.debug("Repo close failed.", exc_info=True)
