# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.state import AppState
from taskboard.tasks.board import TaskBoard
from taskboard.tasks.task_store import TaskStore

from .fakes import FakeClock, FlakyTaskRepo, RecordingNotifier, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        storage="memory",
        console_notify=False,
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "tasks.sqlite3",
    )


@pytest.fixture()
def repo() -> FlakyTaskRepo:
    return FlakyTaskRepo()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def board(repo: FlakyTaskRepo, notifier: RecordingNotifier) -> TaskBoard:
    """TaskBoard with deterministic task ids (t0001...), subtask ids (s0001...) and clock."""
    store = TaskStore(id_factory=SequentialIds("t"), clock=FakeClock())
    return TaskBoard(repo, notifier, store=store, subtask_id_factory=SequentialIds("s"))


@pytest.fixture()
def state(settings: SimpleNamespace, repo, notifier, board: TaskBoard) -> AppState:
    return AppState(settings=settings, repo=repo, notifier=notifier, board=board)
