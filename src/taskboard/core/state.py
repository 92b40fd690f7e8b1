# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.board import TaskBoard
from .ports import Notifier, TaskRepo


@dataclass
class AppState:
    """
    Application context, built once by cli.bootstrap.create_initial_state()
    and passed explicitly to connectors and commands. There is no global
    instance; cli.bootstrap.shutdown_state() is the matching teardown.
    """

    # Settings object (config.Settings or a test SimpleNamespace).
    settings: Any

    repo: TaskRepo
    notifier: Notifier
    board: TaskBoard
