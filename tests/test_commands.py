# tests/test_commands.py

from __future__ import annotations

from taskboard.cli.commands import CommandRegistry, registry
from taskboard.tasks.task_models import TaskStatus


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    seen: list[tuple[list[str], str]] = []

    def handler(state, args, raw):
        seen.append((args, raw))
        return "ok"

    reg.register("a", handler, "a", aliases=["alpha"])

    assert reg.handle(state, '/a x "y z"') == "ok"
    assert reg.handle(state, "/ALPHA") == "ok"
    assert seen == [(["x", "y z"], 'x "y z"'), ([], "")]
    assert "/a - a" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_move_edit_and_list(state) -> None:
    reply = registry.handle(state, "/add Buy milk | 2 litres | in-progress")
    assert reply == "Created t0001."
    [task] = state.board.tasks()
    assert (task.title, task.description, task.status) == ("Buy milk", "2 litres", TaskStatus.IN_PROGRESS)

    assert registry.handle(state, "/move t0001 done") == ""
    assert state.board.find("t0001").status is TaskStatus.COMPLETED

    registry.handle(state, '/edit t0001 title="Buy oat milk" description=')
    task = state.board.find("t0001")
    assert (task.title, task.description) == ("Buy oat milk", "")

    board_text = registry.handle(state, "/list")
    assert "== COMPLETED (1) ==" in board_text
    assert "== PENDING (0) ==" in board_text
    assert "t0001  Buy oat milk" in board_text


def test_bad_input_is_reported_not_raised(state) -> None:
    assert "Usage" in registry.handle(state, "/add")
    assert "Unknown status" in registry.handle(state, "/add x | | archived")
    assert "No task matches" in registry.handle(state, "/rm nope")

    registry.handle(state, "/add one")
    registry.handle(state, "/add two")
    assert "ambiguous" in registry.handle(state, "/rm t000")
    assert "Unknown status" in registry.handle(state, "/move t0001 archived")
    assert "Cannot parse" in registry.handle(state, "/edit t0001 colour=red")
    assert len(state.board.tasks()) == 2


def test_sub_commands_and_progress_render(state) -> None:
    registry.handle(state, "/add Trip")
    assert registry.handle(state, "/sub add t0001 pack bags") == "Added s0001."
    assert registry.handle(state, "/sub nest t0001 s0001 socks") == "Added s0002 under s0001."
    registry.handle(state, "/sub toggle t0001 s0002")

    text = registry.handle(state, "/list")
    assert "Trip  1/2 (50%)" in text
    assert "[ ] pack bags  (s0001)" in text
    assert "[x] socks  (s0002)" in text

    registry.handle(state, "/sub rm t0001 s0001")
    assert state.board.find("t0001").subtasks == ()
    assert "No subtask matches" in registry.handle(state, "/sub toggle t0001 s0009")
    assert "Subtasks:" in registry.handle(state, "/sub")


def test_undo_redo_debug_pop_dequeue(state, notifier) -> None:
    registry.handle(state, "/add a")
    registry.handle(state, "/add b")
    registry.handle(state, "/undo")
    assert [t.title for t in state.board.tasks()] == ["a"]
    registry.handle(state, "/redo")
    assert [t.title for t in state.board.tasks()] == ["a", "b"]

    assert "[a] <-> [b]" in registry.handle(state, "/debug")
    registry.handle(state, "/pop")
    assert notifier.last.message == "Stack pop: b"
    registry.handle(state, "/dequeue")
    assert notifier.last.message == "Queue dequeue: a"
