# tests/test_sqlite_repo.py

from __future__ import annotations

import sqlite3
from pathlib import Path

from taskboard.storage.sqlite_repo import SqliteTaskRepo
from taskboard.tasks.board import TaskBoard
from taskboard.tasks.task_models import SubTask, Task, TaskStatus
from taskboard.tasks.task_store import TaskStore

from .fakes import FakeClock, RecordingNotifier, SequentialIds


def _task(tid: str, title: str, **kw) -> Task:
    return Task(id=tid, title=title, created_at=1000, **kw)


def test_insert_load_round_trip_keeps_wire_shape(tmp_path: Path) -> None:
    repo = SqliteTaskRepo(tmp_path / "tasks.sqlite3")
    task = _task(
        "t1",
        "Trip",
        description="summer",
        status=TaskStatus.IN_PROGRESS,
        subtasks=(
            SubTask(id="s1", text="pack", subtasks=(SubTask(id="s2", text="socks", completed=True),)),
        ),
    )
    assert repo.insert(task)
    assert repo.insert(_task("t2", "Other"))

    loaded = repo.load_all()
    assert loaded == [task, _task("t2", "Other")]
    assert loaded[0].to_dict() == task.to_dict()
    assert repo.count_tasks() == 2


def test_update_delete_and_update_subtasks(tmp_path: Path) -> None:
    repo = SqliteTaskRepo(tmp_path / "tasks.sqlite3")
    repo.insert(_task("t1", "a"))

    assert repo.update("t1", {"status": "completed", "title": "A"})
    assert repo.update("t1", {})
    [t] = repo.load_all()
    assert (t.title, t.status, t.description) == ("A", TaskStatus.COMPLETED, "")

    tree = (SubTask(id="s1", text="x"),)
    assert repo.update_subtasks("t1", tree)
    assert repo.load_all()[0].subtasks == tree

    assert repo.delete("t1")
    assert repo.load_all() == []


def test_insert_at_index_shifts_following_rows(tmp_path: Path) -> None:
    repo = SqliteTaskRepo(tmp_path / "tasks.sqlite3")
    for tid in ("a", "c"):
        repo.insert(_task(tid, tid))
    repo.insert(_task("b", "b"), index=1)
    repo.insert(_task("z", "z"), index=99)
    repo.insert(_task("first", "first"), index=0)

    assert [t.id for t in repo.load_all()] == ["first", "a", "b", "c", "z"]


def test_duplicate_insert_reports_failure(tmp_path: Path) -> None:
    repo = SqliteTaskRepo(tmp_path / "tasks.sqlite3")
    assert repo.insert(_task("t1", "a"))
    assert repo.insert(_task("t1", "again")) is False
    assert [t.title for t in repo.load_all()] == ["a"]


def test_schema_migration_adds_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute("CREATE TABLE tasks (id TEXT PRIMARY KEY, title TEXT)")
    conn.execute("INSERT INTO tasks(id, title) VALUES ('old', 'legacy')")
    conn.commit()
    conn.close()

    repo = SqliteTaskRepo(db)
    [t] = repo.load_all()
    assert t.id == "old"
    assert t.title == "legacy"
    assert t.status is TaskStatus.PENDING
    assert t.subtasks == ()


def test_corrupt_subtasks_json_loads_empty_tree(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    repo = SqliteTaskRepo(db)
    repo.insert(_task("t1", "a"))
    conn = sqlite3.connect(db)
    conn.execute("UPDATE tasks SET subtasks = '{not json' WHERE id = 't1'")
    conn.commit()
    conn.close()

    assert repo.load_all()[0].subtasks == ()


def test_board_over_sqlite_survives_reload(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    notifier = RecordingNotifier()
    store = TaskStore(id_factory=SequentialIds("t"), clock=FakeClock())
    board = TaskBoard(SqliteTaskRepo(db), notifier, store=store, subtask_id_factory=SequentialIds("s"))

    a = board.create("a")
    b = board.create("b")
    board.create("c")
    board.add_subtask(b.id, "child")
    board.update(a.id, {"status": "completed"})
    board.delete(b.id)
    board.undo()  # b back in the middle, with its checklist

    reloaded = TaskBoard(SqliteTaskRepo(db), notifier)
    reloaded.load()
    assert reloaded.tasks() == board.tasks()
    assert [t.title for t in reloaded.tasks()] == ["a", "b", "c"]
    assert reloaded.find(b.id).subtasks[0].text == "child"
    assert reloaded.find(a.id).status is TaskStatus.COMPLETED
