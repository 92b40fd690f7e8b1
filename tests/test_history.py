# tests/test_history.py

from __future__ import annotations

from taskboard.tasks.history import ActionKind, ActionLog
from taskboard.tasks.task_store import TaskStore

from .fakes import FakeClock, SequentialIds


def _store() -> TaskStore:
    return TaskStore(id_factory=SequentialIds("t"), clock=FakeClock())


def test_empty_history_returns_none_without_changes() -> None:
    store = _store()
    store.create("a")
    log = ActionLog()
    assert log.undo(store) is None
    assert log.redo(store) is None
    assert [t.title for t in store] == ["a"]


def test_record_clears_redo() -> None:
    store = _store()
    log = ActionLog()
    a = store.create("a")
    log.record_add(a)
    b = store.create("b")
    log.record_add(b)

    log.undo(store)
    assert log.redo_depth == 1

    c = store.create("c")
    log.record_add(c)
    assert log.redo_depth == 0
    assert log.undo_depth == 2


def test_update_snapshot_is_swapped_on_each_move() -> None:
    store = _store()
    log = ActionLog()
    task = store.create("draft")
    before = task
    log.record_update(before)
    after = store.update(task.id, {"title": "final"})

    action = log.undo(store)
    assert action is not None and action.kind is ActionKind.UPDATE
    assert store.find(task.id).title == "draft"
    # the action now carries the state redo must restore
    assert log.peek_redo() is action
    assert action.data == after

    log.redo(store)
    assert store.find(task.id).title == "final"
    assert log.peek_undo() is action
    assert action.data == before


def test_delete_restores_original_position() -> None:
    store = _store()
    log = ActionLog()
    for name in "abc":
        store.create(name)
    b = store.find("t0002")
    index, removed = store.delete(b.id)
    log.record_delete(removed, index)
    assert [t.title for t in store] == ["a", "c"]

    log.undo(store)
    assert [t.title for t in store] == ["a", "b", "c"]
    assert store.indexes.linked.to_list() == store.all()

    log.redo(store)
    assert [t.title for t in store] == ["a", "c"]


def test_add_undo_removes_and_redo_appends() -> None:
    store = _store()
    log = ActionLog()
    task = store.create("a")
    log.record_add(task)

    log.undo(store)
    assert len(store) == 0
    log.redo(store)
    assert store.all() == [task]


def test_recorded_snapshot_is_not_the_live_record() -> None:
    store = _store()
    log = ActionLog()
    task = store.create("a")
    log.record_add(task)
    action = log.peek_undo()
    assert action.data == task
    assert action.data is not task
