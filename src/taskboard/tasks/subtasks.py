# src/taskboard/tasks/subtasks.py

"""
Recursive operations on a task's nested checklist.

Every function takes a tree (tuple of root SubTask nodes) and returns a tree.
Nodes are frozen, so a mutation rebuilds only the path from the root down to
the touched node; untouched branches are shared with the input. When nothing
matches, the input tuple itself is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .task_models import SubTask

Tree = tuple[SubTask, ...]


@dataclass(frozen=True, slots=True)
class Progress:
    total: int
    completed: int

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 0.0

    def __str__(self) -> str:
        return f"{self.completed}/{self.total}"


def insert_subtask(tree: Tree, node: SubTask, parent_id: str | None = None) -> Tree:
    """
    Append `node` to the root level (parent_id is None) or to the children of
    the first node, depth-first, whose id equals parent_id.
    """
    if parent_id is None:
        return tree + (node,)
    new_tree, _ = _insert(tree, node, parent_id)
    return new_tree


def _insert(tree: Tree, node: SubTask, parent_id: str) -> tuple[Tree, bool]:
    for i, st in enumerate(tree):
        if st.id == parent_id:
            updated = replace(st, subtasks=st.subtasks + (node,))
            return tree[:i] + (updated,) + tree[i + 1 :], True
        if st.subtasks:
            children, found = _insert(st.subtasks, node, parent_id)
            if found:
                return tree[:i] + (replace(st, subtasks=children),) + tree[i + 1 :], True
    return tree, False


def toggle_subtask(tree: Tree, subtask_id: str) -> Tree:
    """Flip `completed` on the first matching node. Ancestors are not touched."""
    new_tree, _ = _toggle(tree, subtask_id)
    return new_tree


def _toggle(tree: Tree, subtask_id: str) -> tuple[Tree, bool]:
    for i, st in enumerate(tree):
        if st.id == subtask_id:
            return tree[:i] + (replace(st, completed=not st.completed),) + tree[i + 1 :], True
        if st.subtasks:
            children, found = _toggle(st.subtasks, subtask_id)
            if found:
                return tree[:i] + (replace(st, subtasks=children),) + tree[i + 1 :], True
    return tree, False


def remove_subtask(tree: Tree, subtask_id: str) -> Tree:
    """
    Drop the matching node together with its whole subtree. The filter keeps
    descending into the surviving siblings, so a node is removed at any depth.
    """
    changed = False
    out: list[SubTask] = []
    for st in tree:
        if st.id == subtask_id:
            changed = True
            continue
        children = remove_subtask(st.subtasks, subtask_id) if st.subtasks else st.subtasks
        if children is not st.subtasks:
            changed = True
            st = replace(st, subtasks=children)
        out.append(st)
    return tuple(out) if changed else tree


def find_subtask(tree: Tree, subtask_id: str) -> SubTask | None:
    for st in tree:
        if st.id == subtask_id:
            return st
        hit = find_subtask(st.subtasks, subtask_id)
        if hit is not None:
            return hit
    return None


def iter_subtasks(tree: Tree):
    """Depth-first pre-order walk."""
    for st in tree:
        yield st
        yield from iter_subtasks(st.subtasks)


def aggregate_progress(tree: Tree) -> Progress:
    """Every node counts once toward total, whatever its depth."""
    total = 0
    completed = 0
    for st in tree:
        total += 1
        if st.completed:
            completed += 1
        if st.subtasks:
            nested = aggregate_progress(st.subtasks)
            total += nested.total
            completed += nested.completed
    return Progress(total=total, completed=completed)


def format_tree(tree: Tree, level: int = 0) -> list[str]:
    lines: list[str] = []
    prefix = "  " * level
    for st in tree:
        mark = "✓" if st.completed else " "
        lines.append(f"{prefix}* {st.text} ({mark})")
        if st.subtasks:
            lines.extend(format_tree(st.subtasks, level + 1))
    return lines
