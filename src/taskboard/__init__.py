"""Kanban task board: task store, nested checklists and undo/redo history."""

__version__ = "0.1.0"
