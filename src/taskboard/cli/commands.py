# src/taskboard/cli/commands.py

from __future__ import annotations

import shlex
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.subtasks import aggregate_progress, iter_subtasks
from ..tasks.task_models import SubTask, Task, TaskStatus

CommandHandler = Callable[[AppState, list[str], str], str]


HEADER_TITLES = {
    TaskStatus.PENDING: "PENDING",
    TaskStatus.IN_PROGRESS: "IN PROGRESS",
    TaskStatus.COMPLETED: "COMPLETED",
}
SHORT_ID = 8


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, /undo, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Handlers get the shell-split args and the raw remainder of the line
        (for commands that take free text, e.g. "/add Buy milk | 2 litres").
        """
        if not line.startswith("/"):
            return None

        name, _, rest = line[1:].strip().partition(" ")
        if not name:
            return "Empty command. Use /help to list available commands."

        name = name.lower()
        rest = rest.strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            args = shlex.split(rest)
        except ValueError:
            args = rest.split()

        return handler(state, args, rest)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- id resolution (full id or unique prefix) ----


def _resolve_task(state: AppState, ref: str) -> Task | str:
    tasks = state.board.tasks()
    exact = [t for t in tasks if t.id == ref]
    if exact:
        return exact[0]
    hits = [t for t in tasks if t.id.startswith(ref)]
    if len(hits) == 1:
        return hits[0]
    if not hits:
        return f"No task matches '{ref}'."
    return f"'{ref}' is ambiguous ({len(hits)} tasks)."


def _resolve_subtask(task: Task, ref: str) -> SubTask | str:
    nodes = list(iter_subtasks(task.subtasks))
    exact = [s for s in nodes if s.id == ref]
    if exact:
        return exact[0]
    hits = [s for s in nodes if s.id.startswith(ref)]
    if len(hits) == 1:
        return hits[0]
    if not hits:
        return f"No subtask matches '{ref}' in \"{task.title}\"."
    return f"'{ref}' is ambiguous ({len(hits)} subtasks)."


def _parse_status(raw: str) -> TaskStatus | str:
    try:
        return TaskStatus.parse(raw)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        return f"Unknown status '{raw}'. Use one of: {allowed}."


# ---- rendering ----


def _render_tree(tree: tuple[SubTask, ...], level: int = 1) -> list[str]:
    lines: list[str] = []
    for st in tree:
        mark = "x" if st.completed else " "
        lines.append(f"{'    ' * level}[{mark}] {st.text}  ({st.id[:SHORT_ID]})")
        lines.extend(_render_tree(st.subtasks, level + 1))
    return lines


def render_board(state: AppState) -> str:
    lines: list[str] = []
    for status, tasks in state.board.by_status().items():
        lines.append(f"== {HEADER_TITLES[status]} ({len(tasks)}) ==")
        if not tasks:
            lines.append("  (empty)")
        for task in tasks:
            progress = aggregate_progress(task.subtasks)
            suffix = f"  {progress} ({progress.fraction:.0%})" if progress.total else ""
            lines.append(f"  {task.id[:SHORT_ID]}  {task.title}{suffix}")
            if task.description:
                lines.append(f"      {task.description}")
            lines.extend(_render_tree(task.subtasks))
    return "\n".join(lines)


# ---- handlers ----


def cmd_help(state: AppState, args: list[str], raw: str) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str], raw: str) -> str:
    return render_board(state)


def cmd_add(state: AppState, args: list[str], raw: str) -> str:
    """
    /add <title> [| description] [| status]
    """
    parts = [p.strip() for p in raw.split("|")]
    if not parts or not parts[0]:
        return "Usage: /add <title> [| description] [| status]"
    title = parts[0]
    description = parts[1] if len(parts) > 1 else ""
    status: TaskStatus | str = TaskStatus.PENDING
    if len(parts) > 2 and parts[2]:
        status = _parse_status(parts[2])
        if not isinstance(status, TaskStatus):
            return status
    task = state.board.create(title, description, status)
    return f"Created {task.id[:SHORT_ID]}." if task else ""


def cmd_edit(state: AppState, args: list[str], raw: str) -> str:
    """
    /edit <task> title=... description=... status=...
    """
    if len(args) < 2:
        return "Usage: /edit <task> title=<text> description=<text> status=<status>"
    task = _resolve_task(state, args[0])
    if isinstance(task, str):
        return task
    fields: dict[str, str] = {}
    for pair in args[1:]:
        key, sep, value = pair.partition("=")
        key = key.strip().lower()
        if not sep or key not in ("title", "description", "status"):
            return f"Cannot parse '{pair}'. Expected title=, description= or status=."
        if key == "status":
            status = _parse_status(value)
            if not isinstance(status, TaskStatus):
                return status
            value = status.value
        fields[key] = value
    state.board.update(task.id, fields)
    return ""


def cmd_move(state: AppState, args: list[str], raw: str) -> str:
    if len(args) != 2:
        return "Usage: /move <task> <pending|in-progress|completed>"
    task = _resolve_task(state, args[0])
    if isinstance(task, str):
        return task
    status = _parse_status(args[1])
    if not isinstance(status, TaskStatus):
        return status
    state.board.update(task.id, {"status": status})
    return ""


def cmd_rm(state: AppState, args: list[str], raw: str) -> str:
    if len(args) != 1:
        return "Usage: /rm <task>"
    task = _resolve_task(state, args[0])
    if isinstance(task, str):
        return task
    state.board.delete(task.id)
    return ""


_SUB_USAGE = (
    "Subtasks:\n"
    "  /sub add <task> <text>             - add a top-level item\n"
    "  /sub nest <task> <parent> <text>   - add an item under <parent>\n"
    "  /sub toggle <task> <subtask>       - check/uncheck\n"
    "  /sub rm <task> <subtask>           - remove with all children\n"
)


def cmd_sub(state: AppState, args: list[str], raw: str) -> str:
    if len(args) < 3:
        return _SUB_USAGE

    sub = args[0].lower()
    task = _resolve_task(state, args[1])
    if isinstance(task, str):
        return task

    if sub == "add":
        node = state.board.add_subtask(task.id, " ".join(args[2:]))
        return f"Added {node.id[:SHORT_ID]}." if node else ""

    if sub == "nest":
        if len(args) < 4:
            return _SUB_USAGE
        parent = _resolve_subtask(task, args[2])
        if isinstance(parent, str):
            return parent
        node = state.board.add_subtask(task.id, " ".join(args[3:]), parent.id)
        return f"Added {node.id[:SHORT_ID]} under {parent.id[:SHORT_ID]}." if node else ""

    if sub in ("toggle", "rm"):
        node = _resolve_subtask(task, args[2])
        if isinstance(node, str):
            return node
        if sub == "toggle":
            state.board.toggle_subtask(task.id, node.id)
        else:
            state.board.remove_subtask(task.id, node.id)
        return ""

    return _SUB_USAGE


def cmd_undo(state: AppState, args: list[str], raw: str) -> str:
    state.board.undo()
    return ""


def cmd_redo(state: AppState, args: list[str], raw: str) -> str:
    state.board.redo()
    return ""


def cmd_debug(state: AppState, args: list[str], raw: str) -> str:
    return state.board.describe_structures()


def cmd_pop(state: AppState, args: list[str], raw: str) -> str:
    state.board.pop_from_stack()
    return ""


def cmd_dequeue(state: AppState, args: list[str], raw: str) -> str:
    state.board.dequeue_from_queue()
    return ""


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the board.", aliases=["ls", "board"])
registry.register("add", cmd_add, help_text="Create a task: /add <title> [| description] [| status].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <task> title=... description=... status=...")
registry.register("move", cmd_move, help_text="Change status: /move <task> <status>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <task>.", aliases=["del"])
registry.register("sub", cmd_sub, help_text="Checklist items: /sub add|nest|toggle|rm ...")
registry.register("undo", cmd_undo, help_text="Undo the last task create/update/delete.", aliases=["u"])
registry.register("redo", cmd_redo, help_text="Redo the last undone action.", aliases=["r"])
registry.register("debug", cmd_debug, help_text="Dump linked list, stack, queue and subtask trees.")
registry.register("pop", cmd_pop, help_text="Pop the top of the creation-order stack.")
registry.register("dequeue", cmd_dequeue, help_text="Dequeue the front of the creation-order queue.")
