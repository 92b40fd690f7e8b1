# src/taskboard/tasks/structures.py

"""
Linear views over the task collection: doubly linked list, stack, queue.

They hold plain references to Task records and are rebuilt wholesale from the
store after every mutation. Nothing else reads them for correctness; they are
there for inspection (/debug, /pop, /dequeue).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .task_models import Task


class _Node:
    __slots__ = ("data", "prev", "next")

    def __init__(self, data: Task) -> None:
        self.data = data
        self.prev: _Node | None = None
        self.next: _Node | None = None


class DoublyLinkedList:
    """Head/tail linked list. append/prepend/remove_head/remove_last are O(1)."""

    def __init__(self, items: Iterable[Task] = ()) -> None:
        self.head: _Node | None = None
        self.tail: _Node | None = None
        self.size = 0
        for item in items:
            self.append(item)

    def append(self, data: Task) -> None:
        node = _Node(data)
        if self.tail is None:
            self.head = self.tail = node
        else:
            self.tail.next = node
            node.prev = self.tail
            self.tail = node
        self.size += 1

    def prepend(self, data: Task) -> None:
        node = _Node(data)
        if self.head is None:
            self.head = self.tail = node
        else:
            node.next = self.head
            self.head.prev = node
            self.head = node
        self.size += 1

    def remove_head(self) -> Task | None:
        if self.head is None:
            return None
        data = self.head.data
        if self.head is self.tail:
            self.head = self.tail = None
        else:
            self.head = self.head.next
            assert self.head is not None
            self.head.prev = None
        self.size -= 1
        return data

    def remove_last(self) -> Task | None:
        if self.tail is None:
            return None
        data = self.tail.data
        if self.head is self.tail:
            self.head = self.tail = None
        else:
            self.tail = self.tail.prev
            assert self.tail is not None
            self.tail.next = None
        self.size -= 1
        return data

    def to_list(self) -> list[Task]:
        return list(self)

    def __iter__(self) -> Iterator[Task]:
        current = self.head
        while current is not None:
            yield current.data
            current = current.next

    def __len__(self) -> int:
        return self.size

    def describe(self) -> str:
        return " <-> ".join(f"[{t.title}]" for t in self) or "(empty)"


class Stack:
    """LIFO over task references (creation-order mirror)."""

    def __init__(self) -> None:
        self.items: list[Task] = []

    def push(self, item: Task) -> None:
        self.items.append(item)

    def pop(self) -> Task | None:
        return self.items.pop() if self.items else None

    def peek(self) -> Task | None:
        return self.items[-1] if self.items else None

    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def describe(self) -> str:
        # top to bottom
        return ", ".join(t.title for t in reversed(self.items)) or "(empty)"


class Queue:
    """FIFO over task references. deque keeps dequeue O(1)."""

    def __init__(self) -> None:
        self.items: deque[Task] = deque()

    def enqueue(self, item: Task) -> None:
        self.items.append(item)

    def dequeue(self) -> Task | None:
        return self.items.popleft() if self.items else None

    def front(self) -> Task | None:
        return self.items[0] if self.items else None

    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def describe(self) -> str:
        # front to back
        return ", ".join(t.title for t in self.items) or "(empty)"


@dataclass(slots=True)
class TaskIndexes:
    linked: DoublyLinkedList = field(default_factory=DoublyLinkedList)
    stack: Stack = field(default_factory=Stack)
    queue: Queue = field(default_factory=Queue)

    def rebuild(self, tasks: Iterable[Task]) -> None:
        """Discard all three views and rebuild them in store order."""
        linked = DoublyLinkedList()
        stack = Stack()
        queue = Queue()
        for task in tasks:
            linked.append(task)
            stack.push(task)
            queue.enqueue(task)
        self.linked, self.stack, self.queue = linked, stack, queue
