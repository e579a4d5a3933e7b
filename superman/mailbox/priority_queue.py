"""A thread-safe priority queue of mailbox messages."""

from __future__ import annotations

import heapq
import itertools
import threading

from superman.agents.models import Priority
from superman.mailbox.message import Message


class PriorityQueue:
    """Messages ordered by priority (highest first), then by arrival order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._heap: list[tuple[int, int, Message]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        with self._lock:
            return len(self._heap)

    def enqueue(self, msg: Message) -> None:
        """Add a message to the queue."""
        with self._lock:
            heapq.heappush(self._heap, (-int(msg.priority), next(self._counter), msg))

    def dequeue(self) -> Message | None:
        """Remove and return the most urgent message, or None if empty."""
        with self._lock:
            if not self._heap:
                return None
            return heapq.heappop(self._heap)[2]

    def peek(self) -> Message | None:
        """Return the most urgent message without removing it, or None if empty."""
        with self._lock:
            return self._heap[0][2] if self._heap else None

    def remove_by_message_id(self, message_id: str) -> bool:
        """Remove the message with ``message_id``; return whether one was found."""
        with self._lock:
            for index, (_, _, msg) in enumerate(self._heap):
                if msg.message_id == message_id:
                    del self._heap[index]
                    heapq.heapify(self._heap)
                    return True
            return False

    def count_by_priority(self, priority: Priority) -> int:
        """Return how many queued messages have ``priority``."""
        with self._lock:
            return sum(1 for _, _, msg in self._heap if msg.priority == priority)

    def all_messages(self) -> list[Message]:
        """Return a new list of all queued messages, in heap order."""
        with self._lock:
            return [msg for _, _, msg in self._heap]

    def clear(self) -> None:
        """Remove every message."""
        with self._lock:
            self._heap.clear()