"""Undo buffer for deleted tasks."""

import logging
from collections import deque
from typing import Deque, Optional, Tuple

from tasklist.errors import EmptyBufferError
from tasklist.models import Task

logger = logging.getLogger(__name__)


class UndoBuffer:
    """Last-in-first-out stack of ``(task, original_position)`` pairs.

    The buffer is unbounded unless a capacity is given; with a capacity the
    oldest entry is dropped when a push would exceed it.
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity < 1:
            raise ValueError("Undo capacity must be a positive integer")
        self.capacity = capacity
        self._entries: Deque[Tuple[Task, int]] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def push(self, task: Task, position: int) -> None:
        """Record a deleted task.

        Args:
            task: The task removed from the store
            position: Position the task held when it was removed
        """
        if self.capacity is not None and len(self._entries) == self.capacity:
            dropped, _ = self._entries[0]
            logger.debug("Undo buffer full, discarding task #%s", dropped.id)
        self._entries.append((task, position))

    def pop_last(self) -> Tuple[Task, int]:
        """Remove and return the most recently deleted task and its position.

        Raises:
            EmptyBufferError: If there is nothing to restore
        """
        if not self._entries:
            raise EmptyBufferError("No tasks to restore.")
        return self._entries.pop()

    def peek(self) -> Optional[Tuple[Task, int]]:
        """Return the entry the next restore would pop, or None if empty."""
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()
