"""Ordered in-memory task store.

This module provides the TaskStore class that holds the active tasks in
display order. It handles task creation, removal, completion, text edits and
reordering. A task's position is its index in the sequence, so positions are
always dense.
"""

import logging
from typing import Iterable, List, Optional, Tuple, Union

from tasklist.errors import NotFoundError, ValidationError
from tasklist.models import Priority, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """Ordered collection of active tasks.

    Task IDs are assigned from a counter that only moves forward, so an ID
    is never reused even after the task holding it is removed.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        """Initialize TaskStore, optionally seeded with existing tasks.

        Args:
            tasks: Tasks to load in order. IDs must be unique.
        """
        self._tasks: List[Task] = []
        self._next_id: int = 1
        for task in tasks or ():
            self.insert(task, len(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id) -> bool:
        return any(task.id == task_id for task in self._tasks)

    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    def _index(self, task_id: int) -> int:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        raise NotFoundError(task_id)

    def add(
        self,
        text: str,
        due_date: str = "",
        priority: Union[Priority, str, None] = Priority.LOW,
        category: str = "",
    ) -> Task:
        """Create a new task at the end of the list.

        Args:
            text: Task text
            due_date: Free-form due date (may be empty)
            priority: Priority or priority name (default: LOW)
            category: Optional category

        Returns:
            The created Task object with assigned ID

        Raises:
            ValidationError: If text is empty after trimming
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError("Task cannot be empty.")

        try:
            priority = Priority.parse(priority)
        except ValueError:
            logger.warning("Unknown priority %r, using low", priority)
            priority = Priority.LOW

        task = Task(
            id=self._allocate_id(),
            text=text,
            due_date=(due_date or "").strip(),
            priority=priority,
            category=(category or "").strip(),
        )
        self._tasks.append(task)
        logger.debug("Added task #%s at position %s", task.id, len(self._tasks) - 1)
        return task

    def get(self, task_id: int) -> Task:
        """Get a task by ID.

        Raises:
            NotFoundError: If no task has this ID
        """
        return self._tasks[self._index(task_id)]

    def position_of(self, task_id: int) -> int:
        """Get the current position of a task.

        Args:
            task_id: ID of the task

        Returns:
            Index of the task in display order

        Raises:
            NotFoundError: If no task has this ID
        """
        return self._index(task_id)

    def ids(self) -> List[int]:
        """Return the task IDs in current order."""
        return [task.id for task in self._tasks]

    def list(self) -> List[Task]:
        """Return the tasks in current order.

        The returned list is a snapshot: adding or removing items from it
        does not change the store.
        """
        return list(self._tasks)

    def remove(self, task_id: int) -> Tuple[Task, int]:
        """Remove a task.

        Args:
            task_id: ID of the task to remove

        Returns:
            The removed task and the position it held

        Raises:
            NotFoundError: If no task has this ID
        """
        index = self._index(task_id)
        task = self._tasks.pop(index)
        logger.debug("Removed task #%s from position %s", task_id, index)
        return task, index

    def insert(self, task: Task, position: int) -> int:
        """Insert an existing task record.

        The task goes to ``position`` when that is a valid index
        (``0 <= position <= len(self)``), otherwise it is appended.

        Returns:
            The position the task now holds

        Raises:
            ValueError: If a task with the same ID is already present
        """
        if task.id in self:
            raise ValueError(f"Task with ID {task.id} already exists")
        if 0 <= position <= len(self._tasks):
            self._tasks.insert(position, task)
        else:
            position = len(self._tasks)
            self._tasks.append(task)
        if task.id >= self._next_id:
            self._next_id = task.id + 1
        logger.debug("Inserted task #%s at position %s", task.id, position)
        return position

    def toggle_completed(self, task_id: int) -> Task:
        """Flip the completion flag of a task.

        Raises:
            NotFoundError: If no task has this ID
        """
        task = self.get(task_id)
        task.completed = not task.completed
        logger.debug("Task #%s completed=%s", task_id, task.completed)
        return task

    def set_text(self, task_id: int, new_text: str) -> Task:
        """Replace the text of a task.

        Raises:
            NotFoundError: If no task has this ID
            ValidationError: If the new text is empty after trimming; the
                task keeps its previous text
        """
        task = self.get(task_id)
        new_text = (new_text or "").strip()
        if not new_text:
            raise ValidationError("Task text cannot be empty.")
        task.text = new_text
        logger.debug("Task #%s text changed", task_id)
        return task

    def reorder(self, task_id: int, new_position: int) -> int:
        """Move a task to a new position, shifting the tasks in between.

        ``new_position`` is clamped to the valid range. Moving a task to the
        position it already holds changes nothing.

        Returns:
            The position the task now holds

        Raises:
            NotFoundError: If no task has this ID
        """
        index = self._index(task_id)
        new_position = max(0, min(new_position, len(self._tasks) - 1))
        if new_position == index:
            return index
        task = self._tasks.pop(index)
        self._tasks.insert(new_position, task)
        logger.debug("Moved task #%s from %s to %s", task_id, index, new_position)
        return new_position

    def replace_order(self, task_ids: Iterable[int]) -> None:
        """Rearrange the store to follow ``task_ids``.

        Raises:
            ValueError: If ``task_ids`` is not a permutation of the store's IDs
        """
        task_ids = list(task_ids)
        by_id = {task.id: task for task in self._tasks}
        if sorted(task_ids) != sorted(by_id):
            raise ValueError("New order must contain exactly the stored task IDs")
        self._tasks = [by_id[task_id] for task_id in task_ids]
