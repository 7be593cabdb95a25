"""Core models for tasklist.

This module defines the core data structures for task list editing:
- Task: A dataclass representing a task with its properties
- Priority: Enum for task priority levels
- StatusFilter: Enum for the completion filter of the list view
- SortKey: Enum for the ordering of the list view
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Priority(Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Union["Priority", str, None]) -> "Priority":
        """Parse a priority from user input.

        Args:
            value: A Priority, a priority name in any case, or empty input

        Returns:
            The matching Priority. Empty input yields LOW.

        Raises:
            ValueError: If the value names no known priority
        """
        if isinstance(value, cls):
            return value
        text = (value or "").strip().lower()
        if not text:
            return cls.LOW
        return cls(text)


PRIORITY_RANK = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


def priority_rank(priority) -> int:
    """Rank used when sorting by priority; unrecognized values rank 0."""
    if not isinstance(priority, Priority):
        try:
            priority = Priority(str(priority).strip().lower())
        except ValueError:
            return 0
    return PRIORITY_RANK.get(priority, 0)


class StatusFilter(Enum):
    """Completion filter applied to the visible list."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Union["StatusFilter", str]) -> "StatusFilter":
        """Parse a status filter from its name in any case.

        Raises:
            ValueError: If the value names no known filter
        """
        if isinstance(value, cls):
            return value
        return cls(value.strip().lower())


class SortKey(Enum):
    """Ordering applied to the visible list."""

    NONE = "none"
    PRIORITY = "priority"
    DUE_DATE = "dueDate"

    @classmethod
    def parse(cls, value: Union["SortKey", str, None]) -> "SortKey":
        """Parse a sort key from its name in any case.

        Empty input and "default" yield NONE.

        Raises:
            ValueError: If the value names no known sort key
        """
        if isinstance(value, cls):
            return value
        text = (value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        if text in ("", "default"):
            return cls.NONE
        raise ValueError(f"{value!r} is not a valid {cls.__name__}")


@dataclass
class Task:
    """Task model representing a single task item.

    The position of a task is not stored here: it is the task's index in
    the store's ordered sequence.

    Attributes:
        id: Unique identifier assigned by the store at creation
        text: Task description, never empty while the task is in the store
        due_date: Free-form due date, parsed only when sorting
        priority: Priority level of the task
        category: Optional free-form category
        completed: Whether the task has been completed
    """

    id: int
    text: str
    due_date: str = ""
    priority: Priority = Priority.LOW
    category: str = ""
    completed: bool = False
