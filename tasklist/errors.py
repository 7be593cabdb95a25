"""Exceptions raised by the task list core.

None of these are fatal: the controller recovers from each of them and the
store is left unchanged by any rejected operation.
"""


class TaskListError(Exception):
    """Base class for task list errors."""


class ValidationError(TaskListError, ValueError):
    """Raised when task text is empty on add or edit."""


class NotFoundError(TaskListError, LookupError):
    """Raised when an operation references a task id that is not in the store."""

    def __init__(self, task_id):
        super().__init__(f"Task with ID {task_id} does not exist")
        self.task_id = task_id


class EmptyBufferError(TaskListError, LookupError):
    """Raised when a restore is requested with nothing to restore."""


class BusyError(TaskListError):
    """Raised when a mutation is attempted while a drag is in progress."""
