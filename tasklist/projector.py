"""Filter and sort projection of the task list.

Everything here is a pure function of its inputs: the store is never
modified. The controller decides whether a sorted projection is written back
into the store.
"""

import math
import re
from datetime import datetime, timezone
from typing import Iterable, List, Union

from tasklist.models import SortKey, StatusFilter, Task, priority_rank

# Formats accepted for due dates, tried in order after ISO 8601.
DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
)

_SPACE_RE = re.compile(r"[\s,]+")


def parse_due_date(value: str) -> datetime:
    """Parse a free-form due date for sorting.

    Returns ``datetime.min`` for empty or unparseable input, so such tasks
    sort before every dated task when sorting by due date.
    """
    text = (value or "").strip()
    if not text:
        return datetime.min
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        pass
    else:
        if parsed.tzinfo is not None:
            # Compare offset dates by instant, as naive UTC.
            try:
                parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
            except OverflowError:
                return datetime.min
        return parsed
    normalized = _SPACE_RE.sub(" ", text)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue
    return datetime.min


def matches(task: Task, search_term: str, status_filter: StatusFilter) -> bool:
    """Return True if a task passes both the search term and status filter."""
    if search_term.lower() not in task.text.lower():
        return False
    if status_filter is StatusFilter.PENDING:
        return not task.completed
    if status_filter is StatusFilter.COMPLETED:
        return task.completed
    return True


def sort_tasks(tasks: Iterable[Task], sort_key: SortKey) -> List[Task]:
    """Stable sort of tasks by the given key; NONE keeps the given order."""
    if sort_key is SortKey.PRIORITY:
        return sorted(tasks, key=lambda task: priority_rank(task.priority), reverse=True)
    if sort_key is SortKey.DUE_DATE:
        return sorted(tasks, key=lambda task: parse_due_date(task.due_date))
    return list(tasks)


def project(
    tasks: Iterable[Task],
    search_term: str = "",
    status_filter: Union[StatusFilter, str] = StatusFilter.ALL,
    sort_key: Union[SortKey, str] = SortKey.NONE,
) -> List[Task]:
    """Derive the visible, ordered tasks.

    Args:
        tasks: Tasks in store order
        search_term: Case-insensitive substring the task text must contain
        status_filter: Completion filter
        sort_key: Ordering applied to the visible tasks

    Returns:
        The visible tasks, as references to the given Task objects
    """
    status_filter = StatusFilter.parse(status_filter)
    sort_key = SortKey.parse(sort_key)
    visible = [task for task in tasks if matches(task, search_term or "", status_filter)]
    return sort_tasks(visible, sort_key)


def progress_percent(tasks: Iterable[Task]) -> int:
    """Completed share of the tasks as a whole percentage, rounded half up."""
    tasks = list(tasks)
    if not tasks:
        return 0
    completed = sum(1 for task in tasks if task.completed)
    return math.floor(completed * 100 / len(tasks) + 0.5)
