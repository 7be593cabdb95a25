"""Tests for the filter/sort projection."""

from datetime import datetime

import pytest

from tasklist.models import Priority, SortKey, StatusFilter, Task
from tasklist.projector import parse_due_date, progress_percent, project


@pytest.fixture
def tasks():
    return [
        Task(id=1, text="Buy milk", priority=Priority.LOW),
        Task(id=2, text="File taxes", due_date="2024-04-15", priority=Priority.HIGH, category="finance"),
        Task(id=3, text="Call mom", due_date="2024-03-01", priority=Priority.MEDIUM, completed=True),
        Task(id=4, text="Pay TAX bill", due_date="not a date", priority=Priority.HIGH),
    ]


def ids(tasks):
    return [task.id for task in tasks]


class TestFiltering:
    """Tests for search and status filtering."""

    def test_defaults_return_all_in_order(self, tasks):
        """Test defaults return all in order."""
        result = project(tasks, "", StatusFilter.ALL, SortKey.NONE)
        assert ids(result) == [1, 2, 3, 4]
        assert result[0] is tasks[0]

    def test_wire_names_are_accepted(self, tasks):
        """Test wire names are accepted."""
        assert ids(project(tasks, "", "all", "none")) == [1, 2, 3, 4]

    def test_search_is_case_insensitive_substring(self, tasks):
        """Test search is case insensitive substring."""
        assert ids(project(tasks, "tax")) == [2, 4]
        assert ids(project(tasks, "TAX")) == [2, 4]

    def test_search_no_match(self, tasks):
        """Test search no match."""
        assert project(tasks, "xyz") == []

    def test_pending_filter(self, tasks):
        """Test pending filter."""
        assert ids(project(tasks, status_filter=StatusFilter.PENDING)) == [1, 2, 4]

    def test_completed_filter(self, tasks):
        """Test completed filter."""
        assert ids(project(tasks, status_filter="completed")) == [3]

    def test_search_and_status_combine(self, tasks):
        """Test search and status combine."""
        assert ids(project(tasks, "m", StatusFilter.PENDING)) == [1]

    def test_input_is_not_modified(self, tasks):
        """Test input is not modified."""
        before = list(tasks)
        project(tasks, "tax", StatusFilter.PENDING, SortKey.PRIORITY)
        assert tasks == before


class TestSorting:
    """Tests for sorting the visible tasks."""

    def test_priority_descending(self):
        """Test priority descending."""
        tasks = [
            Task(id=1, text="a", priority=Priority.LOW),
            Task(id=2, text="b", priority=Priority.HIGH),
            Task(id=3, text="c", priority=Priority.MEDIUM),
        ]
        result = project(tasks, sort_key=SortKey.PRIORITY)
        assert [t.priority for t in result] == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]

    def test_priority_sort_is_stable(self, tasks):
        """Test priority sort is stable."""
        assert ids(project(tasks, sort_key="priority")) == [2, 4, 3, 1]

    def test_unrecognized_priority_sorts_last(self):
        """Test unrecognized priority sorts last."""
        tasks = [
            Task(id=1, text="odd", priority="urgent"),
            Task(id=2, text="low", priority=Priority.LOW),
        ]
        assert ids(project(tasks, sort_key=SortKey.PRIORITY)) == [2, 1]

    def test_due_date_ascending_invalid_first(self, tasks):
        """Test due date ascending invalid first."""
        # Task 1 has no date and task 4 an unparseable one; both sort earliest
        assert ids(project(tasks, sort_key=SortKey.DUE_DATE)) == [1, 4, 3, 2]

    def test_due_date_with_offsets_sorts_by_instant(self):
        """Test that offset due dates sort by the moment, not the clock time."""
        tasks = [
            Task(id=2, text="utc", due_date="2024-04-15T05:00+00:00"),
            Task(id=1, text="tokyo", due_date="2024-04-15T10:00+09:00"),
        ]
        assert ids(project(tasks, sort_key=SortKey.DUE_DATE)) == [1, 2]

    def test_sort_applies_to_visible_only(self, tasks):
        """Test sort applies to visible only."""
        assert ids(project(tasks, "tax", sort_key=SortKey.DUE_DATE)) == [4, 2]


class TestParseDueDate:
    """Tests for parse_due_date."""

    @pytest.mark.parametrize("value", [
        "2024-04-15",
        "2024/04/15",
        "04/15/2024",
        "Apr 15 2024",
        "April 15, 2024",
        "15 Apr 2024",
    ])
    def test_accepted_formats(self, value):
        """Test accepted formats."""
        assert parse_due_date(value) == datetime(2024, 4, 15)

    def test_iso_datetime(self):
        """Test parsing an ISO datetime without offset."""
        assert parse_due_date("2024-04-15T09:30") == datetime(2024, 4, 15, 9, 30)

    def test_iso_datetime_offset_converted_to_utc(self):
        """Test that an offset datetime is returned as naive UTC."""
        assert parse_due_date("2024-04-15T10:00+09:00") == datetime(2024, 4, 15, 1, 0)

    @pytest.mark.parametrize("value", ["", "   ", None, "someday", "2024-13-45"])
    def test_invalid_is_minimum(self, value):
        """Test invalid is minimum."""
        assert parse_due_date(value) == datetime.min


class TestProgress:
    """Tests for progress_percent."""

    def test_no_tasks(self):
        """Test no tasks."""
        assert progress_percent([]) == 0

    def test_one_of_three(self):
        """Test one of three."""
        tasks = [Task(id=i, text="t", completed=(i == 1)) for i in range(1, 4)]
        assert progress_percent(tasks) == 33

    def test_two_of_three_rounds_up(self):
        """Test two of three rounds up."""
        tasks = [Task(id=i, text="t", completed=(i != 1)) for i in range(1, 4)]
        assert progress_percent(tasks) == 67

    def test_half_rounds_up(self):
        """Test half rounds up."""
        tasks = [Task(id=i, text="t", completed=(i == 1)) for i in range(1, 9)]
        assert progress_percent(tasks) == 13

    def test_all_completed(self):
        """Test all completed."""
        tasks = [Task(id=1, text="t", completed=True)]
        assert progress_percent(tasks) == 100
