"""Comprehensive tests for TaskStore."""

import random

import pytest

from tasklist.errors import NotFoundError, ValidationError
from tasklist.models import Priority, Task
from tasklist.store import TaskStore


class TestTaskStore:
    """Test suite for TaskStore."""

    @pytest.fixture
    def store(self):
        """Create an empty store."""
        return TaskStore()

    @pytest.fixture
    def filled(self, store):
        """Store with three tasks: A, B, C."""
        for text in ("A", "B", "C"):
            store.add(text)
        return store

    def test_add_task_defaults(self, store):
        """Test adding a task with default attributes."""
        task = store.add("Test task")
        assert task.id == 1
        assert task.text == "Test task"
        assert task.priority == Priority.LOW
        assert task.due_date == ""
        assert task.category == ""
        assert task.completed is False

    def test_add_task_with_details(self, store):
        """Test add task with details."""
        task = store.add("File taxes", "2024-04-15", "high", "finance")
        assert task.priority == Priority.HIGH
        assert task.due_date == "2024-04-15"
        assert task.category == "finance"

    def test_add_trims_text_and_category(self, store):
        """Test add trims text and category."""
        task = store.add("  Buy milk  ", category="  home ")
        assert task.text == "Buy milk"
        assert task.category == "home"

    def test_add_unknown_priority_falls_back_to_low(self, store):
        """Test add unknown priority falls back to low."""
        task = store.add("Task", priority="urgent")
        assert task.priority == Priority.LOW

    def test_add_appends_at_end(self, filled):
        """Test add appends at end."""
        assert [t.text for t in filled.list()] == ["A", "B", "C"]

    def test_add_sequential_ids(self, filled):
        """Test add sequential ids."""
        assert filled.ids() == [1, 2, 3]

    @pytest.mark.parametrize("text", ["", "   ", "\t\n", None])
    def test_add_empty_text_raises(self, store, text):
        """Test add empty text raises."""
        with pytest.raises(ValidationError):
            store.add(text)
        assert len(store) == 0

    def test_ids_not_reused_after_remove(self, filled):
        """Test ids not reused after remove."""
        filled.remove(3)
        task = filled.add("D")
        assert task.id == 4

    def test_get(self, filled):
        """Test get."""
        assert filled.get(2).text == "B"

    def test_get_missing_raises(self, filled):
        """Test get missing raises."""
        with pytest.raises(NotFoundError):
            filled.get(99)

    def test_contains(self, filled):
        """Test contains."""
        assert 1 in filled
        assert 99 not in filled

    def test_list_is_snapshot(self, filled):
        """Test list is snapshot."""
        tasks = filled.list()
        tasks.clear()
        assert len(filled) == 3

    def test_remove_returns_task_and_position(self, filled):
        """Test remove returns task and position."""
        task, position = filled.remove(2)
        assert task.text == "B"
        assert position == 1
        assert filled.ids() == [1, 3]

    def test_remove_missing_raises(self, filled):
        """Test remove missing raises."""
        with pytest.raises(NotFoundError) as excinfo:
            filled.remove(99)
        assert excinfo.value.task_id == 99
        assert len(filled) == 3

    def test_toggle_completed(self, filled):
        """Test toggle completed."""
        assert filled.toggle_completed(1).completed is True
        assert filled.toggle_completed(1).completed is False

    def test_toggle_missing_raises(self, filled):
        """Test toggle missing raises."""
        with pytest.raises(NotFoundError):
            filled.toggle_completed(99)

    def test_set_text(self, filled):
        """Test set text."""
        filled.set_text(1, "  Renamed ")
        assert filled.get(1).text == "Renamed"

    def test_set_text_empty_keeps_original(self, filled):
        """Test set text empty keeps original."""
        with pytest.raises(ValidationError):
            filled.set_text(1, "   ")
        assert filled.get(1).text == "A"

    def test_set_text_missing_raises(self, filled):
        """Test set text missing raises."""
        with pytest.raises(NotFoundError):
            filled.set_text(99, "X")

    def test_reorder_forward(self, filled):
        """Test reorder forward."""
        assert filled.reorder(1, 2) == 2
        assert filled.ids() == [2, 3, 1]

    def test_reorder_backward(self, filled):
        """Test reorder backward."""
        assert filled.reorder(3, 0) == 0
        assert filled.ids() == [3, 1, 2]

    def test_reorder_same_position_is_noop(self, filled):
        """Test reorder same position is noop."""
        assert filled.reorder(2, 1) == 1
        assert filled.ids() == [1, 2, 3]

    def test_reorder_clamps(self, filled):
        """Test reorder clamps."""
        assert filled.reorder(1, 10) == 2
        assert filled.reorder(1, -5) == 0
        assert filled.ids() == [1, 2, 3]

    def test_reorder_missing_raises(self, filled):
        """Test reorder missing raises."""
        with pytest.raises(NotFoundError):
            filled.reorder(99, 0)

    def test_insert_at_valid_position(self, filled):
        """Test insert at valid position."""
        task, position = filled.remove(2)
        assert filled.insert(task, position) == 1
        assert filled.ids() == [1, 2, 3]

    def test_insert_out_of_range_appends(self, filled):
        """Test insert out of range appends."""
        task, _ = filled.remove(1)
        assert filled.insert(task, 10) == 2
        assert filled.ids() == [2, 3, 1]

    def test_insert_duplicate_raises(self, filled):
        """Test insert duplicate raises."""
        with pytest.raises(ValueError):
            filled.insert(Task(id=1, text="dup"), 0)
        assert len(filled) == 3

    def test_seeded_store_continues_ids(self):
        """Test seeded store continues ids."""
        store = TaskStore([Task(id=5, text="Seed")])
        assert store.add("Next").id == 6

    def test_replace_order(self, filled):
        """Test replace order."""
        filled.replace_order([3, 1, 2])
        assert [t.text for t in filled.list()] == ["C", "A", "B"]

    def test_replace_order_requires_same_ids(self, filled):
        """Test replace order requires same ids."""
        with pytest.raises(ValueError):
            filled.replace_order([1, 2])
        assert filled.ids() == [1, 2, 3]

    def test_random_operations_keep_ids_unique(self, store):
        """Positions stay dense and IDs unique under mixed mutations."""
        rng = random.Random(1234)
        removed = []
        for step in range(300):
            action = rng.choice(["add", "remove", "reinsert", "reorder"])
            if action == "add" or not len(store):
                store.add(f"task {step}")
            elif action == "remove":
                removed.append(store.remove(rng.choice(store.ids())))
            elif action == "reinsert" and removed:
                task, position = removed.pop()
                store.insert(task, position)
            else:
                store.reorder(rng.choice(store.ids()), rng.randrange(len(store)))
            ids = store.ids()
            assert len(ids) == len(set(ids))
            assert [store.position_of(i) for i in ids] == list(range(len(ids)))
