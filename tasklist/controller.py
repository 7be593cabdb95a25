"""Application controller for the task list.

This module provides the TaskListController class that owns all application
state (store, undo buffer, filter inputs, the active edit and the active
drag) and exposes one handler per user action. After every state change the
controller publishes a fresh ViewModel; transient messages are published as
Notification objects.

Errors raised by the core are recovered here: validation failures and empty
restores become notifications, stale task IDs are logged and ignored.
"""

import functools
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Union

from tasklist.config import Settings
from tasklist.errors import BusyError, EmptyBufferError, NotFoundError, ValidationError
from tasklist.models import Priority, SortKey, StatusFilter, Task
from tasklist.notifications import Notification, NotificationKind
from tasklist.projector import progress_percent, project
from tasklist.reorder import DragSession, ElementBox
from tasklist.store import TaskStore
from tasklist.undo import UndoBuffer

logger = logging.getLogger(__name__)

ViewListener = Callable[["ViewModel"], None]
NotificationListener = Callable[[Notification], None]


@dataclass
class EditSession:
    """In-place edit of one task's text.

    Attributes:
        task_id: ID of the task being edited
        original_text: Text the task had when the edit started
        draft: Current value of the edit field
    """

    task_id: int
    original_text: str
    draft: str


@dataclass
class AppState:
    """Everything the controller mutates."""

    store: TaskStore = field(default_factory=TaskStore)
    undo: UndoBuffer = field(default_factory=UndoBuffer)
    search_term: str = ""
    status_filter: StatusFilter = StatusFilter.ALL
    sort_key: SortKey = SortKey.NONE
    editing: Optional[EditSession] = None
    drag: Optional[DragSession] = None
    sort_pending: bool = False
    notification: Optional[Notification] = None


@dataclass
class ViewModel:
    """What the presentation layer renders."""

    tasks: List[Task]
    progress: int
    search_term: str
    status_filter: StatusFilter
    sort_key: SortKey
    editing_id: Optional[int] = None
    dragging_id: Optional[int] = None
    notification: Optional[Notification] = None


def _requires_idle(handler):
    """Reject a handler while a drag is in progress."""

    @functools.wraps(handler)
    def wrapper(self, *args, **kwargs):
        try:
            self._ensure_idle()
        except BusyError as exc:
            logger.warning("%s", exc)
            self._notify(NotificationKind.ERROR, str(exc))
            return None
        return handler(self, *args, **kwargs)

    return wrapper


class TaskListController:
    """Single owner of task list state, driven by presentation events."""

    def __init__(self, settings: Optional[Settings] = None, state: Optional[AppState] = None):
        self.settings = settings or Settings()
        if state is None:
            state = AppState(undo=UndoBuffer(self.settings.undo_capacity))
        self.state = state
        self._view_listeners: List[ViewListener] = []
        self._notification_listeners: List[NotificationListener] = []

    # -------------------- subscriptions --------------------
    def subscribe(self, listener: ViewListener) -> None:
        """Register a callable that receives every published ViewModel."""
        self._view_listeners.append(listener)

    def subscribe_notifications(self, listener: NotificationListener) -> None:
        """Register a callable that receives every Notification."""
        self._notification_listeners.append(listener)

    # -------------------- view --------------------
    def view(self) -> ViewModel:
        """Project the current state without publishing it."""
        state = self.state
        tasks = state.store.list()
        return ViewModel(
            tasks=project(tasks, state.search_term, state.status_filter, state.sort_key),
            progress=progress_percent(tasks),
            search_term=state.search_term,
            status_filter=state.status_filter,
            sort_key=state.sort_key,
            editing_id=state.editing.task_id if state.editing else None,
            dragging_id=state.drag.task_id if state.drag else None,
            notification=state.notification,
        )

    def _publish(self) -> ViewModel:
        view = self.view()
        for listener in self._view_listeners:
            listener(view)
        return view

    def _notify(self, kind: NotificationKind, message: str) -> Notification:
        if kind is NotificationKind.UNDO_OFFER:
            duration = self.settings.undo_offer_ms
        else:
            duration = self.settings.message_ms
        notification = Notification(kind, message, duration)
        self.state.notification = notification
        for listener in self._notification_listeners:
            listener(notification)
        return notification

    def dismiss_notification(self) -> None:
        """Hide the current message, e.g. when its duration has elapsed."""
        self.state.notification = None
        self._publish()

    def _ensure_idle(self) -> None:
        if self.state.drag is not None:
            raise BusyError(f"Finish dragging task #{self.state.drag.task_id} before changing tasks")

    # -------------------- task handlers --------------------
    @_requires_idle
    def on_add(
        self,
        text: str,
        due_date: str = "",
        priority: Union[Priority, str, None] = Priority.LOW,
        category: str = "",
    ) -> Optional[Task]:
        """Add a task; empty text is reported and nothing is added."""
        try:
            task = self.state.store.add(text, due_date, priority, category)
        except ValidationError as exc:
            self._notify(NotificationKind.ERROR, str(exc))
            self._publish()
            return None
        self._publish()
        return task

    @_requires_idle
    def on_delete(self, task_id: int) -> Optional[Task]:
        """Move a task to the undo buffer and offer to restore it."""
        state = self.state
        try:
            task, position = state.store.remove(task_id)
        except NotFoundError as exc:
            logger.warning("Delete ignored: %s", exc)
            return None
        state.undo.push(task, position)
        if state.editing is not None and state.editing.task_id == task_id:
            state.editing = None
        self._notify(NotificationKind.UNDO_OFFER, "Task deleted.")
        self._publish()
        return task

    @_requires_idle
    def on_restore(self) -> Optional[Task]:
        """Reinsert the most recently deleted task at its old position."""
        state = self.state
        try:
            task, position = state.undo.pop_last()
        except EmptyBufferError as exc:
            self._notify(NotificationKind.INFO, str(exc))
            self._publish()
            return None
        state.store.insert(task, position)
        state.notification = None
        self._publish()
        return task

    @_requires_idle
    def on_toggle_complete(self, task_id: int) -> Optional[Task]:
        """Flip a task's completion.

        Args:
            task_id: ID of the task to toggle

        Returns:
            The updated Task, or None if the task does not exist
        """
        try:
            task = self.state.store.toggle_completed(task_id)
        except NotFoundError as exc:
            logger.warning("Toggle ignored: %s", exc)
            return None
        self._publish()
        return task

    # -------------------- edit handlers --------------------
    @_requires_idle
    def on_edit_start(self, task_id: int) -> Optional[EditSession]:
        """Start editing a task's text.

        Only one task is edited at a time: an edit already in progress on
        another task is cancelled first.
        """
        state = self.state
        try:
            task = state.store.get(task_id)
        except NotFoundError as exc:
            logger.warning("Edit ignored: %s", exc)
            return None
        if state.editing is not None and state.editing.task_id != task_id:
            logger.debug("Cancelling edit of task #%s", state.editing.task_id)
            state.editing = None
        if state.editing is None:
            state.editing = EditSession(task_id, task.text, task.text)
        self._publish()
        return state.editing

    def on_edit_input(self, text: str) -> None:
        """Update the draft of the edit in progress."""
        if self.state.editing is None:
            logger.warning("Edit input ignored: no edit in progress")
            return
        self.state.editing.draft = text

    @_requires_idle
    def on_edit_commit(self, task_id: Optional[int] = None, text: Optional[str] = None) -> bool:
        """Commit the edit in progress.

        Args:
            task_id: Task the commit is for. If None, the task being edited
            text: New text. If None, the session's draft is used

        Returns:
            True if the text was saved. On empty text the edit stays open
            with its field reset to the original text.
        """
        state = self.state
        session = state.editing
        if session is None:
            logger.warning("Edit commit ignored: no edit in progress")
            return False
        if task_id is not None and task_id != session.task_id:
            logger.warning("Edit commit ignored: task #%s is not being edited", task_id)
            return False
        if text is None:
            text = session.draft
        try:
            state.store.set_text(session.task_id, text)
        except ValidationError as exc:
            session.draft = session.original_text
            self._notify(NotificationKind.ERROR, str(exc))
            self._publish()
            return False
        except NotFoundError as exc:
            logger.warning("Edit commit ignored: %s", exc)
            state.editing = None
            self._publish()
            return False
        state.editing = None
        self._publish()
        return True

    def on_edit_cancel(self) -> None:
        """Close the edit in progress, keeping the task's text."""
        if self.state.editing is None:
            return
        self.state.editing = None
        self._publish()

    # -------------------- drag handlers --------------------
    def on_drag_start(self, task_id: int) -> Optional[DragSession]:
        state = self.state
        if state.drag is not None:
            logger.warning("Drag start ignored: task #%s is already being dragged", state.drag.task_id)
            return None
        try:
            position = state.store.position_of(task_id)
        except NotFoundError as exc:
            logger.warning("Drag start ignored: %s", exc)
            return None
        state.drag = DragSession(task_id, position)
        self._publish()
        return state.drag

    def on_drag_over(self, pointer_y: float, boxes: Iterable[ElementBox]) -> Optional[int]:
        """Reflow the list for a pointer move during a drag.

        Returns:
            The dragged task's position, or None if no drag is active
        """
        state = self.state
        if state.drag is None:
            return None
        before = state.store.position_of(state.drag.task_id)
        position = state.drag.move(state.store, boxes, pointer_y)
        if position != before:
            self._publish()
        return position

    def on_drag_end(self) -> Optional[int]:
        """Finish the drag, keeping the order reached during it.

        Returns:
            The dragged task's final position, or None if no drag is active
        """
        state = self.state
        if state.drag is None:
            return None
        return self._finish_drag()

    def on_drag_cancel(self) -> Optional[int]:
        """Abort the drag and put the task back where it started.

        Returns:
            The dragged task's final position, or None if no drag is active
        """
        state = self.state
        if state.drag is None:
            return None
        state.drag.cancel(state.store)
        return self._finish_drag()

    def _finish_drag(self) -> int:
        # A sort requested during the drag is written to the store only now.
        state = self.state
        task_id = state.drag.task_id
        state.drag = None
        if state.sort_pending:
            state.sort_pending = False
            self._apply_sort_to_store()
        self._publish()
        return state.store.position_of(task_id)

    def on_reorder_drop(self, task_id: int, target_index: int) -> Optional[int]:
        """Move a task to ``target_index``, ending its drag if one is active."""
        state = self.state
        if state.drag is not None and state.drag.task_id != task_id:
            exc = BusyError(f"Cannot drop task #{task_id} while dragging task #{state.drag.task_id}")
            logger.warning("%s", exc)
            self._notify(NotificationKind.ERROR, str(exc))
            return None
        try:
            position = state.store.reorder(task_id, target_index)
        except NotFoundError as exc:
            logger.warning("Drop ignored: %s", exc)
            return None
        if state.drag is not None:
            return self._finish_drag()
        self._publish()
        return position

    # -------------------- filter handler --------------------
    def on_filter_change(
        self,
        search_term: Optional[str] = None,
        status_filter: Union[StatusFilter, str, None] = None,
        sort_key: Union[SortKey, str, None] = None,
    ) -> ViewModel:
        """Update any of the filter inputs; None leaves an input unchanged.

        In "reorder" sort mode the sorted order is written back into the
        store. While a drag is active that write waits until the drag ends.

        Args:
            search_term: Case-insensitive text the visible tasks must contain
            status_filter: Completion filter or its name
            sort_key: Sort key or its name

        Returns:
            The ViewModel published for the new inputs

        Raises:
            ValueError: If status_filter or sort_key names no known value
        """
        state = self.state
        if search_term is not None:
            state.search_term = search_term
        if status_filter is not None:
            state.status_filter = StatusFilter.parse(status_filter)
        if sort_key is not None:
            state.sort_key = SortKey.parse(sort_key)
        if self.settings.sort_mode == "reorder" and state.sort_key is not SortKey.NONE:
            if state.drag is not None:
                logger.debug("Sort deferred until task #%s is dropped", state.drag.task_id)
                state.sort_pending = True
            else:
                self._apply_sort_to_store()
        return self._publish()

    def _apply_sort_to_store(self) -> None:
        # Sorted visible tasks take over the slots the visible tasks held;
        # hidden tasks stay where they are.
        state = self.state
        tasks = state.store.list()
        visible = project(tasks, state.search_term, state.status_filter, state.sort_key)
        visible_ids = {task.id for task in visible}
        slots = [index for index, task in enumerate(tasks) if task.id in visible_ids]
        for slot, task in zip(slots, visible):
            tasks[slot] = task
        state.store.replace_order(task.id for task in tasks)
