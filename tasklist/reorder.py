"""Drag-and-drop reordering.

While a drag is active the presentation layer reports every pointer move
together with the geometry of the rendered task elements. The drop target is
resolved again on each move and the store order is updated live, so the
list reflows under the pointer before the drop happens.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from tasklist.store import TaskStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementBox:
    """Vertical geometry of one rendered task element."""

    task_id: int
    top: float
    height: float

    @property
    def midpoint(self) -> float:
        return self.top + self.height / 2


def resolve_insert_before(
    boxes: Iterable[ElementBox],
    pointer_y: float,
    exclude: Optional[int] = None,
) -> Optional[int]:
    """Find the task the dragged element should be inserted before.

    The target is the element whose midpoint lies below the pointer and is
    closest to it. ``None`` means the pointer is below every midpoint and the
    dragged element belongs at the end of the list.

    Args:
        boxes: Geometry of the rendered elements, in any order
        pointer_y: Vertical pointer coordinate, same space as the boxes
        exclude: ID of the element being dragged, if it is among ``boxes``
    """
    closest_offset = float("-inf")
    target = None
    for box in boxes:
        if box.task_id == exclude:
            continue
        offset = pointer_y - box.midpoint
        if closest_offset < offset < 0:
            closest_offset = offset
            target = box.task_id
    return target


def target_index(order: Sequence[int], dragged_id: int, before_id: Optional[int]) -> int:
    """Position the dragged task takes when placed before ``before_id``.

    Args:
        order: Task IDs in current store order, including the dragged one
        dragged_id: ID of the task being dragged
        before_id: ID to insert before, or None for the end of the list

    Raises:
        ValueError: If ``before_id`` is not in ``order``
    """
    siblings = [task_id for task_id in order if task_id != dragged_id]
    if before_id is None:
        return len(siblings)
    if before_id == dragged_id:
        return list(order).index(dragged_id)
    return siblings.index(before_id)


@dataclass
class DragSession:
    """An active drag gesture on one task.

    Attributes:
        task_id: ID of the task being dragged
        origin_position: Position the task held when the drag started
    """

    task_id: int
    origin_position: int

    def move(self, store: TaskStore, boxes: Iterable[ElementBox], pointer_y: float) -> int:
        """Reflow the store for a pointer move and return the new position.

        Repeated moves that resolve to the same place leave the store as is.
        """
        before_id = resolve_insert_before(boxes, pointer_y, exclude=self.task_id)
        if before_id is not None and before_id not in store:
            logger.warning("Drag target #%s is not in the list, ignoring", before_id)
            return store.position_of(self.task_id)
        position = target_index(store.ids(), self.task_id, before_id)
        return store.reorder(self.task_id, position)

    def cancel(self, store: TaskStore) -> int:
        """Put the dragged task back where the drag started."""
        return store.reorder(self.task_id, self.origin_position)
