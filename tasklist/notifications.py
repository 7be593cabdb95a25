"""Transient messages shown to the user."""

from dataclasses import dataclass
from enum import Enum


class NotificationKind(Enum):
    """Kind of transient message."""

    INFO = "info"
    ERROR = "error"
    UNDO_OFFER = "undo-offer"


@dataclass(frozen=True)
class Notification:
    """A message the presentation layer shows and hides after ``duration_ms``."""

    kind: NotificationKind
    message: str
    duration_ms: int
