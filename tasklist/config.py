"""Runtime settings for tasklist.

Settings come from ``TASKLIST_*`` environment variables. The command line
can override them (see ``tasklist.cli``).
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

SORT_MODES = ("view", "reorder")


@dataclass
class Settings:
    """Settings for one controller and its shell.

    Attributes:
        log_level: Logging level name
        sort_mode: "view" keeps sorting presentational, "reorder" writes the
                   sorted order back into the store
        undo_capacity: Maximum undo entries, None for unbounded
        message_ms: How long info and error messages stay visible
        undo_offer_ms: How long the restore offer stays visible after a delete
    """

    log_level: str = "WARNING"
    sort_mode: str = "view"
    undo_capacity: Optional[int] = None
    message_ms: int = 3000
    undo_offer_ms: int = 5000

    def __post_init__(self):
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        if self.sort_mode not in SORT_MODES:
            raise ValueError(f"Sort mode must be one of {', '.join(SORT_MODES)}")
        if self.undo_capacity is not None and self.undo_capacity < 1:
            raise ValueError("Undo capacity must be a positive integer")


def _int_env(environ: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        environ: Mapping to read from. If None, uses os.environ

    Raises:
        ValueError: If a variable holds an invalid value
    """
    if environ is None:
        environ = os.environ
    return Settings(
        log_level=environ.get("TASKLIST_LOG_LEVEL", "WARNING") or "WARNING",
        sort_mode=(environ.get("TASKLIST_SORT_MODE", "view") or "view").strip().lower(),
        undo_capacity=_int_env(environ, "TASKLIST_UNDO_CAPACITY", None),
        message_ms=_int_env(environ, "TASKLIST_MESSAGE_MS", 3000),
        undo_offer_ms=_int_env(environ, "TASKLIST_UNDO_OFFER_MS", 5000),
    )
