"""Busy-tracking action primitives."""

from .busy import BusyAction, BusySnapshot, NoAction, busy_snapshot, optional_busy
from .pending import DEFAULT_BUSY_TEXT, ActionResult, ActionStatus, PendingAction

__all__ = [
    "DEFAULT_BUSY_TEXT",
    "ActionResult",
    "ActionStatus",
    "BusyAction",
    "BusySnapshot",
    "NoAction",
    "PendingAction",
    "busy_snapshot",
    "optional_busy",
]
