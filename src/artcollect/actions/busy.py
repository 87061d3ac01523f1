"""Busy-state protocol consumed by overlay views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


class BusyAction(Protocol):
    def is_busy(self) -> bool:
        ...

    def busy_text(self) -> str:
        ...


class NoAction:
    """Stand-in for "no action": never busy, no text."""

    def is_busy(self) -> bool:
        return False

    def busy_text(self) -> str:
        return ""


@dataclass(frozen=True)
class BusySnapshot:
    busy: bool
    text: str = ""


def optional_busy(action: Optional[BusyAction]) -> BusyAction:
    if action is None:
        return NoAction()
    return action


def busy_snapshot(action: Optional[BusyAction]) -> BusySnapshot:
    resolved = optional_busy(action)
    if not resolved.is_busy():
        return BusySnapshot(busy=False)
    return BusySnapshot(busy=True, text=resolved.busy_text())
