"""Shared typed helpers used across dialog, action, and flow layers."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict

EventSink = Callable[[str, Dict[str, Any]], None]
Listener = Callable[[], None]


def now_ms() -> int:
    return int(time.time() * 1000)


def noop() -> None:
    return None
