"""Single-slot confirmation dialog controller shared from the application root."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from artcollect.dialog.state import DialogState
from artcollect.kernel.types import EventSink, Listener

FALLBACK_TITLE = "Title Text"
FALLBACK_BODY = "Content Text"
FALLBACK_CONFIRM_LABEL = "Yes"
FALLBACK_DECLINE_LABEL = "No"


@dataclass(frozen=True)
class DialogSnapshot:
    """Read-only view of the dialog slot for rendering."""

    is_open: bool
    title: str = FALLBACK_TITLE
    body: str = FALLBACK_BODY
    confirm_label: str = FALLBACK_CONFIRM_LABEL
    decline_label: str = FALLBACK_DECLINE_LABEL


class DialogController:
    """Holds at most one pending :class:`DialogState`, last writer wins.

    Opening a dialog while another one is pending silently abandons the older
    request: none of its callbacks will ever run. ``confirm``/``decline``/``close``
    on an empty slot are no-ops, so views can bind to them unconditionally.
    """

    def __init__(self, event_sink: Optional[EventSink] = None) -> None:
        self._event_sink = event_sink
        self._lock = threading.RLock()
        self._pending: Optional[DialogState] = None
        self._listeners: List[Listener] = []

    @property
    def pending(self) -> Optional[DialogState]:
        with self._lock:
            return self._pending

    def is_open(self) -> bool:
        with self._lock:
            return self._pending is not None

    def is_closed(self) -> bool:
        return not self.is_open()

    def open(self, state: DialogState) -> None:
        with self._lock:
            replaced = self._pending
            self._pending = state
        if replaced is not None:
            self._emit("dialog.replaced", {"title": replaced.title, "reason": "replaced_by_new_request"})
        self._emit("dialog.opened", {"title": state.title})
        self._notify()

    def open_debug(self) -> None:
        self.open(DialogState.debug())

    def confirm(self) -> None:
        state = self._take()
        if state is None:
            return
        self._emit("dialog.confirmed", {"title": state.title})
        state.confirm()
        self._notify()

    def decline(self) -> None:
        state = self._take()
        if state is None:
            return
        self._emit("dialog.declined", {"title": state.title})
        state.decline()
        self._notify()

    def close(self) -> None:
        # Closing without an explicit answer counts as a decline.
        self.decline()

    def title_text(self) -> str:
        return self.snapshot().title

    def body_text(self) -> str:
        return self.snapshot().body

    def confirm_label(self) -> str:
        return self.snapshot().confirm_label

    def decline_label(self) -> str:
        return self.snapshot().decline_label

    def snapshot(self) -> DialogSnapshot:
        with self._lock:
            state = self._pending
        if state is None:
            return DialogSnapshot(is_open=False)
        return DialogSnapshot(
            is_open=True,
            title=state.title,
            body=state.body,
            confirm_label=state.confirm_label,
            decline_label=state.decline_label,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _take(self) -> Optional[DialogState]:
        with self._lock:
            state = self._pending
            self._pending = None
            return state

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._event_sink is None:
            return
        try:
            self._event_sink(event_type, dict(payload))
        except Exception:
            return
