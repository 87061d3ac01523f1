"""Confirm-then-mutate flow used by the delete buttons of list and detail views."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional

from artcollect.actions.pending import ActionResult, PendingAction
from artcollect.articles.synchronizer import ListSynchronizer
from artcollect.dialog.controller import DialogController
from artcollect.dialog.state import DEFAULT_CONFIRM_LABEL, DEFAULT_DECLINE_LABEL, DialogState
from artcollect.kernel.types import EventSink, Listener

if TYPE_CHECKING:
    from artcollect.client import ArticlesClient
    from artcollect.navigation import Navigator

DEFAULT_DELETE_TITLE = "Delete Item?"
DEFAULT_DELETE_BODY = "Do you really want to delete this Item?"
WAITING_TEXT = "Waiting for user input..."
WORKING_TEXT = "Working..."

Mutation = Callable[[uuid.UUID], Awaitable[Any]]
SuccessHook = Callable[[uuid.UUID, ActionResult[Any]], Any]


class FlowState(str, Enum):
    """Lifecycle of one confirmation-gated mutation request."""

    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    MUTATING = "mutating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class FlowSnapshot:
    """Read-only view of the flow for rendering."""

    state: FlowState = FlowState.IDLE
    target: Optional[uuid.UUID] = None
    last_error: str = ""

    @property
    def has_active_request(self) -> bool:
        return self.state in {FlowState.AWAITING_CONFIRMATION, FlowState.MUTATING}


class ConfirmedMutationFlow:
    """Asks for confirmation through the shared dialog, then runs ``mutation``.

    Only the newest request drives :attr:`state`. A mutation that resolves after
    a newer request was made still runs ``on_success`` (so the list stays in line
    with the server) and still records its error, but leaves the state alone.
    """

    def __init__(
        self,
        dialog: DialogController,
        mutation: Mutation,
        *,
        on_success: Optional[SuccessHook] = None,
        title: str = DEFAULT_DELETE_TITLE,
        body: str = DEFAULT_DELETE_BODY,
        confirm_label: str = DEFAULT_CONFIRM_LABEL,
        decline_label: str = DEFAULT_DECLINE_LABEL,
        name: str = "delete",
        event_sink: Optional[EventSink] = None,
    ) -> None:
        self._dialog = dialog
        self._on_success = on_success
        self._title = str(title)
        self._body = str(body)
        self._confirm_label = str(confirm_label)
        self._decline_label = str(decline_label)
        self._name = str(name)
        self._event_sink = event_sink

        self._state = FlowState.IDLE
        self._target: Optional[uuid.UUID] = None
        self._last_error = ""
        self._dialog_state: Optional[DialogState] = None
        self._dispatch = 0
        self._listeners: List[Listener] = []

        self._action: PendingAction[uuid.UUID, Any] = PendingAction(
            mutation,
            name=self._name,
            busy_text=WORKING_TEXT,
            event_sink=event_sink,
        )
        self._action.add_listener(self._on_resolved)
        self._unsubscribe_dialog = dialog.subscribe(self._on_dialog_changed)

    @property
    def action(self) -> PendingAction[uuid.UUID, Any]:
        return self._action

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def target(self) -> Optional[uuid.UUID]:
        return self._target

    @property
    def last_error(self) -> str:
        return self._last_error

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(state=self._state, target=self._target, last_error=self._last_error)

    def is_busy(self) -> bool:
        return self.snapshot().has_active_request

    def busy_text(self) -> str:
        if self._state == FlowState.AWAITING_CONFIRMATION:
            return WAITING_TEXT
        if self._state == FlowState.MUTATING:
            return WORKING_TEXT
        return ""

    def request_confirmation(self, key: uuid.UUID) -> None:
        state = DialogState.yes_no(
            lambda: self._confirmed(key),
            lambda: self._declined(key),
            self._title,
            self._body,
        ).with_labels(self._confirm_label, self._decline_label)

        self._dialog_state = state
        self._target = key
        self._set_state(FlowState.AWAITING_CONFIRMATION, reason="confirmation_requested")
        self._dialog.open(state)

    async def settle(self) -> None:
        await self._action.settle()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def close(self) -> None:
        self._unsubscribe_dialog()

    def _confirmed(self, key: uuid.UUID) -> None:
        self._dialog_state = None
        self._target = key
        self._set_state(FlowState.MUTATING, reason="confirmed")
        self._action.trigger(key)
        self._dispatch = self._action.version

    def _declined(self, key: uuid.UUID) -> None:
        self._dialog_state = None
        self._target = None
        self._set_state(FlowState.IDLE, reason="declined")

    def _on_dialog_changed(self) -> None:
        if self._state != FlowState.AWAITING_CONFIRMATION:
            return
        if self._dialog_state is None or self._dialog.pending is self._dialog_state:
            return
        # Our request was overwritten by another open(); no callback will fire.
        self._dialog_state = None
        self._target = None
        self._set_state(FlowState.IDLE, reason="abandoned")

    def _on_resolved(self, key: uuid.UUID, result: ActionResult[Any]) -> None:
        # The same key may be confirmed twice; only the newest dispatch counts.
        current = self._state == FlowState.MUTATING and result.version == self._dispatch

        try:
            if result.ok:
                if current:
                    self._last_error = ""
                    self._set_state(FlowState.SUCCEEDED, reason="mutation_succeeded")
                if self._on_success is not None:
                    self._on_success(key, result)
            else:
                self._last_error = result.error_text
                self._emit(
                    "flow.mutation_failed",
                    {"target": str(key), "error": self._last_error, "current": current},
                )
                if current:
                    self._set_state(FlowState.FAILED, reason="mutation_failed")
        finally:
            if current:
                self._target = None
                self._set_state(FlowState.IDLE, reason="finish")

    def _set_state(self, state: FlowState, *, reason: str) -> None:
        self._state = state
        self._emit(
            "flow.state.changed",
            {
                "state": state.value,
                "target": str(self._target) if self._target is not None else "",
                "last_error": self._last_error,
                "reason": reason,
            },
        )
        for listener in list(self._listeners):
            listener()

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._event_sink is None:
            return
        data = dict(payload)
        data["flow"] = self._name
        try:
            self._event_sink(event_type, data)
        except Exception:
            return


def list_delete_flow(
    dialog: DialogController,
    articles: ListSynchronizer,
    client: "ArticlesClient",
    **kwargs: Any,
) -> ConfirmedMutationFlow:
    """Delete flow for the list view: a confirmed success drops the row."""

    return ConfirmedMutationFlow(
        dialog,
        client.delete,
        on_success=articles.apply_result,
        name="delete.list",
        **kwargs,
    )


def single_delete_flow(
    dialog: DialogController,
    client: "ArticlesClient",
    navigator: "Navigator",
    navigate_to: Optional[str] = None,
    **kwargs: Any,
) -> ConfirmedMutationFlow:
    """Delete flow for the detail view: a confirmed success leaves the page."""

    target_path = navigate_to or "/"

    def _leave(_key: uuid.UUID, _result: ActionResult[Any]) -> None:
        navigator.navigate_to(target_path)

    return ConfirmedMutationFlow(
        dialog,
        client.delete,
        on_success=_leave,
        name="delete.single",
        **kwargs,
    )
