"""Asynchronous action wrapper exposing idle/pending/resolved status."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Set, TypeVar

from artcollect.kernel.types import EventSink, Listener

I = TypeVar("I")
O = TypeVar("O")

DEFAULT_BUSY_TEXT = "Working..."


class ActionStatus(str, Enum):
    """Lifecycle of the most recent dispatch."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class ActionResult(Generic[O]):
    """Outcome of one dispatch: a value or the captured error."""

    ok: bool
    value: Optional[O] = None
    error: Optional[Exception] = None
    version: int = 0

    @property
    def error_text(self) -> str:
        if self.error is None:
            return ""
        text = str(self.error).strip()
        return text or type(self.error).__name__


ResolutionListener = Callable[[I, ActionResult[O]], None]


class PendingAction(Generic[I, O]):
    """Wraps ``operation(input)`` so views can bind to its busy state.

    ``trigger`` never blocks and never raises the operation's error; failures
    land in :attr:`result`. Overlapping dispatches all run to completion and all
    reach resolution listeners in the order they finish, but only the most
    recently triggered dispatch decides :attr:`status` and :attr:`result`.
    A resolution listener that raises is reported as ``action.listener_failed``
    and the remaining listeners still run.
    """

    def __init__(
        self,
        operation: Callable[[I], Awaitable[O]],
        *,
        name: str = "action",
        busy_text: str = DEFAULT_BUSY_TEXT,
        event_sink: Optional[EventSink] = None,
    ) -> None:
        self._operation = operation
        self._name = str(name or "action")
        self._busy_text = str(busy_text)
        self._event_sink = event_sink
        self._status = ActionStatus.IDLE
        self._result: Optional[ActionResult[O]] = None
        self._input: Optional[I] = None
        self._version = 0
        self._tasks: Set["asyncio.Task[ActionResult[O]]"] = set()
        self._resolution_listeners: List[ResolutionListener] = []
        self._listeners: List[Listener] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def status(self) -> ActionStatus:
        return self._status

    @property
    def result(self) -> Optional[ActionResult[O]]:
        return self._result

    @property
    def input(self) -> Optional[I]:
        return self._input

    @property
    def version(self) -> int:
        """Number of the most recent dispatch."""

        return self._version

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def is_busy(self) -> bool:
        return self._status == ActionStatus.PENDING

    def busy_text(self) -> str:
        return self._busy_text

    def add_listener(self, listener: ResolutionListener) -> None:
        self._resolution_listeners.append(listener)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def trigger(self, value: I) -> "asyncio.Task[ActionResult[O]]":
        loop = asyncio.get_running_loop()
        self._version += 1
        version = self._version
        self._status = ActionStatus.PENDING
        self._result = None
        self._input = value

        task = loop.create_task(self._run(version, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        self._emit("action.triggered", {"version": version, "input": str(value)})
        self._notify()
        return task

    async def settle(self) -> None:
        """Wait until no dispatch is in flight."""

        while self._tasks:
            await asyncio.wait(list(self._tasks))

    async def _run(self, version: int, value: I) -> ActionResult[O]:
        try:
            output = await self._operation(value)
            result: ActionResult[O] = ActionResult(ok=True, value=output, version=version)
        except Exception as exc:
            result = ActionResult(ok=False, error=exc, version=version)

        latest = version == self._version
        if latest:
            self._status = ActionStatus.RESOLVED
            self._result = result

        self._emit(
            "action.resolved",
            {
                "version": version,
                "input": str(value),
                "ok": result.ok,
                "error": result.error_text,
                "latest": latest,
            },
        )
        for listener in list(self._resolution_listeners):
            try:
                listener(value, result)
            except Exception as exc:
                # One failing listener must not starve the rest.
                self._emit(
                    "action.listener_failed",
                    {"version": version, "input": str(value), "error": str(exc) or type(exc).__name__},
                )
        self._notify()
        return result

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._event_sink is None:
            return
        data = dict(payload)
        data["action"] = self._name
        try:
            self._event_sink(event_type, data)
        except Exception:
            return
