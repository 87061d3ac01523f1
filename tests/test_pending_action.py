from __future__ import annotations

import asyncio

from artcollect.actions import ActionStatus, BusySnapshot, NoAction, PendingAction, busy_snapshot, optional_busy


def test_trigger_moves_idle_to_pending_to_resolved():
    async def _run() -> None:
        gate = asyncio.Event()

        async def _operation(value: int) -> int:
            await gate.wait()
            return value * 2

        action = PendingAction(_operation, busy_text="Deleting...")
        assert action.status == ActionStatus.IDLE
        assert action.is_busy() is False

        action.trigger(21)
        assert action.status == ActionStatus.PENDING
        assert action.is_busy() is True
        assert action.busy_text() == "Deleting..."
        assert action.input == 21

        gate.set()
        await action.settle()

        assert action.status == ActionStatus.RESOLVED
        assert action.result is not None
        assert action.result.ok is True
        assert action.result.value == 42
        assert action.is_busy() is False

    asyncio.run(_run())


def test_failure_is_captured_in_result():
    async def _run() -> None:
        async def _operation(value: str) -> None:
            raise RuntimeError("server unreachable")

        action = PendingAction(_operation)
        task = action.trigger("x")
        result = await task

        assert result.ok is False
        assert result.error_text == "server unreachable"
        assert action.status == ActionStatus.RESOLVED
        assert action.result is result

    asyncio.run(_run())


def test_error_text_falls_back_to_exception_type():
    async def _run() -> None:
        async def _operation(value: str) -> None:
            raise KeyError()

        action = PendingAction(_operation)
        result = await action.trigger("x")
        assert result.error_text == "KeyError"

    asyncio.run(_run())


def test_overlapping_dispatches_report_every_resolution_but_latest_wins():
    async def _run() -> None:
        gates = {"a": asyncio.Event(), "b": asyncio.Event()}

        async def _operation(value: str) -> str:
            await gates[value].wait()
            return value.upper()

        resolved = []
        action = PendingAction(_operation)
        action.add_listener(lambda value, result: resolved.append((value, result.value)))

        action.trigger("a")
        task_b = action.trigger("b")
        assert action.in_flight == 2

        gates["b"].set()
        await task_b
        assert action.status == ActionStatus.RESOLVED
        assert action.result is not None and action.result.value == "B"

        gates["a"].set()
        await action.settle()

        assert resolved == [("b", "B"), ("a", "A")]
        assert action.result.value == "B"
        assert action.in_flight == 0

    asyncio.run(_run())


def test_listeners_are_notified_on_trigger_and_resolution():
    async def _run() -> None:
        async def _operation(value: int) -> int:
            return value

        statuses = []
        action = PendingAction(_operation)
        unsubscribe = action.subscribe(lambda: statuses.append(action.status))

        action.trigger(1)
        await action.settle()
        unsubscribe()
        action.trigger(2)
        await action.settle()

        assert statuses == [ActionStatus.PENDING, ActionStatus.RESOLVED]

    asyncio.run(_run())


def test_events_are_emitted_with_action_name():
    async def _run() -> None:
        events = []

        async def _operation(value: int) -> int:
            return value

        action = PendingAction(_operation, name="delete", event_sink=lambda et, payload: events.append((et, payload)))
        await action.trigger(7)

        assert [name for name, _ in events] == ["action.triggered", "action.resolved"]
        assert all(payload["action"] == "delete" for _, payload in events)
        assert events[1][1]["ok"] is True
        assert events[1][1]["latest"] is True

    asyncio.run(_run())


def test_optional_busy_treats_none_as_never_busy():
    assert isinstance(optional_busy(None), NoAction)
    assert busy_snapshot(None) == BusySnapshot(busy=False, text="")


def test_busy_snapshot_reads_action_text_only_while_busy():
    async def _run() -> None:
        gate = asyncio.Event()

        async def _operation(value: int) -> int:
            await gate.wait()
            return value

        action = PendingAction(_operation, busy_text="Working...")
        assert busy_snapshot(action) == BusySnapshot(busy=False)

        action.trigger(1)
        assert busy_snapshot(action) == BusySnapshot(busy=True, text="Working...")

        gate.set()
        await action.settle()
        assert busy_snapshot(action).busy is False

    asyncio.run(_run())


def test_failing_resolution_listener_does_not_skip_the_others():
    async def _run() -> None:
        events = []
        seen = []
        notified = []

        async def _operation(value: int) -> int:
            return value

        def _broken(value, result):
            raise ValueError("listener broke")

        action = PendingAction(_operation, event_sink=lambda et, payload: events.append((et, payload)))
        action.add_listener(_broken)
        action.add_listener(lambda value, result: seen.append((value, result.version)))
        action.subscribe(lambda: notified.append(action.status))

        result = await action.trigger(5)

        assert result.ok is True
        assert seen == [(5, 1)]
        assert notified[-1] == ActionStatus.RESOLVED
        assert ("action.listener_failed", {"version": 1, "input": "5", "error": "listener broke", "action": "action"}) in events

    asyncio.run(_run())
