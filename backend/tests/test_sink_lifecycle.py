"""
Tests for ResultSink and GenerationLifecycle.
"""
import dataclasses

import pytest
from statemachine.exceptions import TransitionNotAllowed

from notegen.services.generation import (
    GenerationLifecycle,
    GenerationStatus,
    ResultSink,
    SinkEventKind,
    SinkSnapshot,
)


class TestResultSink:
    """Tests for ResultSink mutations and observation."""

    def test_initial_state(self):
        sink = ResultSink()

        assert sink.snapshot() == SinkSnapshot(text="", error=None, is_running=False)
        assert sink.fragments == ()
        assert sink.generation == 0

    def test_reset_clears_previous_output(self):
        sink = ResultSink()
        sink.reset(1)
        sink.append("old")
        sink.fail("broken")

        sink.reset(2)

        assert sink.snapshot() == SinkSnapshot(text="", error=None, is_running=True)
        assert sink.fragments == ()
        assert sink.generation == 2

    def test_stop_keeps_text_without_error(self):
        sink = ResultSink()
        sink.reset(1)
        sink.append("partial")

        sink.stop()

        assert sink.snapshot() == SinkSnapshot(
            text="partial", error=None, is_running=False
        )

    def test_events_carry_snapshot_after_mutation(self):
        sink = ResultSink()
        events = []
        sink.subscribe(events.append)

        sink.reset(7)
        sink.append("a")
        sink.append("b")
        sink.complete()

        assert [e.kind for e in events] == [
            SinkEventKind.RESET,
            SinkEventKind.FRAGMENT,
            SinkEventKind.FRAGMENT,
            SinkEventKind.COMPLETED,
        ]
        assert [e.delta for e in events] == ["", "a", "b", ""]
        assert events[1].snapshot.text == "a"
        assert events[2].snapshot.text == "ab"
        assert all(e.generation == 7 for e in events)

    def test_unsubscribe(self):
        sink = ResultSink()
        events = []
        unsubscribe = sink.subscribe(events.append)

        sink.reset(1)
        unsubscribe()
        sink.append("ignored")
        unsubscribe()  # second call is harmless

        assert len(events) == 1

    def test_listener_error_is_isolated(self, caplog):
        sink = ResultSink()
        received = []

        def broken(event):
            raise RuntimeError("listener bug")

        sink.subscribe(broken)
        sink.subscribe(received.append)

        sink.reset(1)

        assert len(received) == 1
        assert "Sink listener failed" in caplog.text

    def test_snapshot_is_immutable(self):
        snapshot = ResultSink().snapshot()

        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.text = "changed"


class TestGenerationLifecycle:
    """Tests for the lifecycle state machine."""

    def test_starts_idle(self):
        lifecycle = GenerationLifecycle()

        assert lifecycle.status == GenerationStatus.IDLE
        assert lifecycle.status.is_terminal is False

    @pytest.mark.parametrize(
        "event, expected",
        [
            ("finish", GenerationStatus.COMPLETED),
            ("fail", GenerationStatus.FAILED),
            ("abort", GenerationStatus.CANCELED),
        ],
    )
    def test_running_reaches_terminal_state(self, event, expected):
        lifecycle = GenerationLifecycle()
        lifecycle.begin()

        lifecycle.send(event)

        assert lifecycle.status == expected
        assert lifecycle.status.is_terminal is True

    def test_begin_from_running_and_terminal_states(self):
        lifecycle = GenerationLifecycle()
        lifecycle.begin()
        lifecycle.begin()
        assert lifecycle.status == GenerationStatus.RUNNING

        lifecycle.fail()
        lifecycle.begin()
        assert lifecycle.status == GenerationStatus.RUNNING

    @pytest.mark.parametrize("event", ["finish", "fail", "abort"])
    def test_terminal_events_require_running(self, event):
        lifecycle = GenerationLifecycle()

        with pytest.raises(TransitionNotAllowed):
            lifecycle.send(event)

        assert lifecycle.status == GenerationStatus.IDLE
