"""Tests for the presentation state machine."""

from __future__ import annotations

from imagex.services.presentation import (
    ANALYZING_TEXT,
    IDLE_TEXT,
    Analyzing,
    Done,
    Idle,
    PresentationStateMachine,
)
from imagex.types import Failure, FailureReason, Success


def test_initial_state_is_idle():
    machine = PresentationStateMachine()
    state = machine.current_state()
    assert isinstance(state, Idle)
    assert state.text == IDLE_TEXT


def test_begin_and_finish_notify_observers_in_order():
    machine = PresentationStateMachine()
    seen = []
    machine.subscribe(seen.append)

    token = machine.begin()
    assert isinstance(machine.current_state(), Analyzing)
    assert machine.finish(token, Success("beach")) is True

    assert seen == [Analyzing(), Done(Success("beach"))]
    assert machine.current_state() == Done(Success("beach"))


def test_tokens_increase_monotonically():
    machine = PresentationStateMachine()
    tokens = [machine.begin() for _ in range(3)]
    assert tokens == [1, 2, 3]
    assert machine.latest_token == 3


def test_new_run_replaces_done_state():
    machine = PresentationStateMachine()
    machine.finish(machine.begin(), Success("beach"))

    machine.begin()

    assert isinstance(machine.current_state(), Analyzing)


def test_done_text_and_failure_flag():
    success = Done(Success("boat deck"))
    resize_failure = Done(Failure(FailureReason.RESIZE))
    inference_failure = Done(Failure(FailureReason.INFERENCE, "bad weights"))

    assert success.text == "Result: boat deck"
    assert success.is_failure is False
    assert resize_failure.text == "Image resize failed"
    assert inference_failure.text == "Analysis failed"
    assert inference_failure.is_failure is True
    assert Analyzing().text == ANALYZING_TEXT


def test_unsubscribe_stops_notifications():
    machine = PresentationStateMachine()
    seen = []
    unsubscribe = machine.subscribe(seen.append)
    machine.begin()
    unsubscribe()
    unsubscribe()
    machine.begin()
    assert seen == [Analyzing()]


def test_failing_observer_does_not_block_others():
    machine = PresentationStateMachine()
    seen = []

    def broken(state):
        raise RuntimeError("display crashed")

    machine.subscribe(broken)
    machine.subscribe(seen.append)
    machine.finish(machine.begin(), Success("x"))

    assert seen == [Analyzing(), Done(Success("x"))]


def test_last_finisher_wins_by_default():
    machine = PresentationStateMachine()
    first = machine.begin()
    second = machine.begin()

    assert machine.finish(second, Success("b")) is True
    assert machine.finish(first, Success("a")) is True

    assert machine.current_state() == Done(Success("a"))


def test_discard_stale_ignores_superseded_runs():
    machine = PresentationStateMachine(discard_stale=True)
    first = machine.begin()
    second = machine.begin()

    assert machine.finish(second, Success("b")) is True
    assert machine.finish(first, Success("a")) is False

    assert machine.current_state() == Done(Success("b"))


def test_discard_stale_keeps_analyzing_until_latest_finishes():
    machine = PresentationStateMachine(discard_stale=True)
    first = machine.begin()
    second = machine.begin()

    machine.finish(first, Success("a"))
    assert isinstance(machine.current_state(), Analyzing)

    machine.finish(second, Failure(FailureReason.RESIZE))
    assert machine.current_state() == Done(Failure(FailureReason.RESIZE))
