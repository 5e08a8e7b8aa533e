"""Tests for the minimal synchronous FSM."""

import pytest

from automata import FSM, InvalidConfigError, MissingConfigError


def traffic_light():
    return FSM(
        "red",
        {
            "red": lambda step: step.next("green"),
            "green": lambda step: step.next("yellow" if step.data else "green"),
            "yellow": lambda step: step.next("red"),
        },
    )


class TestFSM:
    def test_initial_state(self):
        fsm = traffic_light()
        assert fsm.current == "red"
        assert fsm.check("red")

    def test_transitions_receive_data(self):
        fsm = traffic_light()
        fsm.next()
        assert fsm.check("green")
        fsm.next(False)
        assert fsm.check("green")
        fsm.next(True)
        assert fsm.check("yellow")

    def test_step_bundle(self):
        seen = []
        fsm = FSM("a", {"a": seen.append})
        fsm.next({"k": 1})
        assert seen[0].data == {"k": 1}
        assert seen[0].current == "a"

    def test_unknown_state_is_noop(self):
        fsm = FSM("a", {"a": lambda step: step.next("nowhere")})
        fsm.next()
        fsm.next()
        assert fsm.current == "nowhere"

    def test_reset(self):
        fsm = traffic_light()
        fsm.next()
        fsm.reset()
        assert fsm.current == "red"

    def test_validation(self):
        with pytest.raises(MissingConfigError):
            FSM(None, {})
        with pytest.raises(InvalidConfigError):
            FSM("a", [("a", print)])
        with pytest.raises(InvalidConfigError):
            FSM("a", {"a": "not callable"})
