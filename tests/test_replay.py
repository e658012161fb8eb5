"""Tests for the step-by-step replay controller.

The replay must terminate, substitute one reduction per round in
evaluation order, and always end on the exact final value.
"""

import pytest

from seedcalc.evaluator import execute
from seedcalc.formatter import format_number
from seedcalc.models import TextRange
from seedcalc.replay import StepReplayController


@pytest.fixture
def controller():
    return StepReplayController()


def _replay(controller, text):
    result = execute(text)
    return list(controller.replay(result.steps, text, result.final_value))


# --- Sequencing ---

def test_rounds_in_evaluation_order(controller):
    snapshots = _replay(controller, "1+2*3")
    assert [s.text for s in snapshots] == ["1+2*3", "1+6", "1+6", "1+6", "7", "7", "7"]
    assert [s.highlighted_range for s in snapshots] == [
        TextRange(2, 4), TextRange(2, 2), None,
        TextRange(0, 2), TextRange(0, 0), None,
        None,
    ]


def test_replaying_flag(controller):
    snapshots = _replay(controller, "1+2")
    assert all(s.is_replaying for s in snapshots[:-1])
    assert not snapshots[-1].is_replaying


def test_snapshots_are_tokenized(controller):
    snapshots = _replay(controller, "(1+2)*3")
    assert snapshots[0].tokens
    assert [snapshots[0].token_text(t) for t in snapshots[0].tokens] == [
        "(", "1", "+", "2", ")", "*", "3",
    ]
    assert snapshots[1].text == "3*3"


def test_no_steps_emits_final_only(controller):
    snapshots = list(controller.replay([], "5", 5.0))
    assert len(snapshots) == 1
    assert snapshots[0].text == "5"
    assert snapshots[0].highlighted_range is None


def test_replay_is_lazy_and_restartable(controller):
    result = execute("1+2")
    first = controller.replay(result.steps, "1+2", result.final_value)
    second = controller.replay(result.steps, "1+2", result.final_value)
    assert next(first).text == "1+2"
    assert [s.text for s in second] == ["1+2", "3", "3", "3"]


# --- Final value ---

def test_final_value_wins_over_rounding_drift(controller):
    snapshots = _replay(controller, "1/3*3")
    texts = [s.text for s in snapshots]
    assert "0.3333333333*3" in texts
    assert "0.9999999999" in texts
    assert texts[-1] == "1"


def test_final_snapshot_uses_given_value(controller):
    result = execute("1+2")
    snapshots = list(controller.replay(result.steps, "1+2", 42.0))
    assert snapshots[-1].text == "42"


def test_scientific_partial_values(controller):
    text = "99999999999*99999999999+1"
    result = execute(text)
    snapshots = _replay(controller, text)
    assert snapshots[1].text.startswith("1.0000E+022")
    assert snapshots[-1].text == format_number(result.final_value)


def test_stops_when_substitution_breaks_expression(controller):
    # 1e-12 formats as "0", so the substituted text divides by zero.
    text = "1/(0.000000000001*1)"
    snapshots = _replay(controller, text)
    assert len(snapshots) == 4
    assert snapshots[2].text == "1/0"
    assert snapshots[-1].text == "1.0000E+012"


def test_display_digits(controller):
    controller = StepReplayController(max_display_digits=5)
    snapshots = _replay(controller, "2/3")
    assert snapshots[1].text == "0.6667"
