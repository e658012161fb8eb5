"""Tests for key parsing, states and ParsedExpression helpers."""

import pytest

from seedcalc.evaluator import tokenize
from seedcalc.models import EngineState, Key, ParsedExpression, TextRange, parse_key, parse_keys


# --- Keys ---

def test_parse_key_values():
    assert parse_key("AC") == Key.ALL_CLEAR
    assert parse_key("Del") == Key.BACKSPACE
    assert parse_key("7") == Key.N7
    assert parse_key("(") == Key.LEFT_PAREN


@pytest.mark.parametrize("alias, key", [
    ("c", Key.ALL_CLEAR),
    ("BS", Key.BACKSPACE),
    ("DEL", Key.BACKSPACE),
    ("x", Key.MUL),
    ("×", Key.MUL),
    ("÷", Key.DIV),
])
def test_parse_key_aliases(alias, key):
    assert parse_key(alias) == key


def test_parse_key_unknown():
    with pytest.raises(ValueError):
        parse_key("%")


def test_parse_keys_splits_runs():
    assert parse_keys("12+3=") == [Key.N1, Key.N2, Key.ADD, Key.N3, Key.EQUAL]
    assert parse_keys("AC 7 Del") == [Key.ALL_CLEAR, Key.N7, Key.BACKSPACE]
    assert parse_keys("") == []


def test_key_categories():
    assert Key.N0.is_digit and not Key.N0.is_operator
    assert Key.DIV.is_operator and not Key.DIV.is_digit
    assert not Key.LEFT_PAREN.is_operator


# --- States ---

def test_state_classes():
    assert EngineState.READY.is_ok
    assert EngineState.REPLAYING.is_ok
    for state in (EngineState.OVERFLOW, EngineState.SYNTAX_ERROR, EngineState.DIVIDE_BY_ZERO):
        assert state.is_error


# --- ParsedExpression ---

def test_text_range():
    rng = TextRange(2, 4)
    assert rng.length == 3
    assert rng.slice("1+2*3") == "2*3"
    assert rng.contains(TextRange(3, 3))
    assert not rng.contains(TextRange(1, 3))


def test_last_number():
    expr = ParsedExpression("12+3.5", tokenize("12+3.5"))
    assert expr.last_token_is_number()
    assert expr.last_number_text() == "3.5"
    assert expr.last_number() == pytest.approx(3.5)


def test_last_token_not_number():
    expr = ParsedExpression("12+", tokenize("12+"))
    assert not expr.last_token_is_number()
    assert expr.last_number() is None
    assert ParsedExpression("").last_token is None
