"""Tests for the Rich calculator screen."""

from rich.console import Console

from seedcalc.engine import CalculatorEngine
from seedcalc.models import EngineState, ParsedExpression, TextRange
from seedcalc.evaluator import tokenize
from seedcalc.screen import render_bottom_line, render_expression, render_screen


def _expr(text, highlighted=None, replaying=False):
    return ParsedExpression(text, tokenize(text), highlighted, replaying)


def _styles(rendered):
    return {rendered.plain[s.start:s.end]: str(s.style) for s in rendered.spans}


# --- Top line ---

def test_empty_shows_zero():
    assert render_expression(None).plain == "0"
    assert render_expression(ParsedExpression("")).plain == "0"


def test_operators_use_display_glyphs():
    assert render_expression(_expr("6*7/2")).plain == "6×7÷2"


def test_token_colors():
    styles = _styles(render_expression(_expr("(1+2)*a")))
    assert styles["("] == "#655aff"
    assert styles["+"] == "#00b4f0"
    assert styles["×"] == "#e539e5"
    assert styles["a"] == "#666666"
    assert styles["1"] == "bold"


def test_highlighted_range():
    styles = _styles(render_expression(_expr("1+2*3", TextRange(2, 4), True)))
    assert styles["1"] == "bold"
    assert styles["2"] == "bold #ff9900"
    assert styles["×"] == "bold #ff9900"


# --- Bottom line ---

def test_bottom_line_error():
    line = render_bottom_line(EngineState.DIVIDE_BY_ZERO, None, None)
    assert line.plain == "ERR:DIVBY0"


def test_bottom_line_result():
    assert render_bottom_line(EngineState.READY, _expr("1+2"), 3.0).plain == "3"


def test_bottom_line_last_number():
    assert render_bottom_line(EngineState.READY, _expr("12+3.50"), None).plain == "3.5"
    assert render_bottom_line(EngineState.READY, _expr("12+"), None).plain == "0"


def test_bottom_line_blank_while_replaying():
    line = render_bottom_line(EngineState.REPLAYING, _expr("1+2", replaying=True), 3.0)
    assert line.plain == ""


# --- Whole screen ---

def test_render_screen():
    engine = CalculatorEngine()
    for key in "12*3=":
        engine.handle_input(key)
    console = Console(record=True, width=80)
    console.print(render_screen(engine))
    output = console.export_text()
    assert "12×3" in output
    assert "36" in output
