"""Terminal calculator screen: renders engine output with Rich.

Top line: the expression, syntax highlighted per token, with the range being
calculated during a replay in a highlight color. Bottom line: an error, the
result, or the last number typed.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from seedcalc.engine import CalculatorEngine
from seedcalc.formatter import MAX_DISPLAY_DIGITS, format_number
from seedcalc.models import EngineState, ParsedExpression, SyntaxToken, TokenKind

_ERR_PREFIX = "ERR:"

_STYLE_ERROR = "bold #ff1100"
_STYLE_NUMBER = "bold"
_STYLE_MUL_DIV = "#e539e5"
_STYLE_ADD_SUB = "#00b4f0"
_STYLE_PARENTHESIS = "#655aff"
_STYLE_INVALID = "#666666"
_STYLE_BEING_CALCULATED = "bold #ff9900"

_DISPLAY_OPERATORS = {"*": "×", "/": "÷"}

_ERROR_LABELS = {
    EngineState.OVERFLOW: "OVERFLOW",
    EngineState.SYNTAX_ERROR: "SYNTAX",
    EngineState.DIVIDE_BY_ZERO: "DIVBY0",
}


def _initial_text() -> Text:
    return Text("0", style=_STYLE_NUMBER)


def _token_style(token: SyntaxToken, token_text: str) -> str:
    if token.kind == TokenKind.OPERATOR:
        return _STYLE_MUL_DIV if token_text in ("*", "/", "×", "÷") else _STYLE_ADD_SUB
    if token.kind == TokenKind.PARENTHESIS:
        return _STYLE_PARENTHESIS
    if token.kind == TokenKind.UNKNOWN:
        return _STYLE_INVALID
    return _STYLE_NUMBER


def render_expression(expression: Optional[ParsedExpression]) -> Text:
    """Render the top line. An empty expression shows '0'."""
    if expression is None or not expression.tokens:
        return _initial_text()
    text = Text()
    highlighted = expression.highlighted_range
    for token in expression.tokens:
        token_text = expression.token_text(token)
        if highlighted is not None and highlighted.contains(token.range):
            style = _STYLE_BEING_CALCULATED
        else:
            style = _token_style(token, token_text)
        if token.kind == TokenKind.OPERATOR:
            token_text = _DISPLAY_OPERATORS.get(token_text, token_text)
        text.append(token_text, style=style)
    return text


def render_bottom_line(
    state: EngineState,
    display: Optional[ParsedExpression],
    result: Optional[float],
    max_display_digits: int = MAX_DISPLAY_DIGITS,
) -> Text:
    """Render the bottom line: error > result > last number typed > '0'."""
    if state.is_error:
        return Text(_ERR_PREFIX + _ERROR_LABELS[state], style=_STYLE_ERROR)
    if state == EngineState.REPLAYING:
        return Text("")
    if result is not None:
        return Text(format_number(result, max_display_digits), style=_STYLE_NUMBER)
    if display is not None and not display.is_replaying:
        number = display.last_number()
        if number is not None:
            return Text(format_number(number, max_display_digits), style=_STYLE_NUMBER)
    return _initial_text()


def render_screen(engine: CalculatorEngine, title: str = "seedcalc") -> Panel:
    """Render both lines of the engine's screen inside a panel."""
    digits = engine.replayer.max_display_digits
    top = render_expression(engine.display)
    bottom = render_bottom_line(engine.state, engine.display, engine.result, digits)
    top.justify = "right"
    bottom.justify = "right"
    return Panel(Group(top, bottom), title=title, width=60)
