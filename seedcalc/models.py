"""Data models for the seedcalc expression engine.

EngineState and Key enums, TextRange, SyntaxToken, ParsedExpression, Step,
EvaluationResult: the typed structures that flow through
evaluator → engine → replay → screen.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class EngineState(str, Enum):
    """Calculator states."""

    READY = "ready"
    # A staged result is being revealed step by step.
    REPLAYING = "replaying"
    # The input exceeds the buffer limit, or the result exceeds the float range.
    OVERFLOW = "overflow"
    SYNTAX_ERROR = "syntax"
    DIVIDE_BY_ZERO = "div-by-0"

    @property
    def is_ok(self) -> bool:
        return self in (EngineState.READY, EngineState.REPLAYING)

    @property
    def is_error(self) -> bool:
        return not self.is_ok


class Key(str, Enum):
    """Supported calculator keys. The value is the key's text."""

    ALL_CLEAR = "AC"
    BACKSPACE = "Del"
    EQUAL = "="
    DOT = "."
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    N0 = "0"
    N1 = "1"
    N2 = "2"
    N3 = "3"
    N4 = "4"
    N5 = "5"
    N6 = "6"
    N7 = "7"
    N8 = "8"
    N9 = "9"

    @property
    def is_digit(self) -> bool:
        return self.value.isdigit()

    @property
    def is_operator(self) -> bool:
        return self in (Key.ADD, Key.SUB, Key.MUL, Key.DIV)


# Alternative spellings accepted from the keyboard / command line.
_KEY_ALIASES: dict[str, Key] = {
    "ac": Key.ALL_CLEAR,
    "c": Key.ALL_CLEAR,
    "del": Key.BACKSPACE,
    "bs": Key.BACKSPACE,
    "x": Key.MUL,
    "×": Key.MUL,
    "÷": Key.DIV,
}

_KEY_SPLIT_RE = re.compile(r"AC|Del|DEL|del|BS|bs|\S")


def parse_key(text: str) -> Key:
    """Convert a key's text (or one of its aliases) to a Key.

    Raises:
        ValueError: if the text names no calculator key.
    """
    try:
        return Key(text)
    except ValueError:
        pass
    key = _KEY_ALIASES.get(text.strip().lower())
    if key is None:
        raise ValueError(f"Unknown calculator key: {text!r}")
    return key


def parse_keys(text: str) -> list[Key]:
    """Split a run of key presses like '12+3=' or 'AC 7 Del' into Keys."""
    return [parse_key(chunk) for chunk in _KEY_SPLIT_RE.findall(text)]


class TokenKind(str, Enum):
    """Lexical categories used for syntax highlighting."""

    NUMBER = "number"
    OPERATOR = "operator"
    PARENTHESIS = "parenthesis"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TextRange:
    """A range of character offsets. Both ends are inclusive."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def contains(self, other: TextRange) -> bool:
        return self.start <= other.start and other.end <= self.end

    def slice(self, text: str) -> str:
        return text[self.start:self.end + 1]


@dataclass(frozen=True)
class SyntaxToken:
    kind: TokenKind
    range: TextRange


@dataclass(frozen=True)
class ParsedExpression:
    """The expression for the calculator screen to display.

    Incomplete expressions are accepted, since the screen highlights tokens
    before the user finishes typing.
    """

    text: str
    tokens: tuple[SyntaxToken, ...] = ()
    # A sub-expression being calculated, None if nothing is highlighted.
    highlighted_range: Optional[TextRange] = None
    is_replaying: bool = False

    def token_text(self, token: SyntaxToken) -> str:
        return token.range.slice(self.text)

    @property
    def last_token(self) -> Optional[SyntaxToken]:
        return self.tokens[-1] if self.tokens else None

    def last_token_is_number(self) -> bool:
        last = self.last_token
        return last is not None and last.kind == TokenKind.NUMBER

    def last_number_text(self) -> Optional[str]:
        """Text of the last token if it is a number, None otherwise."""
        if not self.last_token_is_number():
            return None
        return self.token_text(self.tokens[-1])

    def last_number(self) -> Optional[float]:
        """Value of the last token if it is a number, None otherwise."""
        text = self.last_number_text()
        if text is None:
            return None
        try:
            return float(text)
        except ValueError:
            return None


@dataclass(frozen=True)
class Step:
    """One reduction performed during evaluation.

    `range` covers the sub-expression that `partial_value` replaces.
    """

    range: TextRange
    partial_value: float


@dataclass(frozen=True)
class EvaluationResult:
    """Final value plus the reductions, in evaluation order."""

    final_value: float
    steps: tuple[Step, ...] = field(default_factory=tuple)
