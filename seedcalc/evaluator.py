"""Arithmetic expression evaluator.

Two entry points:
- tokenize(text) -> syntax tokens for highlighting. Lenient: incomplete or
  malformed input yields UNKNOWN tokens instead of failing.
- execute(text) -> EvaluationResult with the final value and every binary
  reduction, in evaluation order, paired with the text range it replaces.

Grammar (usual precedence, left associative):
    expr   := term (('+' | '-') term)*
    term   := factor (('*' | '/') factor)*
    factor := ('+' | '-') factor | NUMBER | '(' expr ')'

Unary signs are folded into their operand and never recorded as steps, so
'3+-3' is a single reduction to 0.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, Union

from seedcalc.models import EvaluationResult, Step, SyntaxToken, TextRange, TokenKind


class CalcError(Exception):
    """Base class for evaluation failures."""


class CalcSyntaxError(CalcError):
    """Malformed or incomplete expression."""


class CalcDivideByZero(CalcError):
    """Division by zero."""


class CalcOverflow(CalcError):
    """A number or partial result exceeds the float range."""


# Numbers may carry an exponent so that scientific-notation results can be
# substituted back into an expression during a replay.
_NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Display glyphs for multiplication and division are accepted as well.
_OPERATOR_ALIASES = {"×": "*", "÷": "/"}
_OPERATORS = "+-*/×÷"
_PARENTHESES = "()"


def tokenize(text: str) -> tuple[SyntaxToken, ...]:
    """Split text into syntax tokens. Whitespace is skipped."""
    tokens: list[SyntaxToken] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if ch in _OPERATORS:
            tokens.append(SyntaxToken(TokenKind.OPERATOR, TextRange(i, i)))
            i += 1
            continue
        if ch in _PARENTHESES:
            tokens.append(SyntaxToken(TokenKind.PARENTHESIS, TextRange(i, i)))
            i += 1
            continue
        m = _NUMBER_RE.match(text, i)
        if m:
            tokens.append(SyntaxToken(TokenKind.NUMBER, TextRange(i, m.end() - 1)))
            i = m.end()
            continue
        tokens.append(SyntaxToken(TokenKind.UNKNOWN, TextRange(i, i)))
        i += 1
    return tuple(tokens)


# ---------------------------------------------------------------------------
# Syntax tree
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Number:
    value: float
    range: TextRange


@dataclass(frozen=True)
class _Unary:
    op: str
    operand: _Node
    range: TextRange


@dataclass(frozen=True)
class _Binary:
    op: str
    left: _Node
    right: _Node
    range: TextRange


_Node = Union[_Number, _Unary, _Binary]


def _parse(text: str, tokens: tuple[SyntaxToken, ...]) -> _Node:
    """Build a syntax tree, raising CalcSyntaxError on malformed input."""
    if not tokens:
        raise CalcSyntaxError("Empty expression")
    idx = [0]

    def cur() -> Optional[SyntaxToken]:
        return tokens[idx[0]] if idx[0] < len(tokens) else None

    def cur_text() -> Optional[str]:
        tok = cur()
        if tok is None:
            return None
        s = tok.range.slice(text)
        return _OPERATOR_ALIASES.get(s, s)

    def eat() -> SyntaxToken:
        tok = tokens[idx[0]]
        idx[0] += 1
        return tok

    def parse_expr() -> _Node:
        left = parse_term()
        while cur_text() in ("+", "-"):
            op = cur_text()
            eat()
            right = parse_term()
            left = _Binary(op, left, right, TextRange(left.range.start, right.range.end))
        return left

    def parse_term() -> _Node:
        left = parse_factor()
        while cur_text() in ("*", "/"):
            op = cur_text()
            eat()
            right = parse_factor()
            left = _Binary(op, left, right, TextRange(left.range.start, right.range.end))
        return left

    def parse_factor() -> _Node:
        tok = cur()
        if tok is None:
            raise CalcSyntaxError("Expected a number")
        s = cur_text()
        if s in ("+", "-"):
            eat()
            operand = parse_factor()
            return _Unary(s, operand, TextRange(tok.range.start, operand.range.end))
        if s == "(":
            eat()
            inner = parse_expr()
            close = cur()
            if cur_text() != ")":
                raise CalcSyntaxError("Unbalanced parentheses")
            eat()
            # The group's range includes both parentheses, so a reduction
            # that consumes it replaces them as well.
            return _with_range(inner, TextRange(tok.range.start, close.range.end))
        if tok.kind == TokenKind.NUMBER:
            eat()
            try:
                value = float(s)
            except ValueError:
                raise CalcSyntaxError(f"Invalid number: {s}")
            if math.isinf(value):
                raise CalcOverflow(f"Number out of range: {s}")
            return _Number(value, tok.range)
        raise CalcSyntaxError(f"Unexpected token: {s}")

    node = parse_expr()
    if cur() is not None:
        raise CalcSyntaxError(f"Unexpected token: {cur_text()}")
    return node


def _with_range(node: _Node, rng: TextRange) -> _Node:
    if isinstance(node, _Number):
        return _Number(node.value, rng)
    if isinstance(node, _Unary):
        return _Unary(node.op, node.operand, rng)
    return _Binary(node.op, node.left, node.right, rng)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def _apply(op: str, left: float, right: float) -> float:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if right == 0:
        raise CalcDivideByZero("Division by zero")
    return left / right


def _evaluate(node: _Node, steps: list[Step]) -> float:
    if isinstance(node, _Number):
        return node.value
    if isinstance(node, _Unary):
        value = _evaluate(node.operand, steps)
        return value if node.op == "+" else -value
    left = _evaluate(node.left, steps)
    right = _evaluate(node.right, steps)
    result = _apply(node.op, left, right)
    if math.isinf(result) or math.isnan(result):
        raise CalcOverflow("Result out of range")
    steps.append(Step(node.range, result))
    return result


def execute(text: str) -> EvaluationResult:
    """Evaluate an expression.

    Raises:
        CalcSyntaxError: the text is not a complete expression.
        CalcDivideByZero: a divisor evaluated to zero.
        CalcOverflow: a number or partial result is not a finite float.
    """
    tokens = tokenize(text)
    for tok in tokens:
        if tok.kind == TokenKind.UNKNOWN:
            raise CalcSyntaxError(f"Invalid character: {tok.range.slice(text)!r}")
    tree = _parse(text, tokens)
    steps: list[Step] = []
    value = _evaluate(tree, steps)
    return EvaluationResult(final_value=value, steps=tuple(steps))


class ExpressionEvaluator:
    """The evaluator contract consumed by the engine and the replay.

    Subclass and override both methods to plug in another grammar.
    """

    def tokenize(self, text: str) -> tuple[SyntaxToken, ...]:
        return tokenize(text)

    def execute(self, text: str) -> EvaluationResult:
        return execute(text)
