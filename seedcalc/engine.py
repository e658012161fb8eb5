"""The calculator engine, a state machine over calculator keys.

Owns the input buffer, re-tokenizes it after every edit for highlighting,
executes it on '=' and classifies failures into engine states. Three
observables carry the output:

    engine.on_state    EngineState
    engine.on_display  ParsedExpression | None
    engine.on_result   float | None

Usage:
    engine = CalculatorEngine()
    for key in parse_keys("1+2="):
        engine.handle_input(key)
    engine.result    # 3.0

With replay=True a successful '=' enters REPLAYING and the caller drives
`engine.replay()`, pausing between snapshots as it likes.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Union

from seedcalc.buffer import MAX_CHARS, InputBuffer
from seedcalc.evaluator import (
    CalcDivideByZero,
    CalcError,
    CalcOverflow,
    ExpressionEvaluator,
)
from seedcalc.formatter import MAX_DISPLAY_DIGITS
from seedcalc.models import EngineState, Key, ParsedExpression, parse_key
from seedcalc.observable import Observable
from seedcalc.replay import StepReplayController

logger = logging.getLogger(__name__)


def _classify(error: CalcError) -> EngineState:
    """Map an evaluator failure to the error state it puts the engine in."""
    if isinstance(error, CalcDivideByZero):
        return EngineState.DIVIDE_BY_ZERO
    if isinstance(error, CalcOverflow):
        return EngineState.OVERFLOW
    return EngineState.SYNTAX_ERROR


class CalculatorEngine:
    """Calculator state machine.

    Args:
        evaluator: Tokenizer/executor for expressions.
        max_chars: Input buffer limit; one more character means OVERFLOW.
        max_display_digits: Digits used when replay snapshots format numbers.
        replay: Enter REPLAYING after a successful '=' that has steps.
    """

    def __init__(
        self,
        evaluator: Optional[ExpressionEvaluator] = None,
        max_chars: int = MAX_CHARS,
        max_display_digits: int = MAX_DISPLAY_DIGITS,
        replay: bool = False,
    ) -> None:
        self.evaluator = evaluator or ExpressionEvaluator()
        self.replay_enabled = replay
        self.replayer = StepReplayController(self.evaluator, max_display_digits)
        self.buffer = InputBuffer(max_chars)

        self.on_state: Observable[EngineState] = Observable("state", EngineState.READY)
        self.on_display: Observable[Optional[ParsedExpression]] = Observable("display", None)
        self.on_result: Observable[Optional[float]] = Observable("result", None)

        self._replay: Optional[Iterator[ParsedExpression]] = None

    # -- observable properties ------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self.on_state.value

    @property
    def display(self) -> Optional[ParsedExpression]:
        return self.on_display.value

    @property
    def result(self) -> Optional[float]:
        return self.on_result.value

    @property
    def text(self) -> str:
        """The raw buffer text."""
        return self.buffer.text

    def _set_state(self, state: EngineState) -> None:
        if state != self.state:
            logger.debug("State %s -> %s", self.state.value, state.value)
        self.on_state.set(state)

    # -- input ----------------------------------------------------------------

    def handle_input(self, key: Union[Key, str]) -> None:
        """Process one key press to completion."""
        if not isinstance(key, Key):
            key = parse_key(key)

        if self.state == EngineState.REPLAYING:
            if key not in (Key.ALL_CLEAR, Key.BACKSPACE):
                logger.debug("Ignoring %s while replaying", key.value)
                return
            self._abandon_replay()

        if self.state.is_error:
            self._handle_in_error(key)
        else:
            self._handle_in_ready(key)

    def _handle_in_error(self, key: Key) -> None:
        if key == Key.ALL_CLEAR:
            self._set_state(EngineState.READY)
            self._all_clear()
        elif key == Key.BACKSPACE:
            self._set_state(EngineState.READY)
            self.buffer.backspace()
            self._parse()
        # Neither printable keys nor '=' are accepted in an error state.

    def _handle_in_ready(self, key: Key) -> None:
        if key == Key.ALL_CLEAR:
            self._all_clear()
            return

        if self.result is not None:
            if key.is_digit:
                # A digit after a result starts a new expression.
                self.buffer.clear()
                self.on_result.set(None)
            elif key != Key.EQUAL:
                self.on_result.set(None)

        if key == Key.BACKSPACE:
            self.buffer.backspace()
            self._parse()
        elif key == Key.EQUAL:
            self._execute()
        elif key == Key.DOT:
            self._input_dot()
        elif key == Key.N0:
            self._input_zero()
        elif key.is_digit:
            self._input_nonzero_digit(key)
        elif key.is_operator:
            if self.buffer.is_empty:
                self._append(Key.N0.value)
            self._append_and_parse(key.value)
        else:
            self._append_and_parse(key.value)

    def _input_dot(self) -> None:
        if self.buffer.last_char != Key.DOT.value:
            expression = self._current_expression()
            if expression is None or not expression.last_token_is_number():
                self._append(Key.N0.value)
            self._append(Key.DOT.value)
        self._parse_if_ready()

    def _input_zero(self) -> None:
        if self._last_number_text() == "0":
            return
        self._append_and_parse(Key.N0.value)

    def _input_nonzero_digit(self, key: Key) -> None:
        if self._last_number_text() == "0":
            self.buffer.truncate(1)
        self._append_and_parse(key.value)

    def _last_number_text(self) -> Optional[str]:
        expression = self._current_expression()
        return expression.last_number_text() if expression else None

    def _current_expression(self) -> Optional[ParsedExpression]:
        """The buffer as tokens, None when empty.

        The display is reused when it shows the buffer; after a replay it
        shows the final value instead, so the buffer is tokenized again.
        """
        text = self.buffer.text
        if not text:
            return None
        if self.display is not None and self.display.text == text:
            return self.display
        try:
            return ParsedExpression(text=text, tokens=self.evaluator.tokenize(text))
        except CalcError as e:
            logger.debug("Tokenizing %r failed: %s", text, e)
            return ParsedExpression(text=text)

    # -- buffer operations ----------------------------------------------------

    def _all_clear(self) -> None:
        self.buffer.clear()
        self.on_display.set(None)
        self.on_result.set(None)

    def _append(self, text: str) -> None:
        if self.state.is_error:
            return
        if self.buffer.append(text):
            logger.debug("Buffer exceeds %d chars", self.buffer.max_chars)
            self._set_state(EngineState.OVERFLOW)

    def _append_and_parse(self, text: str) -> None:
        self._append(text)
        self._parse_if_ready()

    def _parse_if_ready(self) -> None:
        if self.state == EngineState.READY:
            self._parse()

    def _parse(self) -> None:
        """Re-tokenize the buffer and publish the display."""
        text = self.buffer.text
        if not text:
            self.on_display.set(None)
            return
        try:
            tokens = self.evaluator.tokenize(text)
        except CalcError as e:
            logger.debug("Tokenizing %r failed: %s", text, e)
            self._set_state(_classify(e))
            return
        self.on_display.set(ParsedExpression(text=text, tokens=tokens))

    def _execute(self) -> None:
        text = self.buffer.text
        if not text:
            self.on_display.set(None)
            return
        try:
            evaluation = self.evaluator.execute(text)
        except CalcError as e:
            logger.debug("Executing %r failed: %s", text, e)
            self.on_result.set(None)
            self._set_state(_classify(e))
            return

        self.on_result.set(evaluation.final_value)
        if self.replay_enabled and evaluation.steps:
            self._replay = self.replayer.replay(evaluation.steps, text, evaluation.final_value)
            self._set_state(EngineState.REPLAYING)
        else:
            self._set_state(EngineState.READY)

    # -- replay ---------------------------------------------------------------

    def replay(self) -> Iterator[ParsedExpression]:
        """Drive the pending replay, publishing each snapshot to the display.

        The engine returns to READY when the snapshots are exhausted. An
        AllClear or Backspace between two snapshots ends the iteration, and
        a driver never picks up a replay started after it.
        """
        current = self._replay
        while current is not None and self._replay is current:
            try:
                snapshot = next(current)
            except StopIteration:
                self._replay = None
                self._set_state(EngineState.READY)
                return
            except CalcError as e:
                logger.debug("Replay failed: %s", e)
                self._replay = None
                self.on_result.set(None)
                self._set_state(_classify(e))
                return
            self.on_display.set(snapshot)
            yield snapshot

    def finish_replay(self) -> None:
        """Run the pending replay to completion without pausing."""
        for _ in self.replay():
            pass

    def _abandon_replay(self) -> None:
        if self._replay is not None:
            logger.debug("Replay abandoned")
            self._replay.close()
            self._replay = None
        self._set_state(EngineState.READY)
