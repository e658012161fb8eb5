"""Step-by-step replay of a completed evaluation.

Given the steps of an evaluation, produce the successive states of the
expression as each sub-expression is replaced by its value:

    1+[2*3]  ->  1+[6]  ->  1+6  ->  [1+6]  ->  [7]  ->  7  ->  7 (final)

The controller only produces snapshots; pacing them is up to the caller.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

from seedcalc.evaluator import CalcError, ExpressionEvaluator
from seedcalc.formatter import MAX_DISPLAY_DIGITS, format_number
from seedcalc.models import ParsedExpression, Step, TextRange

logger = logging.getLogger(__name__)


class StepReplayController:
    """Turns evaluation steps into a finite sequence of display snapshots."""

    def __init__(
        self,
        evaluator: Optional[ExpressionEvaluator] = None,
        max_display_digits: int = MAX_DISPLAY_DIGITS,
    ) -> None:
        self.evaluator = evaluator or ExpressionEvaluator()
        self.max_display_digits = max_display_digits

    def _snapshot(
        self,
        text: str,
        highlighted: Optional[TextRange] = None,
        replaying: bool = True,
    ) -> ParsedExpression:
        return ParsedExpression(
            text=text,
            tokens=self.evaluator.tokenize(text),
            highlighted_range=highlighted,
            is_replaying=replaying,
        )

    def replay(
        self,
        steps: Sequence[Step],
        original_text: str,
        final_value: float,
    ) -> Iterator[ParsedExpression]:
        """Yield the expression's snapshots, one reduction at a time.

        Each round takes the first remaining step (evaluation order), then
        yields three snapshots: the current text with the step's range
        highlighted, the substituted text with the new number highlighted,
        and the substituted text settled. The substituted text is executed
        again to find the next round's steps, since a rounded number can
        change what is left to evaluate.

        The last snapshot always shows `final_value` itself, so rounding
        drift from the substitutions never reaches the final display.
        """
        text = original_text
        remaining = list(steps)
        # Every round removes one binary operator, so the initial step
        # count bounds the number of rounds.
        rounds_left = len(remaining)
        while remaining and rounds_left > 0:
            rounds_left -= 1
            step = remaining[0]
            yield self._snapshot(text, step.range)

            number = format_number(step.partial_value, self.max_display_digits)
            text = text[:step.range.start] + number + text[step.range.end + 1:]
            substituted = TextRange(step.range.start, step.range.start + len(number) - 1)
            yield self._snapshot(text, substituted)
            yield self._snapshot(text)

            try:
                remaining = list(self.evaluator.execute(text).steps)
            except CalcError as e:
                logger.debug("Replay stopped at %r: %s", text, e)
                break

        yield self._snapshot(format_number(final_value, self.max_display_digits), replaying=False)
