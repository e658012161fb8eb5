"""Range and formatting of numbers the scale visualization can show."""

from __future__ import annotations

import math
from typing import Optional

from seedcalc.formatter import format_number

# Both ends inclusive.
MIN_VALUE = 1e-10
MAX_VALUE = 1e10
VISUALIZABLE_DISPLAY_DIGITS = 13


def is_visualizable(value: float) -> bool:
    return MIN_VALUE <= value <= MAX_VALUE


def format_visualizable(value: float) -> Optional[str]:
    """Fixed-point text for a visualizable value, None outside the range."""
    if not is_visualizable(value):
        return None
    return format_number(value, VISUALIZABLE_DISPLAY_DIGITS)


def order_of_magnitude_upper_bound(value: float) -> float:
    """Upper bound of a positive value's order of magnitude.

    10 for 3, 100 for 30, 0.1 for 0.03. A power of ten is the upper bound of
    the magnitude below it: 10 for 10, 0.1 for 0.1.
    """
    if value <= 0:
        raise ValueError(f"value must be positive, got {value}")
    log = math.log10(value)
    power = int(log) if log % 1 == 0 else math.floor(log + 1)
    return 10.0 ** power
