"""Number formatting for the calculator screen.

Fixed-point output limited to a number of display digits, falling back to
scientific notation when the integer part alone does not fit.
"""

from __future__ import annotations

import math

MAX_DISPLAY_DIGITS = 11

# Scientific notation keeps this many display digits for "d.", "E", the sign
# and a three digit exponent.
_SCIENTIFIC_OVERHEAD = 7
_EXPONENT_DIGITS = 3


def _scientific(value: float, fractional_digits: int) -> str:
    """Format like '9.8765E+013': explicit exponent sign, 3+ exponent digits."""
    mantissa, exponent = f"{value:.{fractional_digits}E}".split("E")
    sign, digits = exponent[0], exponent[1:]
    return f"{mantissa}E{sign}{digits.zfill(_EXPONENT_DIGITS)}"


def format_number(value: float, max_display_digits: int = MAX_DISPLAY_DIGITS) -> str:
    """Format a number for display.

    Args:
        value: The number to format.
        max_display_digits: Maximum count of digits [0-9] in the output,
            the decimal point not included.

    Returns:
        '-' + format(|value|) for negative numbers. Fixed point with trailing
        zeros stripped when the integer digits fit, scientific notation
        otherwise.
    """
    if math.isnan(value):
        return "NaN"
    leading = ""
    if value < 0:
        value = -value
        leading = "-"
    if math.isinf(value):
        return leading + "Infinity"

    integer_digits = 1 if value < 1.0 else math.floor(math.log10(value) + 1)
    if integer_digits > max_display_digits:
        fractional_digits = max(max_display_digits - _SCIENTIFIC_OVERHEAD, 0)
        return leading + _scientific(value, fractional_digits)

    fractional_digits = max_display_digits - integer_digits
    if fractional_digits <= 0:
        return leading + f"{value:.0f}"
    formatted = f"{value:.{fractional_digits}f}"
    return leading + formatted.rstrip("0").rstrip(".")
