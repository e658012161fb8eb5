"""Runtime settings for seedcalc, read from the environment.

    SEEDCALC_MAX_CHARS       input buffer limit (default 100)
    SEEDCALC_DISPLAY_DIGITS  digits shown for numbers (default 11)
    SEEDCALC_REPLAY_DELAY    seconds between replay frames in the CLI (default 0.4)
    SEEDCALC_LOG_LEVEL       logging level name (default WARNING)

CLI options override these values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from seedcalc.buffer import MAX_CHARS
from seedcalc.formatter import MAX_DISPLAY_DIGITS

_PREFIX = "SEEDCALC_"


@dataclass
class Settings:
    max_chars: int = MAX_CHARS
    display_digits: int = MAX_DISPLAY_DIGITS
    replay_delay_s: float = 0.4
    log_level: str = "WARNING"


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{_PREFIX}{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{_PREFIX}{name} must be positive, got {value}")
    return value


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{_PREFIX}{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{_PREFIX}{name} must not be negative, got {value}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Variables to read. Defaults to os.environ.

    Raises:
        ValueError: if a variable is set to an invalid value.
    """
    env = os.environ if env is None else env
    level = env.get(_PREFIX + "LOG_LEVEL", "").strip().upper() or "WARNING"
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{_PREFIX}LOG_LEVEL is not a logging level: {level!r}")
    return Settings(
        max_chars=_read_int(env, "MAX_CHARS", MAX_CHARS),
        display_digits=_read_int(env, "DISPLAY_DIGITS", MAX_DISPLAY_DIGITS),
        replay_delay_s=_read_float(env, "REPLAY_DELAY", 0.4),
        log_level=level,
    )
