"""Paced replay on a terminal.

Drives `CalculatorEngine.replay()` and redraws the screen after every
snapshot, sleeping between frames. The engine itself has no notion of time.
"""

from __future__ import annotations

import time

from rich.console import Console
from rich.live import Live

from seedcalc.engine import CalculatorEngine
from seedcalc.models import EngineState
from seedcalc.screen import render_screen


def play_replay(engine: CalculatorEngine, console: Console, delay_s: float = 0.4) -> int:
    """Play the pending replay, if any.

    Returns the number of snapshots shown.
    """
    if engine.state != EngineState.REPLAYING:
        return 0

    frames = 0
    start = time.monotonic()
    with Live(render_screen(engine), console=console, auto_refresh=False) as live:
        for _ in engine.replay():
            frames += 1
            live.update(render_screen(engine), refresh=True)
            if delay_s > 0:
                time.sleep(delay_s)
        live.update(render_screen(engine), refresh=True)
    elapsed = time.monotonic() - start
    console.print(f"  [dim]{frames} frames in {elapsed:.1f}s[/dim]")
    return frames
