"""CLI for the seedcalc calculator engine.

Usage:
    python -m seedcalc keys "12+3*4="             # Feed keys, show the screen
    python -m seedcalc keys "(1+2)*3=" --replay   # Animate the evaluation steps
    python -m seedcalc repl                       # Type keys interactively
    python -m seedcalc eval "1+2*3"               # Result plus reduction steps
    python -m seedcalc format 3141592653.59       # Number formatter
"""

from __future__ import annotations

import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from seedcalc.engine import CalculatorEngine
from seedcalc.environment import Settings, load_settings
from seedcalc.evaluator import CalcError, execute
from seedcalc.formatter import format_number
from seedcalc.models import EngineState, parse_keys
from seedcalc.player import play_replay
from seedcalc.screen import render_screen
from seedcalc.visualizable import format_visualizable, order_of_magnitude_upper_bound

app = typer.Typer(
    name="seedcalc",
    help="Calculator expression engine with step-by-step evaluation replay",
    no_args_is_help=True,
)
console = Console(stderr=True)
out = Console()

_QUIT_WORDS = {"q", "quit", "exit"}


def _setup(verbose: bool) -> Settings:
    """Load settings and route logging through Rich."""
    try:
        settings = load_settings()
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)
    level = "DEBUG" if verbose else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return settings


def _build_engine(settings: Settings, digits: Optional[int], replay: bool) -> CalculatorEngine:
    return CalculatorEngine(
        max_chars=settings.max_chars,
        max_display_digits=digits or settings.display_digits,
        replay=replay,
    )


def _feed(engine: CalculatorEngine, line: str, delay_s: float) -> None:
    """Send a line of keys to the engine, playing any replay it starts."""
    for key in parse_keys(line):
        engine.handle_input(key)
        if engine.state == EngineState.REPLAYING:
            play_replay(engine, out, delay_s)


@app.command("keys")
def cmd_keys(
    keys: List[str] = typer.Argument(help="Keys to press, e.g. '12+3=' or 'AC 7 Del'"),
    replay: bool = typer.Option(False, "--replay", "-r", help="Replay the evaluation step by step"),
    delay: Optional[float] = typer.Option(None, "--delay", help="Seconds between replay frames"),
    digits: Optional[int] = typer.Option(None, "--digits", "-d", help="Display digits"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log state transitions"),
) -> None:
    """Press a sequence of keys and show the resulting screen."""
    settings = _setup(verbose)
    engine = _build_engine(settings, digits, replay)
    delay_s = settings.replay_delay_s if delay is None else delay
    try:
        _feed(engine, " ".join(keys), delay_s)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    out.print(render_screen(engine))
    if engine.state.is_error:
        raise typer.Exit(1)


@app.command("repl")
def cmd_repl(
    replay: bool = typer.Option(True, "--replay/--no-replay", help="Replay evaluations step by step"),
    delay: Optional[float] = typer.Option(None, "--delay", help="Seconds between replay frames"),
    digits: Optional[int] = typer.Option(None, "--digits", "-d", help="Display digits"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log state transitions"),
) -> None:
    """Type keys interactively. 'q' quits."""
    settings = _setup(verbose)
    engine = _build_engine(settings, digits, replay)
    delay_s = settings.replay_delay_s if delay is None else delay

    out.print(render_screen(engine))
    while True:
        try:
            line = out.input("[bold]keys>[/bold] ")
        except EOFError:
            break
        if line.strip().lower() in _QUIT_WORDS:
            break
        try:
            _feed(engine, line, delay_s)
        except ValueError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
        out.print(render_screen(engine))


@app.command("eval")
def cmd_eval(
    expression: str = typer.Argument(help="Arithmetic expression, e.g. '(1+2)*3'"),
    digits: Optional[int] = typer.Option(None, "--digits", "-d", help="Display digits"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log details"),
) -> None:
    """Evaluate an expression and list its reduction steps."""
    settings = _setup(verbose)
    digits = digits or settings.display_digits
    try:
        evaluation = execute(expression)
    except CalcError as e:
        console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if evaluation.steps:
        table = Table(title=f"Steps: {expression}", show_header=True, header_style="bold")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Sub-expression", style="cyan")
        table.add_column("Value", justify="right", style="green")
        for i, step in enumerate(evaluation.steps, 1):
            table.add_row(str(i), step.range.slice(expression), format_number(step.partial_value, digits))
        out.print(table)
    out.print(f"= [bold]{format_number(evaluation.final_value, digits)}[/bold]")


@app.command("format")
def cmd_format(
    value: str = typer.Argument(help="Number to format"),
    digits: Optional[int] = typer.Option(None, "--digits", "-d", help="Display digits"),
) -> None:
    """Format a number the way the calculator screen shows it."""
    settings = _setup(False)
    try:
        number = float(value)
    except ValueError:
        raise typer.BadParameter(f"not a number: {value!r}", param_hint="VALUE")
    out.print(format_number(number, digits or settings.display_digits))

    visual = format_visualizable(number)
    if visual is None:
        console.print("[dim]outside the visualizable range[/dim]")
    else:
        bound = order_of_magnitude_upper_bound(number)
        console.print(f"[dim]visualizable: {visual} (magnitude bound {format_number(bound, 13)})[/dim]")


if __name__ == "__main__":
    app()
