"""seedcalc: calculator expression engine.

Turns calculator key presses into a syntax-highlighted expression, evaluates
it on '=', classifies failures (syntax, division by zero, overflow) and can
replay the evaluation one reduction at a time.

Usage:
    python -m seedcalc keys "1+2*3="            # Feed keys, show the screen
    python -m seedcalc keys "1+2*3=" --replay   # Animate the reductions
    python -m seedcalc repl                     # Interactive keypad
"""
