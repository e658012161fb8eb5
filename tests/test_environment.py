"""Tests for settings loaded from the environment."""

import pytest

from seedcalc.environment import Settings, load_settings


def test_defaults():
    assert load_settings({}) == Settings()
    assert Settings().max_chars == 100
    assert Settings().display_digits == 11


def test_overrides():
    settings = load_settings({
        "SEEDCALC_MAX_CHARS": "40",
        "SEEDCALC_DISPLAY_DIGITS": "13",
        "SEEDCALC_REPLAY_DELAY": "0",
        "SEEDCALC_LOG_LEVEL": "debug",
    })
    assert settings == Settings(max_chars=40, display_digits=13, replay_delay_s=0.0, log_level="DEBUG")


def test_blank_values_use_defaults():
    assert load_settings({"SEEDCALC_MAX_CHARS": "  "}).max_chars == 100


@pytest.mark.parametrize("env", [
    {"SEEDCALC_MAX_CHARS": "many"},
    {"SEEDCALC_MAX_CHARS": "0"},
    {"SEEDCALC_DISPLAY_DIGITS": "-3"},
    {"SEEDCALC_REPLAY_DELAY": "soon"},
    {"SEEDCALC_REPLAY_DELAY": "-1"},
    {"SEEDCALC_LOG_LEVEL": "LOUD"},
])
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_settings(env)
