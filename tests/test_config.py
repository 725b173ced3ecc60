"""Tests for settings and logging configuration."""

import logging

import pytest
from pydantic import ValidationError

from venture_sim.config import ClockConfig, EconomyConfig, EventConfig, get_settings, setup_logging


def test_defaults():
    economy = EconomyConfig()
    events = EventConfig()
    clock = ClockConfig()

    assert economy.market_share_ceiling == 0.6
    assert economy.metrics_window == 3
    assert events.crisis_max_cash_loss == 0.2
    assert clock.fast_ticks_per_step == 3


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ECONOMY_METRICS_WINDOW", "6")
    monkeypatch.setenv("EVENTS_CRISIS_PROBABILITY", "0.5")
    monkeypatch.setenv("CLOCK_TICK_INTERVAL_SECONDS", "0.5")

    assert EconomyConfig().metrics_window == 6
    assert EventConfig().crisis_probability == 0.5
    assert ClockConfig().tick_interval_seconds == 0.5


def test_validation():
    with pytest.raises(ValidationError):
        EconomyConfig(market_share_ceiling=1.5)
    with pytest.raises(ValidationError):
        EventConfig(crisis_probability=-0.1)
    with pytest.raises(ValidationError):
        ClockConfig(fast_ticks_per_step=0)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    previous_level = root.level
    previous_handlers = list(root.handlers)
    try:
        setup_logging("WARNING")
        setup_logging("DEBUG")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
