"""Shared fixtures for the venture simulator tests."""

from uuid import uuid4

import pytest

from venture_sim.config.settings import ClockConfig, EconomyConfig, EventConfig, Settings
from venture_sim.core.entities import (
    Business,
    BusinessType,
    Decision,
    DecisionOption,
    DecisionType,
    Effects,
    FundingStage,
    OptionMetrics,
    Urgency
)
from venture_sim.store import GameStateStore


@pytest.fixture
def settings():
    """Settings with a fixed seed."""
    return Settings(
        random_seed=1234,
        economy=EconomyConfig(),
        events=EventConfig(),
        clock=ClockConfig(tick_interval_seconds=0.01)
    )


@pytest.fixture
def quiet_settings():
    """Settings where no random events ever fire."""
    return Settings(
        random_seed=1234,
        economy=EconomyConfig(),
        events=EventConfig(
            market_probability=0.0,
            internal_probability=0.0,
            competitor_probability=0.0,
            competitor_growth_weight=0.0,
            crisis_probability=0.0,
            crisis_distress_weight=0.0
        ),
        clock=ClockConfig(tick_interval_seconds=0.01)
    )


@pytest.fixture
def store(settings):
    return GameStateStore(settings)


@pytest.fixture
def quiet_store(quiet_settings):
    return GameStateStore(quiet_settings)


@pytest.fixture
def make_business():
    """Factory for businesses with sensible defaults."""
    def _make(**overrides) -> Business:
        values = dict(
            id=uuid4(),
            name="Test Co",
            business_type=BusinessType.TECH,
            funding_stage=FundingStage.BOOTSTRAPPED,
            initial_capital=10000.0,
            cash=10000.0,
            revenue=2000.0,
            expenses=1000.0,
            customers=50,
            employees=1,
            valuation=40000.0
        )
        values.update(overrides)
        return Business(**values)
    return _make


@pytest.fixture
def make_decision():
    """Factory for a decision with the given option metrics."""
    def _make(*options: OptionMetrics, decision_type: DecisionType = DecisionType.MARKETING) -> Decision:
        return Decision(
            id=uuid4(),
            type=decision_type,
            title="Test Decision",
            description="A decision for testing",
            urgency=Urgency.NORMAL,
            options=tuple(
                DecisionOption(id=index, label=f"Option {index}", metrics=metrics)
                for index, metrics in enumerate(options, start=1)
            )
        )
    return _make


@pytest.fixture
def marketing_option():
    return OptionMetrics(cost=500, cac=50, timeframe="Fast", roi="High", impact=Effects())
