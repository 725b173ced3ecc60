"""Tests for event generation."""

import pytest

from venture_sim.config.settings import EventConfig
from venture_sim.core.entities import EventType
from venture_sim.simulation.accounting import apply_effects
from venture_sim.simulation.events import (
    EVENT_CLASS_ORDER,
    EVENT_TEMPLATES,
    EventGenerator,
    EventTemplate
)


def always(**overrides) -> EventConfig:
    values = dict(
        market_probability=1.0,
        internal_probability=1.0,
        competitor_probability=1.0,
        crisis_probability=1.0,
        max_probability=1.0
    )
    values.update(overrides)
    return EventConfig(**values)


def crisis_only() -> EventConfig:
    return always(market_probability=0.0, internal_probability=0.0, competitor_probability=0.0)


def test_crisis_never_takes_more_than_cap(make_business):
    """Test that a 20% crisis cap keeps cash at or above 800 from 1000."""
    generator = EventGenerator(crisis_only())
    business = make_business(cash=1000.0)

    for rng_state in range(300):
        events, _ = generator.tick(business, 1, rng_state)
        assert [e.type for e in events] == [EventType.CRISIS]

        updated, _ = apply_effects(business, events[0].effects)
        assert updated.cash >= 800


def test_non_crisis_cash_loss_is_bounded(make_business):
    generator = EventGenerator(always(crisis_probability=0.0))
    business = make_business(cash=1000.0)

    for rng_state in range(100):
        events, _ = generator.tick(business, 1, rng_state)
        for event in events:
            assert event.effects.cash >= -100


def test_at_most_one_event_per_class(make_business):
    generator = EventGenerator(always())

    events, _ = generator.tick(make_business(), 12, 7)

    assert [e.type for e in events] == list(EVENT_CLASS_ORDER)


def test_zero_probabilities_produce_no_events(make_business):
    config = EventConfig(
        market_probability=0.0,
        internal_probability=0.0,
        competitor_probability=0.0,
        competitor_growth_weight=0.0,
        crisis_probability=0.0,
        crisis_distress_weight=0.0
    )
    generator = EventGenerator(config)

    for rng_state in range(50):
        events, _ = generator.tick(make_business(expenses=50000.0, revenue=0.0), 3, rng_state, 0.5)
        assert events == ()


def test_tick_is_deterministic(make_business):
    """Test that the same rng state yields the same events and next state."""
    generator = EventGenerator()
    business = make_business()

    first = generator.tick(business, 3, 424242)
    second = generator.tick(business, 3, 424242)

    assert first == second
    assert first[1] != 424242


def test_tick_rejects_non_positive_elapsed(make_business):
    with pytest.raises(ValueError):
        EventGenerator().tick(make_business(), 0, 1)


def test_distress_raises_crisis_probability(make_business):
    generator = EventGenerator()

    healthy = generator.class_probabilities(make_business(revenue=5000.0, expenses=3000.0))
    distressed = generator.class_probabilities(make_business(revenue=1000.0, expenses=10000.0))

    assert healthy[EventType.CRISIS] == pytest.approx(0.03)
    assert distressed[EventType.CRISIS] == pytest.approx(0.03 + 0.25 * (8000 / 9000))
    assert distressed[EventType.MARKET] == healthy[EventType.MARKET]


def test_share_growth_raises_competitor_probability(make_business):
    generator = EventGenerator()
    business = make_business()

    flat = generator.class_probabilities(business, 0.0)
    growing = generator.class_probabilities(business, 0.02)
    shrinking = generator.class_probabilities(business, -0.02)

    assert flat[EventType.COMPETITOR] == pytest.approx(0.06)
    assert growing[EventType.COMPETITOR] == pytest.approx(0.16)
    assert shrinking[EventType.COMPETITOR] == pytest.approx(0.06)


def test_probabilities_are_capped(make_business):
    generator = EventGenerator(EventConfig(crisis_probability=0.8, crisis_distress_weight=1.0))
    business = make_business(revenue=0.0, expenses=10000.0)

    assert generator.class_probabilities(business)[EventType.CRISIS] == 0.9


def test_milestones_on_thresholds(make_business):
    generator = EventGenerator()
    before = make_business(customers=90, product_progress=20.0, revenue=1000.0, market_share=0.05)
    after = make_business(
        id=before.id, customers=120, product_progress=55.0, revenue=1100.0,
        market_share=0.12, month=1
    )

    milestones = generator.milestones(before, after)
    titles = [m.title for m in milestones]

    assert "Customer Milestone Reached" in titles
    assert "Market Share Milestone" in titles
    assert titles.count("Product Development Milestone") == 2
    assert "Revenue Milestone Reached" not in titles
    assert all(m.month == 1 for m in milestones)
    assert generator.milestones(before, after) == milestones


def test_revenue_milestones(make_business):
    generator = EventGenerator()
    before = make_business(revenue=1000.0)

    up = generator.milestones(before, make_business(id=before.id, revenue=1250.0))
    down = generator.milestones(before, make_business(id=before.id, revenue=700.0))

    assert [m.title for m in up] == ["Revenue Milestone Reached"]
    assert up[0].description == "Monthly revenue increased by 25%"
    assert [m.title for m in down] == ["Revenue Decline"]
    assert down[0].description == "Monthly revenue decreased by 30%"


def test_failing_template_drops_only_its_event(make_business):
    """Test that a template raising an error loses its event and nothing else."""
    templates = dict(EVENT_TEMPLATES)
    templates[EventType.MARKET] = (EventTemplate("Broken", "", lambda b, s: 1 / 0),)
    generator = EventGenerator(always(), templates)

    events, _ = generator.tick(make_business(), 1, rng_state=11)

    assert [e.type for e in events] == [
        EventType.INTERNAL, EventType.COMPETITOR, EventType.CRISIS
    ]
