"""Tests for the decision catalog."""

from venture_sim.core.entities import DecisionType, Urgency
from venture_sim.simulation.decisions import (
    PERIODIC_TEMPLATES,
    SPECIAL_TEMPLATES,
    DecisionCatalog
)
from venture_sim.simulation.random_source import RandomSource

SPECIAL_TITLES = {template.title for _, template in SPECIAL_TEMPLATES}


def test_initial_decisions(make_business):
    catalog = DecisionCatalog()
    business = make_business(month=0)

    decisions, next_state = catalog.initial_decisions(business, 5)

    assert [d.type for d in decisions] == [DecisionType.PRODUCT, DecisionType.MARKETING, DecisionType.HR]
    assert next_state != 5

    marketing = decisions[1]
    assert [o.metrics.cost for o in marketing.options] == [5000, 15000, 3000]
    assert [o.metrics.cac for o in marketing.options] == [120, 250, 80]
    assert [o.id for o in marketing.options] == [1, 2, 3]
    assert marketing.deadline_month == 3


def test_periodic_decisions_cover_distinct_areas(make_business):
    catalog = DecisionCatalog()
    business = make_business(month=3)

    for rng_state in range(100):
        decisions, _ = catalog.periodic_decisions(business, rng_state)
        regular = [d for d in decisions if d.title not in SPECIAL_TITLES]

        assert 2 <= len(regular) <= 3
        assert len({d.type for d in regular}) == len(regular)
        assert len(decisions) - len(regular) <= 1
        assert all(d.created_month == 3 for d in decisions)


def test_periodic_decisions_are_sometimes_urgent_and_special(make_business):
    catalog = DecisionCatalog()
    business = make_business()

    batches = [catalog.periodic_decisions(business, s)[0] for s in range(200)]
    decisions = [d for batch in batches for d in batch]

    assert any(d.urgency == Urgency.URGENT for d in decisions)
    assert any(d.urgency == Urgency.NORMAL for d in decisions)
    assert any(d.title in SPECIAL_TITLES for d in decisions)


def test_periodic_decisions_are_deterministic(make_business):
    catalog = DecisionCatalog()
    business = make_business()

    assert catalog.periodic_decisions(business, 77) == catalog.periodic_decisions(business, 77)


def test_costs_scale_with_expenses(make_business):
    catalog = DecisionCatalog()
    template = PERIODIC_TEMPLATES[DecisionType.PRODUCT][0]

    small = catalog.build(
        template, DecisionType.PRODUCT, Urgency.NORMAL,
        make_business(expenses=20000.0), RandomSource(1)
    )
    large = catalog.build(
        template, DecisionType.PRODUCT, Urgency.NORMAL,
        make_business(expenses=40000.0), RandomSource(1)
    )

    assert small.options[0].metrics.cost == 18000
    assert large.options[0].metrics.cost == 36000


def test_finance_decisions_can_raise_cash():
    funding = PERIODIC_TEMPLATES[DecisionType.FINANCE][0]
    assert any(option.impact.cash > 0 for option in funding.options)
