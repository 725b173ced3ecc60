"""Tests for the competitor market model."""

import pytest

from venture_sim.core.entities import BusinessType, Competitor
from venture_sim.simulation.market import (
    COMPETITOR_NAMES,
    generate_competitors,
    organic_share_growth,
    rebalance
)
from venture_sim.simulation.random_source import RandomSource


def test_generate_competitors(make_business):
    business = make_business(business_type=BusinessType.MANUFACTURING, market_share=0.1)

    competitors = generate_competitors(business, RandomSource(3))

    assert len(competitors) == 3
    assert all(c.name in COMPETITOR_NAMES[BusinessType.MANUFACTURING] for c in competitors)
    assert len({c.name for c in competitors}) == 3
    assert all(50 <= c.strength <= 99 for c in competitors)
    assert sum(c.market_share for c in competitors) == pytest.approx(0.9)


def test_rebalance_keeps_proportions():
    competitors = (
        Competitor(name="A", market_share=0.5),
        Competitor(name="B", market_share=0.3),
        Competitor(name="C", market_share=0.2)
    )

    rebalanced = rebalance(competitors, 0.2)

    assert [c.market_share for c in rebalanced] == pytest.approx([0.4, 0.24, 0.16])


def test_rebalance_floors_tiny_competitors():
    competitors = (
        Competitor(name="A", market_share=0.0),
        Competitor(name="B", market_share=0.99)
    )

    rebalanced = rebalance(competitors, 0.0)

    assert rebalanced[0].market_share == pytest.approx(0.01)
    assert sum(c.market_share for c in rebalanced) == pytest.approx(1.0)


def test_rebalance_without_competitors():
    assert rebalance((), 0.3) == ()


def test_organic_share_growth(make_business):
    business = make_business(customers=300, product_progress=60.0, revenue=30000.0, market_share=0.0)

    growth = organic_share_growth(business, 0.6)

    assert growth == pytest.approx(0.01 * (0.3 + 0.6 + 0.3) / 3 / 3)


def test_organic_share_growth_capped_by_ceiling(make_business):
    business = make_business(customers=5000, product_progress=100.0, revenue=500000.0, market_share=0.599)

    assert organic_share_growth(business, 0.6) == pytest.approx(0.001)
    assert organic_share_growth(make_business(market_share=0.7), 0.6) == 0.0
