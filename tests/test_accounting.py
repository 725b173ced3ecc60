"""Tests for effect application, invariants and the ledger."""

import pytest

from venture_sim.core.entities import Effects, RecordSource
from venture_sim.core.errors import InvariantViolation
from venture_sim.simulation.accounting import apply_effects, check_invariants, financial_record


def test_negative_counters_floor_at_zero(make_business):
    business = make_business(cash=1000.0, revenue=500.0, customers=5, employees=1)

    updated, applied = apply_effects(
        business, Effects(cash=-5000.0, revenue=-800.0, customers=-20, employees=-3)
    )

    assert updated.cash == 0
    assert updated.revenue == 0
    assert updated.customers == 0
    assert updated.employees == 0
    assert applied.cash == -1000.0
    assert applied.revenue == -500.0
    assert applied.customers == -5


def test_excess_is_discarded_not_carried(make_business):
    business = make_business(cash=100.0)

    floored, _ = apply_effects(business, Effects(cash=-500.0))
    recovered, _ = apply_effects(floored, Effects(cash=300.0))

    assert recovered.cash == 300.0


def test_progress_and_share_are_bounded(make_business):
    business = make_business(product_progress=90.0, market_share=0.5)

    updated, applied = apply_effects(
        business, Effects(product_progress=50.0, market_share=0.3), market_share_ceiling=0.6
    )

    assert updated.product_progress == 100.0
    assert updated.market_share == 0.6
    assert applied.product_progress == 10.0
    assert applied.market_share == pytest.approx(0.1)


def test_share_above_ceiling_is_not_pulled_down(make_business):
    business = make_business(market_share=0.7)

    updated, _ = apply_effects(business, Effects(cash=10.0), market_share_ceiling=0.6)

    assert updated.market_share == 0.7


def test_non_finite_effects_are_rejected(make_business):
    """Test that NaN and infinite deltas raise instead of being clamped."""
    business = make_business(cash=50000.0)

    for value in (float("nan"), float("inf"), float("-inf")):
        with pytest.raises(InvariantViolation):
            apply_effects(business, Effects(cash=value))

    with pytest.raises(InvariantViolation):
        apply_effects(business, Effects(market_share=float("nan")), 0.6)


def test_check_invariants(make_business):
    check_invariants(make_business())

    with pytest.raises(InvariantViolation):
        check_invariants(make_business(cash=-1.0))
    with pytest.raises(InvariantViolation):
        check_invariants(make_business(revenue=float("nan")))
    with pytest.raises(InvariantViolation):
        check_invariants(make_business(cash=float("inf")))
    with pytest.raises(InvariantViolation):
        check_invariants(make_business(valuation=float("inf")))
    with pytest.raises(InvariantViolation):
        check_invariants(make_business(market_share=float("nan")))
    with pytest.raises(InvariantViolation):
        check_invariants(make_business(product_progress=101.0))
    with pytest.raises(InvariantViolation):
        check_invariants(make_business(market_share=1.5))


def test_financial_record(make_business):
    business = make_business(cash=9500.0, revenue=2000.0, expenses=1200.0, month=4)
    applied = Effects(cash=-500.0)

    record = financial_record(business, applied, RecordSource.DECISION, sequence=3)

    assert record.month == 4
    assert record.profit == 800.0
    assert record.cash_delta == -500.0
    assert record.revenue_delta == 0.0
    assert record.id == financial_record(business, applied, RecordSource.DECISION, sequence=3).id
    assert record.id != financial_record(business, applied, RecordSource.DECISION, sequence=4).id


def test_effects_from_mapping():
    effects = Effects.from_mapping({"cash": -100.0, "customers": 3})

    assert effects.cash == -100.0
    assert effects.customers == 3
    assert effects.touches_financials
    assert not Effects().touches_financials
    assert Effects().is_empty

    with pytest.raises(ValueError):
        Effects.from_mapping({"morale": 5})
