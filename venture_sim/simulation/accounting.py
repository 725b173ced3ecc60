"""
Effect application and the financial ledger.

apply_effects is the single path by which any delta (decision, event or
operating month) reaches a Business. Counters that would go negative are
floored at zero and the excess is discarded; product progress stays in
[0, 100] and market share in [0, ceiling]. The returned Effects are what
was actually applied, which is what the ledger records.
"""

from dataclasses import replace
from typing import Optional
from uuid import UUID, uuid5
import math

from ..core.entities import Business, Effects, FinancialRecord, RecordSource
from ..core.errors import InvariantViolation


def _floor_zero(current: float, delta: float) -> float:
    return max(0.0, current + delta)


def apply_effects(
    business: Business,
    effects: Effects,
    market_share_ceiling: float = 1.0
) -> tuple[Business, Effects]:
    """Apply effects with clamping; returns (business, applied effects)."""
    for kind, delta in effects.items():
        # NaN would otherwise clamp to zero and infinity saturate a counter
        if not math.isfinite(delta):
            raise InvariantViolation("effects are finite", f"{kind.value}={delta}")

    cash = _floor_zero(business.cash, effects.cash)
    revenue = _floor_zero(business.revenue, effects.revenue)
    expenses = _floor_zero(business.expenses, effects.expenses)
    customers = max(0, business.customers + effects.customers)
    employees = max(0, business.employees + effects.employees)
    valuation = _floor_zero(business.valuation, effects.valuation)
    product_progress = min(100.0, max(0.0, business.product_progress + effects.product_progress))

    # Share never moves past the ceiling, but a share already above it is kept
    share_cap = max(market_share_ceiling, business.market_share)
    market_share = min(share_cap, max(0.0, business.market_share + effects.market_share))

    updated = replace(
        business,
        cash=cash,
        revenue=revenue,
        expenses=expenses,
        customers=customers,
        employees=employees,
        valuation=valuation,
        product_progress=product_progress,
        market_share=min(1.0, market_share)
    )

    applied = Effects(
        cash=updated.cash - business.cash,
        revenue=updated.revenue - business.revenue,
        expenses=updated.expenses - business.expenses,
        customers=updated.customers - business.customers,
        employees=updated.employees - business.employees,
        valuation=updated.valuation - business.valuation,
        product_progress=updated.product_progress - business.product_progress,
        market_share=updated.market_share - business.market_share
    )
    return updated, applied


def check_invariants(business: Business) -> None:
    """Raise InvariantViolation if a business snapshot is inconsistent."""
    for name in ("cash", "revenue", "expenses", "customers", "employees", "valuation"):
        value = getattr(business, name)
        if not math.isfinite(value):
            raise InvariantViolation(f"{name} is finite", f"{name}={value}")
        if value < 0:
            raise InvariantViolation(f"{name} >= 0", f"{name}={value}")

    if not 0.0 <= business.product_progress <= 100.0:
        raise InvariantViolation(
            "product_progress in [0, 100]", f"product_progress={business.product_progress}"
        )
    if not 0.0 <= business.market_share <= 1.0:
        raise InvariantViolation(
            "market_share in [0, 1]", f"market_share={business.market_share}"
        )
    if business.month < 0:
        raise InvariantViolation("month >= 0", f"month={business.month}")


def financial_record(
    business: Business,
    applied: Effects,
    source: RecordSource,
    source_id: Optional[UUID] = None,
    sequence: int = 0
) -> FinancialRecord:
    """
    Ledger entry for a change that touched cash or revenue.

    The id is derived from the business, month, source and the record's
    position in the ledger so replays produce identical ledgers.
    """
    return FinancialRecord(
        id=uuid5(business.id, f"record:{sequence}:{business.month}:{source.value}:{source_id}"),
        month=business.month,
        source=source,
        source_id=source_id,
        cash=business.cash,
        revenue=business.revenue,
        expenses=business.expenses,
        profit=business.revenue - business.expenses,
        customers=business.customers,
        valuation=business.valuation,
        cash_delta=applied.cash,
        revenue_delta=applied.revenue
    )
