"""
Consequence Resolver

Turns a chosen decision option into a DecisionConsequence: an explicit
effect delta plus a narrative description. Resolution is a pure
function of (decision, option id, business); the store applies the
result atomically.

Numeric effects come from the option's cost, CAC and explicit levers.
ROI and timeframe are narrative only.
"""

import math

from ..core.entities import (
    Business,
    Decision,
    DecisionConsequence,
    DecisionOption,
    Effects
)
from ..core.errors import InvalidOptionError


class ConsequenceResolver:
    """
    Resolves decision options into effect deltas.

    Customer acquisition has diminishing returns: below
    `saturation_threshold * market_share_ceiling` every dollar buys
    cost/cac customers; above it, yield falls linearly to zero at the
    ceiling.
    """

    def __init__(self, market_share_ceiling: float = 0.6, saturation_threshold: float = 0.5):
        self.market_share_ceiling = market_share_ceiling
        self.saturation_threshold = saturation_threshold

    def resolve(
        self,
        decision: Decision,
        option_id: int,
        business: Business
    ) -> DecisionConsequence:
        """Resolve an option, raising InvalidOptionError if it is unknown."""
        option = decision.get_option(option_id)
        if option is None:
            raise InvalidOptionError(decision.id, option_id)

        effects = self.compute_effects(option, business)

        return DecisionConsequence(
            decision_id=decision.id,
            option_id=option.id,
            effects=effects,
            description=self.describe(option, effects)
        )

    def saturation(self, market_share: float) -> float:
        """Acquisition yield multiplier in [0, 1]."""
        knee = self.saturation_threshold * self.market_share_ceiling
        if market_share <= knee:
            return 1.0
        if market_share >= self.market_share_ceiling:
            return 0.0
        return (self.market_share_ceiling - market_share) / (self.market_share_ceiling - knee)

    def acquired_customers(self, cost: float, cac: float, market_share: float) -> int:
        if cac is None or cac <= 0 or cost <= 0:
            return 0
        # Rounded first so an exact yield is not floored one customer short
        return math.floor(round(cost * self.saturation(market_share) / cac, 9))

    def compute_effects(self, option: DecisionOption, business: Business) -> Effects:
        metrics = option.metrics
        impact = metrics.impact

        customers = (
            self.acquired_customers(metrics.cost, metrics.cac, business.market_share)
            + round(business.customers * metrics.customer_growth)
            + impact.customers
        )

        return Effects(
            cash=impact.cash - metrics.cost,
            revenue=business.revenue * metrics.revenue_growth + impact.revenue,
            expenses=impact.expenses,
            customers=customers,
            employees=impact.employees,
            valuation=impact.valuation,
            product_progress=impact.product_progress,
            market_share=impact.market_share
        )

    def describe(self, option: DecisionOption, effects: Effects) -> str:
        """Narrative for the outcome, using ROI and timeframe metadata."""
        metrics = option.metrics
        parts = [metrics.outcome or f"You chose: {option.label}."]

        outlook = []
        if metrics.roi:
            outlook.append(f"expected ROI {metrics.roi.lower()}")
        if metrics.timeframe:
            outlook.append(f"timeframe {metrics.timeframe.lower()}")
        if outlook:
            parts.append(f"Outlook: {', '.join(outlook)}.")

        if effects.customers > 0:
            parts.append(f"You gained {effects.customers} customers.")
        elif effects.customers < 0:
            parts.append(f"You lost {-effects.customers} customers.")

        return " ".join(parts)
