"""
Competitor market model.

Competitors hold the part of the market the player does not. Whenever the
player's share moves, competitor shares are rescaled so that everything
sums to one.
"""

from dataclasses import replace
from typing import Sequence

from ..core.entities import Business, BusinessType, Competitor
from .random_source import RandomSource

COMPETITOR_NAMES = {
    BusinessType.TECH: ["CloudWave", "Appsphere", "TechVision", "ByteWorks", "CodeNova"],
    BusinessType.ECOMMERCE: ["ShopElite", "CartKing", "MarketMaster", "BuyNow", "DigitalBazaar"],
    BusinessType.SERVICE: ["ServeRight", "ExpertEdge", "ProConsult", "SolutionsHub", "ServicePro"],
    BusinessType.MANUFACTURING: ["IndusTech", "FactoryFusion", "ManufactureMax", "ProducePro", "AssemblyTech"]
}

FOCUS_AREAS = ["product", "marketing", "price"]

# Starting split of the non-player market, largest rival first
INITIAL_SPLIT = (0.5, 0.3, 0.2)

MIN_COMPETITOR_SHARE = 0.01

MONTHS_PER_QUARTER = 3


def generate_competitors(
    business: Business,
    source: RandomSource
) -> tuple[Competitor, ...]:
    """Create three rivals for a new business."""
    names = source.sample(COMPETITOR_NAMES[business.business_type], len(INITIAL_SPLIT))
    remaining = 1.0 - business.market_share

    competitors = tuple(
        Competitor(
            id=source.uuid(),
            name=name,
            market_share=remaining * split,
            strength=source.randint(50, 99),
            focus=FOCUS_AREAS[index % len(FOCUS_AREAS)]
        )
        for index, (name, split) in enumerate(zip(names, INITIAL_SPLIT))
    )
    return rebalance(competitors, business.market_share)


def rebalance(
    competitors: Sequence[Competitor],
    market_share: float
) -> tuple[Competitor, ...]:
    """Rescale competitor shares so they sum to 1 - market_share."""
    if not competitors:
        return ()

    floored = [max(MIN_COMPETITOR_SHARE, c.market_share) for c in competitors]
    total = sum(floored)
    target = max(0.0, 1.0 - market_share)

    return tuple(
        replace(competitor, market_share=share / total * target)
        for competitor, share in zip(competitors, floored)
    )


def organic_share_growth(business: Business, ceiling: float) -> float:
    """
    Share gained in one month from customers, product and revenue.

    Never pushes the player past the ceiling.
    """
    customer_factor = business.customers / 1000
    product_factor = business.product_progress / 100
    revenue_factor = business.revenue / 100000

    quarterly = 0.01 * (customer_factor + product_factor + revenue_factor) / 3
    growth = quarterly / MONTHS_PER_QUARTER
    headroom = max(0.0, ceiling - business.market_share)
    return min(growth, headroom)
