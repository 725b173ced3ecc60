"""
Monthly operating cycle.

One simulated month of running the business: product work, churn and
organic acquisition, revenue at the current ARPU, cash flow, valuation
drift and organic market share growth. Rates are quarterly economy
figures brought down to a month.

run_month returns the month as Effects, so the store applies it through
the same clamping path and ledger as decisions and events.
"""

import math

from ..config.settings import EconomyConfig
from ..core.entities import Business, BusinessType, Effects
from .market import organic_share_growth

ARPU_FACTOR = {
    BusinessType.TECH: 1.2,
    BusinessType.ECOMMERCE: 1.1,
    BusinessType.SERVICE: 0.9,
    BusinessType.MANUFACTURING: 1.0
}

# Annual revenue multiple used for valuation
REVENUE_MULTIPLE = {
    BusinessType.TECH: 8.0,
    BusinessType.ECOMMERCE: 3.0,
    BusinessType.SERVICE: 2.0,
    BusinessType.MANUFACTURING: 1.5
}


def base_arpu(business: Business, config: EconomyConfig) -> float:
    return config.base_arpu * ARPU_FACTOR[business.business_type]


def current_arpu(business: Business, config: EconomyConfig) -> float:
    """Revenue per customer; decisions that move revenue move ARPU."""
    if business.customers > 0 and business.revenue > 0:
        return business.revenue / business.customers
    return base_arpu(business, config)


def product_progress_gain(business: Business, config: EconomyConfig) -> float:
    if business.product_progress >= 100:
        return 0.0
    reference = max(business.initial_capital * 2, 1.0)
    cash_factor = min(1.5, max(0.5, business.cash / reference))
    gain = round(config.base_progress_rate * math.sqrt(max(business.employees, 0)) * cash_factor)
    return min(float(gain), 100.0 - business.product_progress)


def customer_change(business: Business, config: EconomyConfig) -> int:
    """Organic acquisition minus churn for one month."""
    churn_rate = max(0.0, config.base_churn_rate - business.product_progress / 3000)
    churned = round(business.customers * churn_rate)

    readiness = min(1.0, business.product_progress / 75)
    spend_factor = math.sqrt(max(business.expenses, 0.0) * 0.3 / 10000)
    acquired = round(config.organic_acquisition_rate * readiness * spend_factor)

    return acquired - churned


def target_valuation(business: Business, revenue: float, market_share: float) -> float:
    annual_revenue = revenue * 12
    revenue_based = annual_revenue * REVENUE_MULTIPLE[business.business_type] * (1 + market_share)
    return max(revenue_based, business.initial_capital * 2)


def run_month(business: Business, config: EconomyConfig) -> Effects:
    """Effects of one month of operations."""
    progress_gain = product_progress_gain(business, config)
    customers_delta = max(customer_change(business, config), -business.customers)
    customers = business.customers + customers_delta

    revenue = customers * current_arpu(business, config)
    share_gain = organic_share_growth(business, config.market_share_ceiling)
    market_share = business.market_share + share_gain

    target = target_valuation(business, revenue, market_share)

    return Effects(
        cash=revenue - business.expenses,
        revenue=revenue - business.revenue,
        customers=customers_delta,
        valuation=(target - business.valuation) * config.valuation_convergence,
        product_progress=progress_gain,
        market_share=share_gain
    )
