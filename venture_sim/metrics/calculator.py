"""
Metrics Calculator

Derives the business metrics shown on the dashboard:
- Burn rate and runway
- MRR growth
- Revenue multiple
- Market share

Everything here is a pure function of the Business snapshot and its
FinancialRecord history. There is no internal state beyond the metric
definitions, so calling calculate twice on the same inputs yields the
same BusinessMetrics.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence
import statistics

from ..core.entities import Business, BusinessMetrics, FinancialRecord

# Guards revenue_multiple against division by zero
EPSILON = 1e-9


class MetricCategory(Enum):
    """Categories of metrics."""
    LIQUIDITY = "liquidity"
    GROWTH = "growth"
    VALUATION = "valuation"
    MARKET = "market"


@dataclass(frozen=True)
class MetricDefinition:
    """Definition of a derived metric."""
    name: str
    category: MetricCategory
    description: str
    unit: str
    target_direction: str = "higher"  # lower, higher


def clamp_market_share(value: float) -> float:
    """Market share is a fraction in [0, 1]."""
    return min(1.0, max(0.0, value))


class MetricsCalculator:
    """
    Calculates derived metrics over a trailing window of records.

    Formulas:
    - burn_rate = max(0, mean(expenses) - mean(revenue)) over the window
    - runway = cash / burn_rate, or None (unlimited) when burn_rate is 0
    - mrr_growth = % change from oldest to newest revenue in the window
    - revenue_multiple = valuation / max(revenue, EPSILON)
    - market_share clamped to [0, 1]
    """

    def __init__(self, window: int = 3):
        if window < 1:
            raise ValueError("window must be at least 1")
        self.window = window
        self._metrics = self._define_metrics()

    def _define_metrics(self) -> dict[str, MetricDefinition]:
        return {
            "burn_rate": MetricDefinition(
                name="Burn Rate",
                category=MetricCategory.LIQUIDITY,
                description="Net monthly cash outflow over the trailing window",
                unit="$/month",
                target_direction="lower"
            ),
            "runway": MetricDefinition(
                name="Runway",
                category=MetricCategory.LIQUIDITY,
                description="Months until cash reaches zero at the current burn rate",
                unit="months"
            ),
            "mrr_growth": MetricDefinition(
                name="MRR Growth",
                category=MetricCategory.GROWTH,
                description="Percent change in monthly revenue over the trailing window",
                unit="%"
            ),
            "revenue_multiple": MetricDefinition(
                name="Revenue Multiple",
                category=MetricCategory.VALUATION,
                description="Valuation divided by monthly revenue",
                unit="x"
            ),
            "market_share": MetricDefinition(
                name="Market Share",
                category=MetricCategory.MARKET,
                description="Fraction of the total market held",
                unit="fraction"
            )
        }

    def get_metric_definition(self, metric_name: str) -> Optional[MetricDefinition]:
        """Get definition for a metric."""
        return self._metrics.get(metric_name)

    def trailing_window(self, financials: Sequence[FinancialRecord]) -> list[FinancialRecord]:
        """The last `window` records, oldest first."""
        return list(financials[-self.window:])

    def calculate_burn_rate(
        self,
        business: Business,
        financials: Sequence[FinancialRecord]
    ) -> float:
        window = self.trailing_window(financials)
        if not window:
            return max(0.0, business.expenses - business.revenue)

        avg_expenses = statistics.fmean(r.expenses for r in window)
        avg_revenue = statistics.fmean(r.revenue for r in window)
        return max(0.0, avg_expenses - avg_revenue)

    def calculate_runway(self, cash: float, burn_rate: float) -> Optional[float]:
        if burn_rate > 0:
            return cash / burn_rate
        return None

    def calculate_mrr_growth(self, financials: Sequence[FinancialRecord]) -> float:
        window = self.trailing_window(financials)
        if len(window) < 2:
            return 0.0

        oldest = window[0].revenue
        newest = window[-1].revenue
        if oldest <= 0:
            return 0.0
        return (newest - oldest) / oldest * 100

    def calculate_revenue_multiple(self, valuation: float, revenue: float) -> float:
        return valuation / max(revenue, EPSILON)

    def calculate(
        self,
        business: Business,
        financials: Sequence[FinancialRecord] = ()
    ) -> BusinessMetrics:
        """Calculate all metrics for a business and its history."""
        burn_rate = self.calculate_burn_rate(business, financials)

        return BusinessMetrics(
            cash=business.cash,
            revenue=business.revenue,
            valuation=business.valuation,
            burn_rate=burn_rate,
            runway=self.calculate_runway(business.cash, burn_rate),
            mrr_growth=self.calculate_mrr_growth(financials),
            customers=business.customers,
            revenue_multiple=self.calculate_revenue_multiple(
                business.valuation, business.revenue
            ),
            market_share=clamp_market_share(business.market_share)
        )
