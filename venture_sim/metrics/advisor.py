"""
Mentor Advisor

Rule-based mentor guidance. Works like a threshold alert engine: each
rule watches one signal (runway, burn rate, growth, ...) and produces a
MentorAdvice when its condition holds. Output is deterministic; advice
ids are derived from the business id, rule and month.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID, uuid5

from ..core.entities import (
    Business,
    BusinessMetrics,
    FundingStage,
    BusinessType,
    MentorAdvice,
    MentorAdviceType
)


@dataclass(frozen=True)
class AdviceRule:
    """Definition of a mentor rule."""
    name: str
    signal: str
    condition: str  # gt, lt, gte, lte
    threshold: float
    advice_type: MentorAdviceType
    title: str
    content: str  # formatted with {value}
    priority: int = 0
    enabled: bool = True


DEFAULT_RULES = (
    AdviceRule(
        name="critical_runway",
        signal="runway",
        condition="lt",
        threshold=6.0,
        advice_type=MentorAdviceType.FINANCIAL,
        title="Critical Cash Runway Warning",
        content=(
            "Your current runway is only {value:.0f} months. Consider immediate "
            "cost-cutting measures or accelerating your fundraising timeline."
        ),
        priority=100
    ),
    AdviceRule(
        name="limited_runway",
        signal="runway",
        condition="lt",
        threshold=12.0,
        advice_type=MentorAdviceType.FINANCIAL,
        title="Plan Your Next Raise",
        content=(
            "With about {value:.0f} months of runway, start preparing your next "
            "funding round now. Raises typically take 3-6 months."
        ),
        priority=60
    ),
    AdviceRule(
        name="high_burn",
        signal="burn_to_revenue",
        condition="gt",
        threshold=2.0,
        advice_type=MentorAdviceType.FINANCIAL,
        title="Burn Rate Outpacing Revenue",
        content=(
            "You are burning {value:.1f}x your monthly revenue. Look for expenses "
            "that are not moving growth or product forward."
        ),
        priority=70
    ),
    AdviceRule(
        name="revenue_decline",
        signal="mrr_growth",
        condition="lt",
        threshold=-10.0,
        advice_type=MentorAdviceType.MARKETING,
        title="Revenue Is Shrinking",
        content=(
            "Monthly revenue changed {value:.0f}% recently. Review churn and "
            "invest in retention before pushing acquisition."
        ),
        priority=55
    ),
    AdviceRule(
        name="strong_growth",
        signal="mrr_growth",
        condition="gte",
        threshold=20.0,
        advice_type=MentorAdviceType.GENERAL,
        title="Momentum Is Building",
        content=(
            "Revenue grew {value:.0f}% over the last few months. This is a good "
            "moment to talk to investors."
        ),
        priority=30
    ),
    AdviceRule(
        name="product_not_ready",
        signal="product_progress",
        condition="lt",
        threshold=50.0,
        advice_type=MentorAdviceType.PRODUCT,
        title="Get the Product to Market",
        content=(
            "Your product is {value:.0f}% complete. Revenue and retention stay "
            "limited until the core product ships."
        ),
        priority=40
    ),
    AdviceRule(
        name="few_customers",
        signal="customers",
        condition="lt",
        threshold=50.0,
        advice_type=MentorAdviceType.MARKETING,
        title="Find Your First Customers",
        content=(
            "You have {value:.0f} customers. Focus on a channel with a low "
            "acquisition cost and learn from every early user."
        ),
        priority=35
    ),
    AdviceRule(
        name="thin_team",
        signal="customers_per_employee",
        condition="gt",
        threshold=150.0,
        advice_type=MentorAdviceType.HR,
        title="Your Team Is Stretched",
        content=(
            "Each employee is supporting about {value:.0f} customers. Consider "
            "hiring before service quality slips."
        ),
        priority=25
    )
)

WELCOME_BY_TYPE = {
    BusinessType.TECH: (
        MentorAdviceType.PRODUCT,
        "Tech Strategy",
        "Focus on rapid product development and innovation. Consider investing "
        "in R&D and hiring skilled developers."
    ),
    BusinessType.ECOMMERCE: (
        MentorAdviceType.MARKETING,
        "E-commerce Strategy",
        "Build a strong online presence and optimize your customer acquisition "
        "funnel."
    ),
    BusinessType.SERVICE: (
        MentorAdviceType.GENERAL,
        "Service Strategy",
        "Quality service delivery and customer satisfaction should be your top "
        "priorities."
    ),
    BusinessType.MANUFACTURING: (
        MentorAdviceType.GENERAL,
        "Manufacturing Strategy",
        "Optimize your production processes and keep quality control tight."
    )
}


class MentorAdvisor:
    """
    Evaluates advice rules against a business and its metrics.

    Returns at most `max_advice` pieces, highest priority first.
    """

    def __init__(self, rules: tuple[AdviceRule, ...] = DEFAULT_RULES, max_advice: int = 3):
        self._rules: dict[str, AdviceRule] = {rule.name: rule for rule in rules}
        self.max_advice = max_advice

    def add_rule(self, rule: AdviceRule) -> None:
        self._rules[rule.name] = rule

    def remove_rule(self, name: str) -> bool:
        return self._rules.pop(name, None) is not None

    def signals(self, business: Business, metrics: BusinessMetrics) -> dict[str, float]:
        """Numeric signals the rules can watch."""
        signals = {
            "burn_rate": metrics.burn_rate,
            "mrr_growth": metrics.mrr_growth,
            "customers": float(business.customers),
            "product_progress": business.product_progress,
            "market_share": metrics.market_share,
            "burn_to_revenue": metrics.burn_rate / max(business.revenue, 1.0),
            "customers_per_employee": business.customers / max(business.employees, 1)
        }
        # Unlimited runway never trips a runway rule
        if metrics.runway is not None:
            signals["runway"] = metrics.runway
        return signals

    def advise(
        self,
        business: Business,
        metrics: BusinessMetrics,
        month: Optional[int] = None
    ) -> tuple[MentorAdvice, ...]:
        """Evaluate all rules and return the top triggered advice."""
        month = business.month if month is None else month
        signals = self.signals(business, metrics)

        triggered = []
        covered_signals = set()
        ordered = sorted(self._rules.values(), key=lambda r: (-r.priority, r.name))
        for rule in ordered:
            if not rule.enabled or rule.signal in covered_signals:
                continue
            value = signals.get(rule.signal)
            if value is None:
                continue
            if self._check_condition(value, rule.condition, rule.threshold):
                covered_signals.add(rule.signal)
                triggered.append(self._create_advice(business.id, rule, value, month))

        return tuple(triggered[:self.max_advice])

    def welcome(self, business: Business) -> tuple[MentorAdvice, ...]:
        """Advice issued when a business is founded."""
        advice = [
            MentorAdvice(
                id=self._advice_id(business.id, "welcome", business.month),
                type=MentorAdviceType.GENERAL,
                title="Welcome",
                content=(
                    "Welcome to your new business venture! I'll be your mentor, "
                    "helping you make strategic decisions."
                ),
                related_to="setup",
                month=business.month,
                priority=10
            )
        ]

        advice_type, title, content = WELCOME_BY_TYPE[business.business_type]
        advice.append(MentorAdvice(
            id=self._advice_id(business.id, "welcome_type", business.month),
            type=advice_type,
            title=title,
            content=content,
            related_to=business.business_type.value,
            month=business.month,
            priority=5
        ))

        if business.funding_stage == FundingStage.BOOTSTRAPPED:
            advice.append(MentorAdvice(
                id=self._advice_id(business.id, "welcome_funding", business.month),
                type=MentorAdviceType.FINANCIAL,
                title="Bootstrap Strategy",
                content="Manage your cash flow carefully. Every dollar counts when bootstrapping.",
                related_to="funding",
                month=business.month,
                priority=5
            ))
        else:
            advice.append(MentorAdvice(
                id=self._advice_id(business.id, "welcome_funding", business.month),
                type=MentorAdviceType.FINANCIAL,
                title="Funding Strategy",
                content="Use your funding wisely. Balance growth with runway management.",
                related_to="funding",
                month=business.month,
                priority=5
            ))

        return tuple(advice)

    def _check_condition(self, value: float, condition: str, threshold: float) -> bool:
        if condition == "gt":
            return value > threshold
        elif condition == "lt":
            return value < threshold
        elif condition == "gte":
            return value >= threshold
        elif condition == "lte":
            return value <= threshold
        return False

    def _create_advice(
        self,
        business_id: UUID,
        rule: AdviceRule,
        value: float,
        month: int
    ) -> MentorAdvice:
        return MentorAdvice(
            id=self._advice_id(business_id, rule.name, month),
            type=rule.advice_type,
            title=rule.title,
            content=rule.content.format(value=value),
            related_to=rule.signal,
            month=month,
            priority=rule.priority
        )

    @staticmethod
    def _advice_id(business_id: UUID, key: str, month: int) -> UUID:
        return uuid5(business_id, f"advice:{key}:{month}")
