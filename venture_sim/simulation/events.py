"""
Event Generator

Produces exogenous events (market, internal, competitor, crisis) from an
explicit random state, plus deterministic milestone events.

Selection policy, evaluated per tick and independently per class:
- market / internal: steady base rates
- competitor: base rate raised by the player's market share growth
- crisis: low base rate raised by financial distress, i.e. burn rate
  (expenses - revenue) running ahead of revenue

At most one event per class per tick. A per-month probability p over n
elapsed months becomes 1 - (1 - p) ** n. Every generated event's cash
impact is bounded as a fraction of current cash, so one tick cannot
collapse the business.
"""

from dataclasses import dataclass, replace
from typing import Callable
from uuid import uuid5
import logging
import math

from ..config.settings import EventConfig
from ..core.entities import Business, Effects, Event, EventType
from .random_source import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventTemplate:
    """An event blueprint; effects are built from the current business."""
    title: str
    description: str
    build_effects: Callable[[Business, RandomSource], Effects]


def _pct(value: float, low: float, high: float, source: RandomSource) -> float:
    return value * source.uniform(low, high)


EVENT_TEMPLATES: dict[EventType, tuple[EventTemplate, ...]] = {
    EventType.MARKET: (
        EventTemplate(
            title="Market Growth",
            description="The overall market for your product is growing quickly.",
            build_effects=lambda b, s: Effects(
                customers=round(_pct(b.customers, 0.05, 0.15, s)),
                revenue=_pct(b.revenue, 0.05, 0.12, s),
                valuation=_pct(b.valuation, 0.02, 0.05, s)
            )
        ),
        EventTemplate(
            title="New Market Regulations",
            description="New industry regulations have increased compliance costs.",
            build_effects=lambda b, s: Effects(
                expenses=_pct(b.expenses, 0.03, 0.06, s)
            )
        ),
        EventTemplate(
            title="Economic Slowdown",
            description="A slowdown is affecting customer spending.",
            build_effects=lambda b, s: Effects(
                revenue=-_pct(b.revenue, 0.05, 0.12, s),
                valuation=-_pct(b.valuation, 0.03, 0.08, s)
            )
        )
    ),
    EventType.INTERNAL: (
        EventTemplate(
            title="Team Breakthrough",
            description="Your engineers shipped a major improvement ahead of schedule.",
            build_effects=lambda b, s: Effects(
                product_progress=float(s.randint(3, 8))
            )
        ),
        EventTemplate(
            title="Key Employee Departure",
            description="A key team member has left for another company.",
            build_effects=lambda b, s: Effects(
                employees=-1 if b.employees > 1 else 0,
                product_progress=-float(s.randint(1, 4))
            )
        ),
        EventTemplate(
            title="Customer Referral Wave",
            description="Happy customers are referring their peers.",
            build_effects=lambda b, s: Effects(
                customers=max(1, round(_pct(b.customers, 0.03, 0.08, s)))
            )
        )
    ),
    EventType.COMPETITOR: (
        EventTemplate(
            title="Competitor Price Drop",
            description="A major competitor has cut their prices.",
            build_effects=lambda b, s: Effects(
                customers=-round(_pct(b.customers, 0.02, 0.06, s)),
                market_share=-_pct(b.market_share, 0.05, 0.1, s)
            )
        ),
        EventTemplate(
            title="New Competitor",
            description="A well-funded competitor has entered the market with a similar product.",
            build_effects=lambda b, s: Effects(
                market_share=-_pct(b.market_share, 0.1, 0.2, s),
                revenue=-_pct(b.revenue, 0.02, 0.05, s)
            )
        )
    ),
    EventType.CRISIS: (
        EventTemplate(
            title="Supply Chain Disruption",
            description="A supply chain disruption has hit your industry.",
            build_effects=lambda b, s: Effects(
                cash=-_pct(b.cash, 0.1, 0.4, s),
                expenses=_pct(b.expenses, 0.05, 0.1, s)
            )
        ),
        EventTemplate(
            title="Security Incident",
            description="A security incident forced an expensive emergency response.",
            build_effects=lambda b, s: Effects(
                cash=-_pct(b.cash, 0.15, 0.5, s),
                customers=-round(_pct(b.customers, 0.05, 0.1, s))
            )
        ),
        EventTemplate(
            title="Lawsuit",
            description="A former partner has filed a lawsuit against the company.",
            build_effects=lambda b, s: Effects(
                cash=-_pct(b.cash, 0.05, 0.3, s),
                valuation=-_pct(b.valuation, 0.05, 0.1, s)
            )
        )
    )
}

# Evaluation order; fixed so draws are reproducible
EVENT_CLASS_ORDER = (
    EventType.MARKET,
    EventType.INTERNAL,
    EventType.COMPETITOR,
    EventType.CRISIS
)


class EventGenerator:
    """Generates events from an explicit, seedable random state."""

    def __init__(self, config: EventConfig = None, templates: dict = None):
        self.config = config or EventConfig()
        self.templates = templates or EVENT_TEMPLATES

    def distress(self, business: Business) -> float:
        """0 when burn <= revenue, rising to 1 as burn dwarfs revenue."""
        burn_rate = max(0.0, business.expenses - business.revenue)
        if burn_rate <= business.revenue or burn_rate <= 0:
            return 0.0
        return min(1.0, (burn_rate - business.revenue) / burn_rate)

    def class_probabilities(
        self,
        business: Business,
        market_share_growth: float = 0.0
    ) -> dict[EventType, float]:
        """Per-month probability for each event class."""
        config = self.config
        probabilities = {
            EventType.MARKET: config.market_probability,
            EventType.INTERNAL: config.internal_probability,
            EventType.COMPETITOR: (
                config.competitor_probability
                + config.competitor_growth_weight * max(0.0, market_share_growth)
            ),
            EventType.CRISIS: (
                config.crisis_probability
                + config.crisis_distress_weight * self.distress(business)
            )
        }
        return {
            event_type: min(config.max_probability, max(0.0, p))
            for event_type, p in probabilities.items()
        }

    def max_cash_loss(self, event_type: EventType) -> float:
        if event_type == EventType.CRISIS:
            return self.config.crisis_max_cash_loss
        return self.config.event_max_cash_loss

    def bound_effects(self, business: Business, event_type: EventType, effects: Effects) -> Effects:
        """Cap cash loss at the configured fraction of current cash."""
        floor = -self.max_cash_loss(event_type) * business.cash
        if effects.cash < floor:
            return replace(effects, cash=floor)
        return effects

    def tick(
        self,
        business: Business,
        elapsed_ticks: int,
        rng_state: int,
        market_share_growth: float = 0.0
    ) -> tuple[tuple[Event, ...], int]:
        """Roll for events over `elapsed_ticks` months; returns (events, next state)."""
        if elapsed_ticks < 1:
            raise ValueError("elapsed_ticks must be at least 1")

        source = RandomSource(rng_state)
        probabilities = self.class_probabilities(business, market_share_growth)

        events = []
        for event_type in EVENT_CLASS_ORDER:
            p = 1 - (1 - probabilities[event_type]) ** elapsed_ticks
            # Always draw so the stream does not depend on earlier outcomes
            roll = source.random()
            if roll >= p:
                continue

            template = source.choice(self.templates[event_type])
            try:
                effects = self.bound_effects(
                    business, event_type, template.build_effects(business, source)
                )
            except Exception:
                # Only this event is lost; the other classes still roll
                logger.exception("Event template '%s' failed", template.title)
                continue
            events.append(Event(
                id=source.uuid(),
                type=event_type,
                title=template.title,
                description=template.description,
                effects=effects,
                month=business.month
            ))

        if events:
            logger.debug(
                "Generated %d event(s) at month %d: %s",
                len(events), business.month, ", ".join(e.title for e in events)
            )
        return tuple(events), source.next_state()

    def milestones(self, before: Business, after: Business) -> tuple[Event, ...]:
        """Informational events for thresholds crossed between two snapshots."""
        events = []

        def milestone(key: str, event_type: EventType, title: str, description: str) -> None:
            events.append(Event(
                id=uuid5(after.id, f"milestone:{key}:{after.month}"),
                type=event_type,
                title=title,
                description=description,
                month=after.month
            ))

        if before.revenue > 0:
            change = after.revenue / before.revenue - 1
            if change >= 0.2:
                milestone(
                    "revenue_up", EventType.INTERNAL, "Revenue Milestone Reached",
                    f"Monthly revenue increased by {math.floor(change * 100)}%"
                )
            elif change <= -0.2:
                milestone(
                    "revenue_down", EventType.INTERNAL, "Revenue Decline",
                    f"Monthly revenue decreased by {math.floor(-change * 100)}%"
                )

        if before.customers < 100 <= after.customers:
            milestone(
                "customers_100", EventType.INTERNAL, "Customer Milestone Reached",
                "Your business has reached 100 customers!"
            )

        if before.market_share < 0.1 <= after.market_share:
            milestone(
                "share_10", EventType.MARKET, "Market Share Milestone",
                "Your business now holds 10% of the market"
            )

        progress_steps = (
            (25, "Product Development Milestone", "Your product has reached 25% completion - MVP is taking shape"),
            (50, "Product Development Milestone", "Your product has reached 50% completion - MVP is ready for testing"),
            (75, "Product Development Milestone", "Your product has reached 75% completion - preparing for launch"),
            (100, "Product Launch", "Your product is now complete and fully launched to the market")
        )
        for threshold, title, description in progress_steps:
            if before.product_progress < threshold <= after.product_progress:
                milestone(f"progress_{threshold}", EventType.INTERNAL, title, description)

        return tuple(events)
