"""
Core Simulation Entities - Game State of Record

This module defines the entities that make up a simulation session.
The GameStateStore is the only writer of these entities; everything it
publishes is frozen, so a snapshot handed to a subscriber can never
change underneath it.

Entities:
- Business: the startup being managed, with its raw counters
- Decision / DecisionOption / DecisionConsequence: strategic choices
- Event: exogenous changes (market, internal, competitor, crisis)
- FinancialRecord: append-only ledger backing charts and runway
- BusinessMetrics: derived figures (burn rate, runway, multiples)
- GameState: the immutable snapshot published to subscribers
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class BusinessType(Enum):
    """Business archetypes."""
    TECH = "tech"
    ECOMMERCE = "ecommerce"
    SERVICE = "service"
    MANUFACTURING = "manufacturing"


class FundingStage(Enum):
    """Funding stage at setup."""
    BOOTSTRAPPED = "bootstrapped"
    ANGEL = "angel"
    SEED = "seed"
    SERIES_A = "seriesA"
    SERIES_B = "seriesB"


class DecisionType(Enum):
    """Business area a decision belongs to."""
    MARKETING = "marketing"
    OPERATIONS = "operations"
    HR = "hr"
    PRODUCT = "product"
    FINANCE = "finance"


class Urgency(Enum):
    """Decision urgency."""
    URGENT = "urgent"
    NORMAL = "normal"
    LOW = "low"


class EventType(Enum):
    """Classes of exogenous events."""
    MARKET = "market"
    INTERNAL = "internal"
    COMPETITOR = "competitor"
    CRISIS = "crisis"


class Speed(Enum):
    """Clock speed."""
    NORMAL = "normal"
    FAST = "fast"


class MentorAdviceType(Enum):
    """Mentor advice categories."""
    FINANCIAL = "financial"
    MARKETING = "marketing"
    PRODUCT = "product"
    HR = "hr"
    GENERAL = "general"


class RecordSource(Enum):
    """What produced a financial record."""
    SETUP = "setup"
    DECISION = "decision"
    EVENT = "event"
    OPERATIONS = "operations"


class EffectKind(Enum):
    """
    The closed set of counters an effect may touch.
    Values match the field names on Effects and Business.
    """
    CASH = "cash"
    REVENUE = "revenue"
    EXPENSES = "expenses"
    CUSTOMERS = "customers"
    EMPLOYEES = "employees"
    VALUATION = "valuation"
    PRODUCT_PROGRESS = "product_progress"
    MARKET_SHARE = "market_share"


@dataclass(frozen=True)
class Effects:
    """
    A delta over the business counters.

    Shared by decision consequences, events and the operating cycle.
    Anything outside EffectKind is rejected rather than carried along.
    """
    cash: float = 0.0
    revenue: float = 0.0
    expenses: float = 0.0
    customers: int = 0
    employees: int = 0
    valuation: float = 0.0
    product_progress: float = 0.0
    market_share: float = 0.0  # fraction, 0.01 == one point of share

    @classmethod
    def from_mapping(cls, values: dict) -> "Effects":
        """Build effects from a {kind: delta} mapping of recognized keys."""
        known = {kind.value for kind in EffectKind}
        normalized = {}
        for key, value in values.items():
            name = key.value if isinstance(key, EffectKind) else key
            if name not in known:
                raise ValueError(f"Unknown effect kind: {key}")
            normalized[name] = value
        return cls(**normalized)

    def get(self, kind: EffectKind):
        return getattr(self, kind.value)

    def items(self) -> list[tuple[EffectKind, float]]:
        """Non-zero (kind, delta) pairs in declaration order."""
        return [
            (kind, self.get(kind))
            for kind in EffectKind
            if self.get(kind) != 0
        ]

    @property
    def is_empty(self) -> bool:
        return not self.items()

    @property
    def touches_financials(self) -> bool:
        return self.cash != 0 or self.revenue != 0


@dataclass(frozen=True)
class Business:
    """
    The startup under management.

    Holds raw counters only; derived figures live in BusinessMetrics.
    Revenue and expenses are monthly amounts.
    """
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    business_type: BusinessType = BusinessType.TECH
    funding_stage: FundingStage = FundingStage.BOOTSTRAPPED
    initial_capital: float = 0.0

    # Raw counters
    cash: float = 0.0
    revenue: float = 0.0
    expenses: float = 0.0
    customers: int = 0
    employees: int = 1
    product_progress: float = 0.0  # 0-100
    valuation: float = 0.0
    market_share: float = 0.0  # 0-1

    # Simulated months elapsed since founding
    month: int = 0
    founded_at: Optional[datetime] = None  # wall-clock date, set only by the caller

    @property
    def quarter(self) -> int:
        return (self.month % 12) // 3 + 1

    @property
    def year(self) -> int:
        return self.month // 12 + 1


@dataclass(frozen=True)
class OptionMetrics:
    """
    Metadata for a decision option.

    cost and cac drive the numeric consequence; timeframe and roi are
    descriptive and only feed the narrative.
    """
    cost: float = 0.0
    timeframe: str = ""
    roi: str = ""
    cac: Optional[float] = None

    # Explicit numeric levers, combined with business state at resolution
    revenue_growth: float = 0.0  # fraction of current revenue
    customer_growth: float = 0.0  # fraction of current customers
    impact: Effects = field(default_factory=Effects)

    outcome: str = ""


@dataclass(frozen=True)
class DecisionOption:
    """One choice within a decision."""
    id: int = 0
    label: str = ""
    description: str = ""
    metrics: OptionMetrics = field(default_factory=OptionMetrics)


@dataclass(frozen=True)
class Decision:
    """A strategic choice presented to the player."""
    id: UUID = field(default_factory=uuid4)
    type: DecisionType = DecisionType.OPERATIONS
    title: str = ""
    description: str = ""
    urgency: Urgency = Urgency.NORMAL
    options: tuple[DecisionOption, ...] = ()

    created_month: int = 0
    deadline_month: Optional[int] = None

    def get_option(self, option_id: int) -> Optional[DecisionOption]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


@dataclass(frozen=True)
class DecisionConsequence:
    """The resolved outcome of choosing one option."""
    decision_id: UUID
    option_id: int
    effects: Effects = field(default_factory=Effects)
    description: str = ""


@dataclass(frozen=True)
class ResolvedDecision:
    """Decision history entry."""
    decision: Decision
    consequence: DecisionConsequence
    applied_effects: Effects = field(default_factory=Effects)  # after clamping
    resolved_month: int = 0


@dataclass(frozen=True)
class Event:
    """An exogenous, non-user-triggered state change."""
    id: UUID = field(default_factory=uuid4)
    type: EventType = EventType.MARKET
    title: str = ""
    description: str = ""
    effects: Effects = field(default_factory=Effects)
    month: int = 0


@dataclass(frozen=True)
class Competitor:
    """A rival holding part of the market."""
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    market_share: float = 0.0
    strength: int = 50  # 1-100
    focus: str = "product"  # product, marketing, price


@dataclass(frozen=True)
class MentorAdvice:
    """A piece of mentor guidance."""
    id: UUID = field(default_factory=uuid4)
    type: MentorAdviceType = MentorAdviceType.GENERAL
    title: str = ""
    content: str = ""
    related_to: str = ""
    month: int = 0
    priority: int = 0  # higher first


@dataclass(frozen=True)
class FinancialRecord:
    """
    Point-in-time ledger entry.

    Written whenever cash or revenue changes. cash_delta and
    revenue_delta are the amounts actually applied, after clamping.
    """
    id: UUID = field(default_factory=uuid4)
    month: int = 0
    source: RecordSource = RecordSource.OPERATIONS
    source_id: Optional[UUID] = None

    # Snapshot after the change
    cash: float = 0.0
    revenue: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0
    customers: int = 0
    valuation: float = 0.0

    # Change applied
    cash_delta: float = 0.0
    revenue_delta: float = 0.0


@dataclass(frozen=True)
class TimeControls:
    """Clock controls, changed only by explicit commands."""
    is_paused: bool = True
    speed: Speed = Speed.NORMAL


@dataclass(frozen=True)
class BusinessMetrics:
    """
    Derived business figures.

    runway is in months; None means the business is not burning cash
    and the runway is unlimited.
    """
    cash: float = 0.0
    revenue: float = 0.0
    valuation: float = 0.0
    burn_rate: float = 0.0
    runway: Optional[float] = None
    mrr_growth: float = 0.0
    customers: int = 0
    revenue_multiple: float = 0.0
    market_share: float = 0.0

    @property
    def has_unlimited_runway(self) -> bool:
        return self.runway is None


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot published after every successful dispatch."""
    business: Optional[Business] = None

    # Decision queue
    decisions: tuple[Decision, ...] = ()
    decision_history: tuple[ResolvedDecision, ...] = ()

    # Append-only histories
    events: tuple[Event, ...] = ()
    financials: tuple[FinancialRecord, ...] = ()

    competitors: tuple[Competitor, ...] = ()
    mentor_advice: tuple[MentorAdvice, ...] = ()
    metrics: Optional[BusinessMetrics] = None

    # UI state
    selected_decision: Optional[Decision] = None
    time_controls: TimeControls = field(default_factory=TimeControls)
    show_business_setup: bool = False
    show_decision_modal: bool = False
    is_loading: bool = False

    # Explicit random source state
    rng_state: int = 0

    # Incremented on every publish
    version: int = 0

    def get_decision(self, decision_id: UUID) -> Optional[Decision]:
        for decision in self.decisions:
            if decision.id == decision_id:
                return decision
        return None
