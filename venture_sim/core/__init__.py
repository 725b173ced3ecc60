"""Core domain model: entities, commands and errors."""

from .entities import (
    BusinessType,
    FundingStage,
    DecisionType,
    Urgency,
    EventType,
    Speed,
    MentorAdviceType,
    RecordSource,
    EffectKind,
    Effects,
    Business,
    OptionMetrics,
    DecisionOption,
    Decision,
    DecisionConsequence,
    ResolvedDecision,
    Event,
    Competitor,
    MentorAdvice,
    FinancialRecord,
    TimeControls,
    BusinessMetrics,
    GameState
)
from .errors import (
    SimulationError,
    InvalidOptionError,
    InvalidDecisionError,
    InvalidStateTransitionError,
    InvariantViolation,
    CommandFailedError
)
from .commands import (
    Command,
    CreateBusiness,
    ResolveDecision,
    ApplyEvent,
    Tick,
    SetTimeControls,
    SelectDecision,
    CloseDecisionModal,
    OpenBusinessSetup,
    CloseBusinessSetup,
    LoadState,
    DispatchResult
)

__all__ = [
    "BusinessType",
    "FundingStage",
    "DecisionType",
    "Urgency",
    "EventType",
    "Speed",
    "MentorAdviceType",
    "RecordSource",
    "EffectKind",
    "Effects",
    "Business",
    "OptionMetrics",
    "DecisionOption",
    "Decision",
    "DecisionConsequence",
    "ResolvedDecision",
    "Event",
    "Competitor",
    "MentorAdvice",
    "FinancialRecord",
    "TimeControls",
    "BusinessMetrics",
    "GameState",
    "SimulationError",
    "InvalidOptionError",
    "InvalidDecisionError",
    "InvalidStateTransitionError",
    "InvariantViolation",
    "CommandFailedError",
    "Command",
    "CreateBusiness",
    "ResolveDecision",
    "ApplyEvent",
    "Tick",
    "SetTimeControls",
    "SelectDecision",
    "CloseDecisionModal",
    "OpenBusinessSetup",
    "CloseBusinessSetup",
    "LoadState",
    "DispatchResult"
]
