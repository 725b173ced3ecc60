"""
Store commands.

Every mutation enters GameStateStore.dispatch as one of these. User
intents, clock ticks and persistence loads share the same stream.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from uuid import UUID

from .entities import (
    BusinessType,
    FundingStage,
    Event,
    GameState,
    Speed
)
from .errors import SimulationError


@dataclass(frozen=True)
class CreateBusiness:
    """Found a new business, replacing any existing one."""
    name: str
    business_type: BusinessType
    funding_stage: FundingStage
    funding_amount: Optional[float] = None  # default per funding stage
    business_id: Optional[UUID] = None
    founded_at: Optional[datetime] = None


@dataclass(frozen=True)
class ResolveDecision:
    decision_id: UUID
    option_id: int


@dataclass(frozen=True)
class ApplyEvent:
    event: Event


@dataclass(frozen=True)
class Tick:
    """
    Advance simulated time.

    elapsed_ticks of None uses the current speed. Clock ticks
    (from_clock=True) are discarded while paused; manual ticks are not.
    """
    elapsed_ticks: Optional[int] = None
    from_clock: bool = False

    def __post_init__(self):
        if self.elapsed_ticks is not None and self.elapsed_ticks < 1:
            raise ValueError("elapsed_ticks must be at least 1")


@dataclass(frozen=True)
class SetTimeControls:
    """Change pause state and/or speed; None leaves a field unchanged."""
    is_paused: Optional[bool] = None
    speed: Optional[Speed] = None


@dataclass(frozen=True)
class SelectDecision:
    """Select a pending decision and open the decision modal."""
    decision_id: UUID


@dataclass(frozen=True)
class CloseDecisionModal:
    pass


@dataclass(frozen=True)
class OpenBusinessSetup:
    pass


@dataclass(frozen=True)
class CloseBusinessSetup:
    pass


@dataclass(frozen=True)
class LoadState:
    """Resume a previously saved session as-is."""
    state: GameState


Command = Union[
    CreateBusiness,
    ResolveDecision,
    ApplyEvent,
    Tick,
    SetTimeControls,
    SelectDecision,
    CloseDecisionModal,
    OpenBusinessSetup,
    CloseBusinessSetup,
    LoadState
]


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a dispatch: the current state plus any typed error."""
    state: GameState
    error: Optional[SimulationError] = None
    changed: bool = False
    queued: bool = False  # re-entrant dispatch, runs after the current command

    @property
    def ok(self) -> bool:
        return self.error is None
