"""
Simulation error taxonomy.

Components raise these; GameStateStore.dispatch converts them into
DispatchResult.error so they never cross the command boundary.
"""

from typing import Optional
from uuid import UUID


class SimulationError(Exception):
    """Base class for all typed simulation failures."""

    @property
    def message(self) -> str:
        return str(self)


class InvalidOptionError(SimulationError):
    """The chosen option id does not exist on the decision."""

    def __init__(self, decision_id: UUID, option_id: int):
        self.decision_id = decision_id
        self.option_id = option_id
        super().__init__(f"Option {option_id} not found on decision {decision_id}")


class InvalidDecisionError(SimulationError):
    """Unknown or already-resolved decision id."""

    def __init__(self, decision_id: UUID, reason: str = "not pending"):
        self.decision_id = decision_id
        self.reason = reason
        super().__init__(f"Decision {decision_id} is {reason}")


class InvalidStateTransitionError(SimulationError):
    """The command is not valid in the current state."""


class InvariantViolation(SimulationError):
    """
    A computed state broke an invariant.

    Internal only; it signals a calculation bug and the mutation that
    produced it is rejected.
    """

    def __init__(self, invariant: str, detail: Optional[str] = None):
        self.invariant = invariant
        self.detail = detail
        text = f"Invariant violated: {invariant}"
        if detail:
            text = f"{text} ({detail})"
        super().__init__(text)


class CommandFailedError(SimulationError):
    """A handler raised something other than a SimulationError."""

    def __init__(self, command: str, cause: Exception):
        self.command = command
        self.cause = cause
        super().__init__(f"{command} failed: {type(cause).__name__}: {cause}")
