"""
Game State Store

Single source of truth for a simulation session. Every mutation (user
intents, clock ticks, persistence loads) enters through dispatch() as a
command and is applied by exactly one writer:

- Commands are serialized by one re-entrant lock and a FIFO queue.
  Commands dispatched from subscriber callbacks are queued and run after
  the current command, in submission order.
- Each handler builds a complete new GameState. Invariants are checked
  before the state is swapped in, so a failing command never leaves a
  partial mutation behind.
- Typed SimulationErrors come back in DispatchResult.error and are never
  raised across dispatch. Any other exception is logged and returned as a
  CommandFailedError.
- Subscribers receive every published (frozen) GameState.
"""

from collections import deque
from dataclasses import replace
from typing import Callable, Optional
import logging
import threading

from .config.settings import Settings, get_settings
from .core.commands import (
    ApplyEvent,
    CloseBusinessSetup,
    CloseDecisionModal,
    Command,
    CreateBusiness,
    DispatchResult,
    LoadState,
    OpenBusinessSetup,
    ResolveDecision,
    SelectDecision,
    SetTimeControls,
    Tick
)
from .core.entities import (
    Business,
    Decision,
    Effects,
    FundingStage,
    GameState,
    RecordSource,
    ResolvedDecision,
    Speed,
    TimeControls,
    Urgency
)
from .core.errors import (
    CommandFailedError,
    InvalidDecisionError,
    InvalidStateTransitionError,
    InvariantViolation,
    SimulationError
)
from .metrics.advisor import MentorAdvisor
from .metrics.calculator import MetricsCalculator
from .simulation.accounting import apply_effects, check_invariants, financial_record
from .simulation.consequences import ConsequenceResolver
from .simulation.decisions import DecisionCatalog
from .simulation.events import EventGenerator
from .simulation.market import generate_competitors, rebalance
from .simulation.operations import run_month
from .simulation.random_source import RandomSource, initial_state

logger = logging.getLogger(__name__)

Subscriber = Callable[[GameState], None]

# Starting capital when CreateBusiness gives no amount
DEFAULT_FUNDING = {
    FundingStage.BOOTSTRAPPED: 50000.0,
    FundingStage.ANGEL: 250000.0,
    FundingStage.SEED: 500000.0,
    FundingStage.SERIES_A: 2000000.0,
    FundingStage.SERIES_B: 10000000.0
}

# Monthly expenses as a fraction of starting capital
INITIAL_BURN_FRACTION = 0.05
INITIAL_VALUATION_MULTIPLE = 4.0

# Mentor advice kept on the state, newest last
ADVICE_HISTORY = 20

# Dropped first when the pending queue is over its cap
DROP_ORDER = (Urgency.LOW, Urgency.NORMAL, Urgency.URGENT)


class GameStateStore:
    """
    Serializes commands against one session's GameState.

    All collaborators are explicit constructor arguments; defaults are
    built from settings.
    """

    def __init__(
        self,
        settings: Settings = None,
        resolver: ConsequenceResolver = None,
        event_generator: EventGenerator = None,
        metrics: MetricsCalculator = None,
        catalog: DecisionCatalog = None,
        advisor: MentorAdvisor = None,
        state: GameState = None
    ):
        self.settings = settings or get_settings()
        economy = self.settings.economy

        self.resolver = resolver or ConsequenceResolver(
            market_share_ceiling=economy.market_share_ceiling,
            saturation_threshold=economy.saturation_threshold
        )
        self.event_generator = event_generator or EventGenerator(self.settings.events)
        self.metrics = metrics or MetricsCalculator(window=economy.metrics_window)
        self.catalog = catalog or DecisionCatalog()
        self.advisor = advisor or MentorAdvisor(max_advice=economy.max_advice)

        self._state = state or GameState(
            show_business_setup=True,
            rng_state=initial_state(self.settings.random_seed)
        )

        self._lock = threading.RLock()
        self._queue: deque = deque()
        self._dispatching = False
        self._subscribers: list[Subscriber] = []

        self._handlers = {
            CreateBusiness: self._create_business,
            ResolveDecision: self._resolve_decision,
            ApplyEvent: self._apply_event,
            Tick: self._tick,
            SetTimeControls: self._set_time_controls,
            SelectDecision: self._select_decision,
            CloseDecisionModal: self._close_decision_modal,
            OpenBusinessSetup: self._open_business_setup,
            CloseBusinessSetup: self._close_business_setup,
            LoadState: self._load_state
        }

    @property
    def state(self) -> GameState:
        """The last published state."""
        return self._state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for published states; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def dispatch(self, command: Command) -> DispatchResult:
        """
        Apply a command.

        Re-entrant calls (from a subscriber) are queued and return
        DispatchResult(queued=True); they run once the current command
        has been published.
        """
        with self._lock:
            if self._dispatching:
                self._queue.append(command)
                return DispatchResult(state=self._state, queued=True)

            self._dispatching = True
            try:
                result = self._execute(command)
                while self._queue:
                    queued = self._queue.popleft()
                    try:
                        self._execute(queued)
                    except TypeError:
                        logger.exception("Dropped queued %s", type(queued).__name__)
            finally:
                # Nothing queued by this dispatch outlives it
                self._queue.clear()
                self._dispatching = False
            return result

    # ========================================================================
    # Dispatch internals
    # ========================================================================

    def _execute(self, command: Command) -> DispatchResult:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command: {type(command).__name__}")

        name = type(command).__name__
        try:
            new_state = handler(self._state, command)
            if new_state is not None:
                self._validate(new_state)
        except InvariantViolation as e:
            logger.error("Rejected %s: %s", name, e)
            return DispatchResult(state=self._state, error=e)
        except SimulationError as e:
            logger.warning("Command %s failed: %s", name, e)
            return DispatchResult(state=self._state, error=e)
        except Exception as e:
            logger.exception("Command %s raised unexpectedly", name)
            return DispatchResult(state=self._state, error=CommandFailedError(name, e))

        if new_state is None:
            logger.debug("Command %s was a no-op", name)
            return DispatchResult(state=self._state)

        self._state = replace(new_state, version=self._state.version + 1)
        logger.debug("Applied %s, version %d", name, self._state.version)
        self._publish(self._state)
        return DispatchResult(state=self._state, changed=True)

    def _validate(self, state: GameState) -> None:
        if state.business is not None:
            check_invariants(state.business)

    def _publish(self, state: GameState) -> None:
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("Subscriber %r failed", callback)

    def _require_business(self, state: GameState, action: str) -> Business:
        if state.business is None:
            raise InvalidStateTransitionError(f"Cannot {action} without an active business")
        return state.business

    def _with_metrics(self, state: GameState) -> GameState:
        if state.business is None:
            return replace(state, metrics=None)
        return replace(
            state,
            metrics=self.metrics.calculate(state.business, state.financials)
        )

    # ========================================================================
    # Handlers: each returns a new GameState, or None for a no-op
    # ========================================================================

    def _create_business(self, state: GameState, command: CreateBusiness) -> GameState:
        capital = command.funding_amount
        if capital is None:
            capital = DEFAULT_FUNDING[command.funding_stage]
        if capital < 0:
            raise InvalidStateTransitionError("Funding amount cannot be negative")

        source = RandomSource(state.rng_state)
        business = Business(
            id=command.business_id or source.uuid(),
            name=command.name,
            business_type=command.business_type,
            funding_stage=command.funding_stage,
            initial_capital=capital,
            cash=capital,
            expenses=capital * INITIAL_BURN_FRACTION,
            valuation=capital * INITIAL_VALUATION_MULTIPLE,
            founded_at=command.founded_at
        )
        competitors = generate_competitors(business, source)
        decisions, rng_state = self.catalog.initial_decisions(business, source.next_state())

        setup = financial_record(business, business_delta(business), RecordSource.SETUP)

        logger.info(
            "Created business %s (%s, %s) with %.0f capital",
            business.name, business.business_type.value,
            business.funding_stage.value, capital
        )

        # Replaces any previous session; only the clock controls carry over
        return self._with_metrics(GameState(
            business=business,
            decisions=decisions,
            financials=(setup,),
            competitors=competitors,
            mentor_advice=self.advisor.welcome(business),
            time_controls=state.time_controls,
            rng_state=rng_state
        ))

    def _resolve_decision(self, state: GameState, command: ResolveDecision) -> GameState:
        business = self._require_business(state, "resolve a decision")

        decision = state.get_decision(command.decision_id)
        if decision is None:
            resolved = any(r.decision.id == command.decision_id for r in state.decision_history)
            raise InvalidDecisionError(
                command.decision_id, "already resolved" if resolved else "unknown"
            )

        consequence = self.resolver.resolve(decision, command.option_id, business)
        updated, applied = apply_effects(
            business, consequence.effects, self.settings.economy.market_share_ceiling
        )

        financials = state.financials
        if consequence.effects.touches_financials:
            financials = financials + (financial_record(
                updated, applied, RecordSource.DECISION,
                source_id=decision.id, sequence=len(financials)
            ),)

        history_entry = ResolvedDecision(
            decision=decision,
            consequence=consequence,
            applied_effects=applied,
            resolved_month=updated.month
        )

        selected = state.selected_decision
        if selected is not None and selected.id == decision.id:
            selected = None

        logger.info("Resolved decision '%s' with option %d", decision.title, command.option_id)

        return self._with_metrics(replace(
            state,
            business=updated,
            decisions=tuple(d for d in state.decisions if d.id != decision.id),
            decision_history=state.decision_history + (history_entry,),
            financials=financials,
            competitors=rebalance(state.competitors, updated.market_share),
            selected_decision=selected,
            show_decision_modal=False
        ))

    def _apply_event(self, state: GameState, command: ApplyEvent) -> GameState:
        business = self._require_business(state, "apply an event")
        event = command.event

        updated, applied = apply_effects(
            business, event.effects, self.settings.economy.market_share_ceiling
        )

        financials = state.financials
        if event.effects.touches_financials:
            financials = financials + (financial_record(
                updated, applied, RecordSource.EVENT,
                source_id=event.id, sequence=len(financials)
            ),)

        logger.info("Applied event '%s' (%s)", event.title, event.type.value)

        return self._with_metrics(replace(
            state,
            business=updated,
            events=state.events + (event,),
            financials=financials,
            competitors=rebalance(state.competitors, updated.market_share)
        ))

    def _tick(self, state: GameState, command: Tick) -> Optional[GameState]:
        if command.from_clock and state.time_controls.is_paused:
            # A clock tick that raced a pause is dropped
            return None

        start = self._require_business(state, "advance time")
        economy = self.settings.economy
        ceiling = economy.market_share_ceiling

        elapsed = command.elapsed_ticks or self._months_per_step(state.time_controls.speed)

        # Operating cycle, one ledger record per month
        business = start
        financials = list(state.financials)
        for _ in range(elapsed):
            operating = run_month(business, economy)
            business, applied = apply_effects(
                replace(business, month=business.month + 1), operating, ceiling
            )
            financials.append(financial_record(
                business, applied, RecordSource.OPERATIONS, sequence=len(financials)
            ))

        # Exogenous events, each applied in isolation
        try:
            events, rng_state = self.event_generator.tick(
                business, elapsed, state.rng_state,
                market_share_growth=business.market_share - start.market_share
            )
        except Exception:
            logger.exception("Event generation failed at month %d", business.month)
            events, rng_state = (), state.rng_state
        applied_events = []
        for event in events:
            try:
                candidate, applied = apply_effects(business, event.effects, ceiling)
                check_invariants(candidate)
            except InvariantViolation as e:
                logger.warning("Dropped event '%s': %s", event.title, e)
                continue

            business = candidate
            applied_events.append(event)
            if event.effects.touches_financials:
                financials.append(financial_record(
                    business, applied, RecordSource.EVENT,
                    source_id=event.id, sequence=len(financials)
                ))

        applied_events.extend(self.event_generator.milestones(start, business))

        # Periodic decisions
        decisions = state.decisions
        selected = state.selected_decision
        if crossed_interval(start.month, business.month, economy.decision_interval_ticks):
            new_decisions, rng_state = self.catalog.periodic_decisions(business, rng_state)
            decisions = self._cap_pending(decisions + new_decisions)
            if selected is not None and selected not in decisions:
                selected = None

        updated = self._with_metrics(replace(
            state,
            business=business,
            decisions=decisions,
            events=state.events + tuple(applied_events),
            financials=tuple(financials),
            competitors=rebalance(state.competitors, business.market_share),
            selected_decision=selected,
            show_decision_modal=state.show_decision_modal and selected is not None,
            rng_state=rng_state
        ))

        # Mentor advice on the refreshed metrics
        if crossed_interval(start.month, business.month, economy.advice_interval_ticks):
            advice = self.advisor.advise(business, updated.metrics)
            if advice:
                updated = replace(
                    updated,
                    mentor_advice=(updated.mentor_advice + advice)[-ADVICE_HISTORY:]
                )

        logger.debug(
            "Tick advanced %d month(s) to month %d with %d event(s)",
            elapsed, business.month, len(applied_events)
        )
        return updated

    def _months_per_step(self, speed: Speed) -> int:
        clock = self.settings.clock
        if speed == Speed.FAST:
            return clock.fast_ticks_per_step
        return clock.normal_ticks_per_step

    def _cap_pending(self, decisions: tuple[Decision, ...]) -> tuple[Decision, ...]:
        limit = self.settings.economy.max_pending_decisions
        pending = list(decisions)
        for urgency in DROP_ORDER:
            while len(pending) > limit:
                oldest = next((d for d in pending if d.urgency == urgency), None)
                if oldest is None:
                    break
                pending.remove(oldest)
                logger.info("Dropped pending decision '%s'", oldest.title)
        return tuple(pending)

    def _set_time_controls(self, state: GameState, command: SetTimeControls) -> Optional[GameState]:
        current = state.time_controls
        controls = TimeControls(
            is_paused=current.is_paused if command.is_paused is None else command.is_paused,
            speed=current.speed if command.speed is None else command.speed
        )
        if controls == current:
            return None

        logger.info(
            "Time controls: %s at %s speed",
            "paused" if controls.is_paused else "running", controls.speed.value
        )
        return replace(state, time_controls=controls)

    def _select_decision(self, state: GameState, command: SelectDecision) -> Optional[GameState]:
        self._require_business(state, "select a decision")
        decision = state.get_decision(command.decision_id)
        if decision is None:
            raise InvalidDecisionError(command.decision_id)

        if state.selected_decision == decision and state.show_decision_modal:
            return None
        return replace(state, selected_decision=decision, show_decision_modal=True)

    def _close_decision_modal(self, state: GameState, command: CloseDecisionModal) -> Optional[GameState]:
        if not state.show_decision_modal and state.selected_decision is None:
            return None
        return replace(state, selected_decision=None, show_decision_modal=False)

    def _open_business_setup(self, state: GameState, command: OpenBusinessSetup) -> Optional[GameState]:
        if state.show_business_setup:
            return None
        return replace(state, show_business_setup=True)

    def _close_business_setup(self, state: GameState, command: CloseBusinessSetup) -> Optional[GameState]:
        if not state.show_business_setup:
            return None
        return replace(state, show_business_setup=False)

    def _load_state(self, state: GameState, command: LoadState) -> GameState:
        loaded = command.state
        if loaded.business is not None:
            logger.info("Loaded session for %s at month %d", loaded.business.name, loaded.business.month)
        return self._with_metrics(replace(loaded, is_loading=False))


def business_delta(business: Business) -> Effects:
    """The founding capital and revenue as a delta from nothing."""
    return Effects(cash=business.cash, revenue=business.revenue)


def crossed_interval(before: int, after: int, interval: int) -> bool:
    """True if a multiple of `interval` lies in (before, after]."""
    return after // interval > before // interval
