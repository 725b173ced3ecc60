"""
Simulation Clock

Advances simulated time by submitting Tick commands to the store. The
clock holds no game state of its own: pause and speed live in the
store's TimeControls and change only through SetTimeControls commands,
so they are serialized with every other mutation.

Speed scales simulated time, not wall-clock time. A fast step advances
several months per interval.
"""

from enum import Enum
from typing import Optional
import logging
import threading

from ..config.settings import ClockConfig
from ..core.commands import DispatchResult, SetTimeControls, Tick
from ..core.entities import Speed

logger = logging.getLogger(__name__)


class ClockState(Enum):
    """Clock states derived from TimeControls."""
    PAUSED = "paused"
    RUNNING_NORMAL = "running_normal"
    RUNNING_FAST = "running_fast"


class SimulationClock:
    """
    Drives a GameStateStore with periodic clock ticks.

    start() runs a daemon thread that submits Tick(from_clock=True) every
    `tick_interval_seconds`. The store drops clock ticks while paused, so
    no tick lands after pause() returns.
    """

    def __init__(self, store, config: ClockConfig = None):
        self.store = store
        self.config = config or store.settings.clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> ClockState:
        controls = self.store.state.time_controls
        if controls.is_paused:
            return ClockState.PAUSED
        if controls.speed == Speed.FAST:
            return ClockState.RUNNING_FAST
        return ClockState.RUNNING_NORMAL

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def pause(self) -> DispatchResult:
        return self.store.dispatch(SetTimeControls(is_paused=True))

    def resume(self) -> DispatchResult:
        return self.store.dispatch(SetTimeControls(is_paused=False))

    def set_speed(self, speed: Speed) -> DispatchResult:
        return self.store.dispatch(SetTimeControls(speed=speed))

    def step(self) -> DispatchResult:
        """Submit one clock tick synchronously."""
        result = self.store.dispatch(Tick(from_clock=True))
        if not result.ok:
            logger.warning("Clock tick failed: %s", result.error)
        return result

    def start(self) -> None:
        """Start the background tick thread."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="simulation-clock", daemon=True
        )
        self._thread.start()
        logger.info("Clock started, interval %.2fs", self.config.tick_interval_seconds)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the tick thread and wait for it to exit."""
        self._stop.set()
        if self._thread is None:
            return
        self._thread.join(timeout)
        if self._thread.is_alive():
            # Kept so start() cannot clear the stop flag under a live thread
            logger.warning("Clock thread still running after %.2fs", timeout)
            return
        self._thread = None
        logger.info("Clock stopped")

    def _run(self) -> None:
        while not self._stop.wait(self.config.tick_interval_seconds):
            try:
                self.step()
            except Exception:
                # A failed tick never stops the clock
                logger.exception("Unexpected error during clock tick")
