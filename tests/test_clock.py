"""Tests for the simulation clock."""

import threading
import time

from venture_sim.core.commands import CreateBusiness
from venture_sim.core.entities import BusinessType, FundingStage, Speed
from venture_sim.simulation.clock import ClockState, SimulationClock


def founded(store):
    store.dispatch(CreateBusiness(
        name="Clockwork",
        business_type=BusinessType.SERVICE,
        funding_stage=FundingStage.ANGEL
    ))
    return store


def wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_state_follows_time_controls(quiet_store):
    clock = SimulationClock(founded(quiet_store))

    assert clock.state == ClockState.PAUSED

    clock.resume()
    assert clock.state == ClockState.RUNNING_NORMAL

    clock.set_speed(Speed.FAST)
    assert clock.state == ClockState.RUNNING_FAST

    clock.pause()
    assert clock.state == ClockState.PAUSED


def test_pause_twice_is_a_noop(quiet_store):
    clock = SimulationClock(founded(quiet_store))
    clock.resume()

    first = clock.pause()
    second = clock.pause()

    assert first.changed
    assert second.ok
    assert not second.changed


def test_step_respects_pause_and_speed(quiet_store):
    clock = SimulationClock(founded(quiet_store))

    clock.step()
    assert quiet_store.state.business.month == 0

    clock.resume()
    clock.step()
    assert quiet_store.state.business.month == 1

    clock.set_speed(Speed.FAST)
    clock.step()
    assert quiet_store.state.business.month == 4


def test_pause_then_resume_changes_nothing(quiet_store):
    clock = SimulationClock(founded(quiet_store))
    business = quiet_store.state.business

    clock.pause()
    clock.resume()
    clock.pause()

    assert quiet_store.state.business is business


def test_background_thread_ticks_until_paused(quiet_store):
    clock = SimulationClock(founded(quiet_store))
    clock.resume()
    clock.start()
    try:
        assert clock.is_running
        assert wait_for(lambda: quiet_store.state.business.month >= 2)

        clock.pause()
        month = quiet_store.state.business.month
        time.sleep(0.05)
        assert quiet_store.state.business.month == month
    finally:
        clock.stop()

    assert not clock.is_running


def test_no_ticks_after_stop(quiet_store):
    clock = SimulationClock(founded(quiet_store))
    clock.resume()
    clock.start()
    assert wait_for(lambda: quiet_store.state.business.month >= 1)

    clock.stop()
    month = quiet_store.state.business.month
    time.sleep(0.05)

    assert quiet_store.state.business.month == month


def test_stop_timeout_keeps_live_thread(quiet_store):
    """Test that start() after a timed-out stop does not spawn a second ticker."""
    clock = SimulationClock(founded(quiet_store))
    entered = threading.Event()
    release = threading.Event()

    def block_clock_thread(state):
        if threading.current_thread().name == "simulation-clock":
            entered.set()
            release.wait(5.0)

    quiet_store.subscribe(block_clock_thread)
    clock.resume()
    clock.start()
    try:
        assert entered.wait(5.0)
        thread = clock._thread

        clock.stop(timeout=0.05)
        assert clock.is_running

        clock.start()
        assert clock._thread is thread
    finally:
        release.set()
        clock.stop()

    assert not clock.is_running
    assert clock._thread is None
