#!/usr/bin/env python3
"""
Venture Simulator - Main Demo

This script runs a short, seeded session against a GameStateStore:
1. Founds a tech startup
2. Resolves the initial decisions
3. Advances a year of simulated months, resolving decisions as they arrive
4. Prints the resulting metrics, events and mentor advice
5. Saves and reloads the session through the snapshot repository
"""

from venture_sim.config import Settings, setup_logging
from venture_sim.core import (
    BusinessType,
    CreateBusiness,
    FundingStage,
    LoadState,
    ResolveDecision,
    SetTimeControls,
    Speed,
    Tick
)
from venture_sim.persistence import InMemorySnapshotRepository
from venture_sim.simulation import SimulationClock
from venture_sim.store import GameStateStore


def format_money(value: float) -> str:
    return f"${value:,.0f}"


def print_business(store: GameStateStore) -> None:
    state = store.state
    business = state.business
    metrics = state.metrics

    runway = "unlimited" if metrics.runway is None else f"{metrics.runway:.1f} months"
    print(f"  Month {business.month} (Year {business.year}, Q{business.quarter})")
    print(f"  {'Cash:':<20} {format_money(business.cash)}")
    print(f"  {'Monthly revenue:':<20} {format_money(business.revenue)}")
    print(f"  {'Monthly expenses:':<20} {format_money(business.expenses)}")
    print(f"  {'Customers:':<20} {business.customers}")
    print(f"  {'Employees:':<20} {business.employees}")
    print(f"  {'Product progress:':<20} {business.product_progress:.0f}%")
    print(f"  {'Market share:':<20} {business.market_share * 100:.2f}%")
    print(f"  {'Valuation:':<20} {format_money(business.valuation)}")
    print(f"  {'Burn rate:':<20} {format_money(metrics.burn_rate)}/month")
    print(f"  {'Runway:':<20} {runway}")
    print(f"  {'MRR growth:':<20} {metrics.mrr_growth:+.1f}%")


def resolve_pending(store: GameStateStore) -> None:
    """Resolve every pending decision with its first option."""
    for decision in store.state.decisions:
        option = decision.options[0]
        result = store.dispatch(ResolveDecision(decision.id, option.id))
        if result.ok:
            print(f"  [{decision.type.value}] {decision.title} -> {option.label}")
        else:
            print(f"  [{decision.type.value}] {decision.title} failed: {result.error}")


def run_simulation_demo():
    """Run a seeded year of simulation."""
    print("=" * 60)
    print("VENTURE SIMULATOR - SIMULATION DEMO")
    print("=" * 60)
    print()

    settings = Settings(random_seed=42)
    store = GameStateStore(settings)
    clock = SimulationClock(store)

    store.dispatch(CreateBusiness(
        name="Acme Analytics",
        business_type=BusinessType.TECH,
        funding_stage=FundingStage.SEED
    ))

    print("Business founded:")
    print_business(store)
    print()

    print("Mentor says:")
    for advice in store.state.mentor_advice:
        print(f"  - {advice.title}: {advice.content}")
    print()

    print("Initial decisions:")
    resolve_pending(store)
    print()

    # Run the clock by hand; fast speed advances three months per step
    clock.resume()
    clock.set_speed(Speed.FAST)
    print(f"Clock: {clock.state.value}")
    print()

    for quarter in range(1, 5):
        clock.step()
        print(f"Quarter {quarter} decisions:")
        resolve_pending(store)
        print()

    clock.pause()
    store.dispatch(SetTimeControls(speed=Speed.NORMAL))

    print("=" * 60)
    print("AFTER ONE YEAR")
    print("=" * 60)
    print_business(store)
    print()

    print("Events:")
    for event in store.state.events:
        print(f"  Month {event.month:>2} [{event.type.value}] {event.title}")
    print()

    print("Mentor advice:")
    for advice in store.state.mentor_advice[-3:]:
        print(f"  - {advice.title}: {advice.content}")
    print()

    print("Competitors:")
    for competitor in store.state.competitors:
        print(f"  {competitor.name:<20} {competitor.market_share * 100:.1f}%")
    print()

    return store


def run_persistence_demo(store: GameStateStore):
    """Save the session and resume it in a fresh store."""
    print("=" * 60)
    print("PERSISTENCE DEMO")
    print("=" * 60)
    print()

    repository = InMemorySnapshotRepository()
    repository.save(store.state)
    print(f"Saved snapshot for {store.state.business.name}")

    restored = GameStateStore(store.settings)
    snapshot = repository.load(store.state.business.id)
    restored.dispatch(LoadState(snapshot))
    print(f"Restored at month {restored.state.business.month} "
          f"with {len(restored.state.financials)} ledger records")

    restored.dispatch(Tick(elapsed_ticks=1))
    print(f"Advanced restored session to month {restored.state.business.month}")
    print()


def main():
    """Main entry point."""
    setup_logging("WARNING")

    store = run_simulation_demo()
    run_persistence_demo(store)

    print("=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
