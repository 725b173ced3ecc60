"""
Simulation Engine

The moving parts behind a GameStateStore:
- ConsequenceResolver: decision options into effect deltas
- EventGenerator: seeded market, internal, competitor and crisis events
- DecisionCatalog: initial and periodic decisions from templates
- Operating cycle and competitor market model, one simulated month at a time
- SimulationClock: drives the store with ticks under pause/speed controls

All randomness flows through RandomSource from an explicit integer state.
"""

from .random_source import RandomSource, initial_state
from .accounting import apply_effects, check_invariants, financial_record
from .consequences import ConsequenceResolver
from .events import EventGenerator, EventTemplate, EVENT_TEMPLATES
from .decisions import DecisionCatalog, DecisionTemplate, OptionTemplate
from .market import generate_competitors, rebalance, organic_share_growth
from .operations import run_month
from .clock import SimulationClock, ClockState

__all__ = [
    "RandomSource",
    "initial_state",
    "apply_effects",
    "check_invariants",
    "financial_record",
    "ConsequenceResolver",
    "EventGenerator",
    "EventTemplate",
    "EVENT_TEMPLATES",
    "DecisionCatalog",
    "DecisionTemplate",
    "OptionTemplate",
    "generate_competitors",
    "rebalance",
    "organic_share_growth",
    "run_month",
    "SimulationClock",
    "ClockState"
]
