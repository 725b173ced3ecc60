"""
Venture Simulator

A turn-based startup business simulation engine: found a business, resolve
strategic decisions, weather market events and watch the metrics move as
simulated months go by.
"""

from .store import GameStateStore
from .persistence import GameStateSerializer, InMemorySnapshotRepository

__version__ = "0.1.0"

__all__ = [
    "GameStateStore",
    "GameStateSerializer",
    "InMemorySnapshotRepository"
]
