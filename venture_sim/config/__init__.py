"""
Configuration Management

Centralized configuration for:
- Economy model rates and cadences
- Event generation probabilities and bounds
- Simulation clock timing
- Logging
"""

from .settings import (
    Settings,
    EconomyConfig,
    EventConfig,
    ClockConfig,
    get_settings
)
from .logging_config import setup_logging

__all__ = [
    "Settings",
    "EconomyConfig",
    "EventConfig",
    "ClockConfig",
    "get_settings",
    "setup_logging"
]
