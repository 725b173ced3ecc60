"""
Settings Management with Pydantic

Provides type-safe configuration management with:
- Environment variable support
- Validation
- Separate sections for the economy model, event generation and the clock
"""

from typing import Optional
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EconomyConfig(BaseSettings):
    """Economy model configuration (monthly rates)."""
    model_config = SettingsConfigDict(
        env_prefix="ECONOMY_",
        extra="ignore"
    )

    # Metrics
    metrics_window: int = Field(default=3, ge=1)

    # Market share is a fraction of the total market
    market_share_ceiling: float = Field(default=0.6, gt=0.0, le=1.0)
    saturation_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    # Cadence, in simulated months
    decision_interval_ticks: int = Field(default=3, ge=1)
    advice_interval_ticks: int = Field(default=3, ge=1)
    max_pending_decisions: int = Field(default=6, ge=1)
    max_advice: int = Field(default=3, ge=1)

    # Operating cycle
    base_arpu: float = 40.0
    base_churn_rate: float = 0.05
    base_progress_rate: float = 3.0
    organic_acquisition_rate: float = 4.0
    valuation_convergence: float = Field(default=0.25, ge=0.0, le=1.0)


class EventConfig(BaseSettings):
    """Event generation configuration (per-tick probabilities)."""
    model_config = SettingsConfigDict(
        env_prefix="EVENTS_",
        extra="ignore"
    )

    market_probability: float = Field(default=0.12, ge=0.0, le=1.0)
    internal_probability: float = Field(default=0.10, ge=0.0, le=1.0)
    competitor_probability: float = Field(default=0.06, ge=0.0, le=1.0)
    competitor_growth_weight: float = 5.0
    crisis_probability: float = Field(default=0.03, ge=0.0, le=1.0)
    crisis_distress_weight: float = 0.25
    max_probability: float = Field(default=0.9, ge=0.0, le=1.0)

    # Bounds on a single event's cash impact, as a fraction of current cash
    crisis_max_cash_loss: float = Field(default=0.2, ge=0.0, le=1.0)
    event_max_cash_loss: float = Field(default=0.1, ge=0.0, le=1.0)


class ClockConfig(BaseSettings):
    """Simulation clock configuration."""
    model_config = SettingsConfigDict(
        env_prefix="CLOCK_",
        extra="ignore"
    )

    tick_interval_seconds: float = Field(default=5.0, gt=0.0)
    normal_ticks_per_step: int = Field(default=1, ge=1)
    fast_ticks_per_step: int = Field(default=3, ge=1)


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "Venture Simulator"
    debug: bool = False
    log_level: str = "INFO"

    # Seed for the explicit random source; None draws one at store creation
    random_seed: Optional[int] = None

    # Sub-configurations
    economy: EconomyConfig = Field(default_factory=EconomyConfig)
    events: EventConfig = Field(default_factory=EventConfig)
    clock: ClockConfig = Field(default_factory=ClockConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            economy=EconomyConfig(),
            events=EventConfig(),
            clock=ClockConfig()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
