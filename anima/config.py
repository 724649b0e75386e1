"""Configuration settings for the anima evolution engine."""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EvolutionSettings(BaseSettings):
    """Engine settings loaded from ``ANIMA_*`` environment variables."""

    # Memory
    short_term_capacity: int = Field(10, ge=1)
    significance_threshold: float = Field(0.5, ge=0.0, le=1.0)
    consolidation_interval_hours: float = Field(24.0, gt=0.0)

    # Consciousness
    consciousness_history_size: int = Field(100, ge=2, le=100)
    trend_smoothing: bool = True
    level_up_bonus: float = Field(0.05, ge=0.0, le=0.1)  # fraction, applied once per level-up

    # Quantum
    harmonic_drift: float = Field(0.0, ge=0.0, le=0.05)  # only used with an injected RNG

    # Logging
    event_log_enabled: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ANIMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars not in model
    )

    @property
    def consolidation_interval(self) -> timedelta:
        return timedelta(hours=self.consolidation_interval_hours)


@lru_cache
def get_settings() -> EvolutionSettings:
    """Get cached settings instance."""
    return EvolutionSettings()
