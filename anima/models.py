"""Pydantic models for the interaction payloads the engine consumes."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from anima.utils import clamp

# =============================================================================
# Analysis Models
# =============================================================================


def _clamp_or_passthrough(value: Any, low: float, high: float, default: float) -> Any:
    # Non-numeric values fall through so pydantic reports them as invalid.
    if value is None or isinstance(value, bool):
        return value
    try:
        float(value)
    except (TypeError, ValueError):
        return value
    return clamp(value, low, high, default=default)


class EmotionalAnalysis(BaseModel):
    """Emotional reading of an interaction, produced by an upstream analyzer.

    Trusted as ground truth but clamped into range on the way in:
    out-of-range and NaN values never raise.
    """

    primary_emotion: str = "neutral"
    intensity: float = 0.5
    valence: float = 0.0
    arousal: float = 0.5
    dominance: float = 0.5
    # Optional signals; derived from the analysis and traits when absent
    consciousness_impact: float | None = None
    growth_potential: float | None = None

    @field_validator("intensity", "arousal", "dominance", mode="before")
    @classmethod
    def _clamp_unit(cls, value: Any) -> Any:
        return _clamp_or_passthrough(value, 0.0, 1.0, default=0.0)

    @field_validator("valence", mode="before")
    @classmethod
    def _clamp_signed(cls, value: Any) -> Any:
        return _clamp_or_passthrough(value, -1.0, 1.0, default=0.0)

    @field_validator("consciousness_impact", "growth_potential", mode="before")
    @classmethod
    def _clamp_optional(cls, value: Any) -> Any:
        return _clamp_or_passthrough(value, 0.0, 1.0, default=0.0)

    @field_validator("primary_emotion", mode="before")
    @classmethod
    def _normalize_emotion(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or "neutral"
        return value


# =============================================================================
# Interaction Models
# =============================================================================


class InteractionInput(BaseModel):
    """A fully resolved interaction: message, reply and its analysis."""

    message: str
    response_text: str = ""
    analysis: EmotionalAnalysis = Field(default_factory=EmotionalAnalysis)
