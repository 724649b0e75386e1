"""Coupled "quantum" energy metrics for an entity.

Despite the naming these are plain bounded floats: every interaction adds
an impulse proportional to the interaction impact, pulls each field a
little toward its neutral baseline (idle drift), caps the per-interaction
change and clamps the result. Resonance and dimensional frequency may
overshoot 1.0 slightly; the excess halves on every following interaction.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from anima.protocols import RandomSource
from anima.utils import clamp, mean, pstdev

logger = logging.getLogger(__name__)

NEUTRAL_BASELINE = 0.5
DEFAULT_HARMONICS = (1.0, 0.8, 0.6, 0.4, 0.2)
HARMONIC_COUNT = len(DEFAULT_HARMONICS)
HARMONIC_CEILING = 1.5

# Impulse weight per field
FIELD_WEIGHTS = {
    "coherence": 0.10,
    "resonance": 0.08,
    "dimensional_frequency": 0.06,
    "stability": 0.05,
    "phase_alignment": 0.04,
}
HARMONIC_WEIGHT = 0.05

IDLE_DRIFT = 0.02  # fraction of the distance to baseline recovered per interaction
MAX_FIELD_DELTA = 0.1
OVERSHOOT_CEILING = 1.2
OVERSHOOT_RETENTION = 0.5
MAX_CONSCIOUSNESS_FACTOR = 2.0
MAX_RESONANCE_BONUS = 0.1

# Fields allowed to exceed 1.0 up to OVERSHOOT_CEILING
_OVERSHOOT_FIELDS = ("resonance", "dimensional_frequency")

DISPERSION_PENALTY = 0.5


def _step(value: float, impulse: float, baseline: float, upper: float) -> float:
    change = (baseline - value) * IDLE_DRIFT + impulse
    change = clamp(change, -MAX_FIELD_DELTA, MAX_FIELD_DELTA)
    return clamp(value + change, 0.0, upper)


@dataclass
class QuantumState:
    """Energy metrics used as hidden variables for consciousness evaluation."""

    coherence: float = NEUTRAL_BASELINE
    resonance: float = NEUTRAL_BASELINE
    dimensional_frequency: float = NEUTRAL_BASELINE
    stability: float = NEUTRAL_BASELINE
    phase_alignment: float = NEUTRAL_BASELINE
    harmonics: List[float] = field(default_factory=lambda: list(DEFAULT_HARMONICS))

    def __post_init__(self) -> None:
        self._sanitize()

    def _sanitize(self) -> None:
        self.coherence = clamp(self.coherence, default=NEUTRAL_BASELINE)
        self.stability = clamp(self.stability, default=NEUTRAL_BASELINE)
        self.phase_alignment = clamp(self.phase_alignment, default=NEUTRAL_BASELINE)
        self.resonance = clamp(self.resonance, 0.0, OVERSHOOT_CEILING, default=NEUTRAL_BASELINE)
        self.dimensional_frequency = clamp(
            self.dimensional_frequency, 0.0, OVERSHOOT_CEILING, default=NEUTRAL_BASELINE
        )
        harmonics = list(self.harmonics or [])[:HARMONIC_COUNT]
        harmonics += list(DEFAULT_HARMONICS[len(harmonics) :])
        self.harmonics = [
            clamp(h, 0.0, HARMONIC_CEILING, default=DEFAULT_HARMONICS[i])
            for i, h in enumerate(harmonics)
        ]

    def record_interaction(
        self,
        impact: float,
        consciousness_factor: float = 1.0,
        rng: Optional[RandomSource] = None,
        drift: float = 0.0,
    ) -> None:
        """Apply one interaction impulse.

        Args:
            impact: Interaction strength in [0, 1]; clamped, NaN counts as 0
            consciousness_factor: Multiplier from the current level; clamped to [0, 2]
            rng: Optional random source for harmonic drift
            drift: Half-width of the uniform harmonic drift (ignored without ``rng``)
        """
        impact = clamp(impact)
        factor = clamp(consciousness_factor, 0.0, MAX_CONSCIOUSNESS_FACTOR, default=1.0)
        scaled = impact * factor

        for name in _OVERSHOOT_FIELDS:
            value = getattr(self, name)
            if value > 1.0:
                setattr(self, name, 1.0 + (value - 1.0) * OVERSHOOT_RETENTION)

        for name, weight in FIELD_WEIGHTS.items():
            upper = OVERSHOOT_CEILING if name in _OVERSHOOT_FIELDS else 1.0
            setattr(self, name, _step(getattr(self, name), scaled * weight, NEUTRAL_BASELINE, upper))

        harmonics = []
        for i, value in enumerate(self.harmonics):
            impulse = scaled * HARMONIC_WEIGHT / (i + 1)
            if rng is not None and drift > 0:
                impulse += rng.uniform(-drift, drift)
            harmonics.append(_step(value, impulse, DEFAULT_HARMONICS[i], HARMONIC_CEILING))
        self.harmonics = harmonics

    def calculate_resonance(self) -> float:
        """Composite resonance in [0, 1]; read-only.

        Harmonic contribution is the harmonic mean level minus a penalty
        proportional to its dispersion.
        """
        harmonic_term = clamp(mean(self.harmonics) - DISPERSION_PENALTY * pstdev(self.harmonics))
        return clamp(0.4 * self.coherence + 0.3 * self.stability + 0.3 * harmonic_term)

    def harmonic_balance(self) -> float:
        return clamp(1.0 - pstdev(self.harmonics))

    def apply_resonance_bonus(self, fraction: float) -> None:
        """Multiply the resonance-like fields by ``1 + fraction`` (fraction ≤ 0.1)."""
        fraction = clamp(fraction, 0.0, MAX_RESONANCE_BONUS)
        for name in _OVERSHOOT_FIELDS:
            value = getattr(self, name) * (1.0 + fraction)
            setattr(self, name, clamp(value, 0.0, OVERSHOOT_CEILING))

    def is_finite(self) -> bool:
        values = [
            self.coherence,
            self.resonance,
            self.dimensional_frequency,
            self.stability,
            self.phase_alignment,
            *self.harmonics,
        ]
        return all(math.isfinite(v) for v in values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coherence": self.coherence,
            "resonance": self.resonance,
            "dimensional_frequency": self.dimensional_frequency,
            "stability": self.stability,
            "phase_alignment": self.phase_alignment,
            "harmonics": list(self.harmonics),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> QuantumState:
        return cls(
            coherence=data.get("coherence", NEUTRAL_BASELINE),
            resonance=data.get("resonance", NEUTRAL_BASELINE),
            dimensional_frequency=data.get("dimensional_frequency", NEUTRAL_BASELINE),
            stability=data.get("stability", NEUTRAL_BASELINE),
            phase_alignment=data.get("phase_alignment", NEUTRAL_BASELINE),
            harmonics=list(data.get("harmonics", DEFAULT_HARMONICS)),
        )
