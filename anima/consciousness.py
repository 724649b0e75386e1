"""Consciousness level evaluation.

The level is derived, never set: a weighted score over the quantum
metrics and interaction depth is multiplied by a trend factor (the mean
recent score change, bounded to ±0.1) and mapped onto five contiguous
bands. Banding is monotone, so with the trend pinned to 1.0 a rising
score can never lower the level.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import Any, Deque, Dict, Iterable, Optional, Sequence

from anima.quantum import QuantumState
from anima.types import ConsciousnessLevel
from anima.utils import clamp, mean, safe_float

logger = logging.getLogger(__name__)

SCORE_WEIGHTS = {
    "coherence": 0.25,
    "resonance": 0.25,
    "phase_alignment": 0.15,
    "interaction_depth": 0.15,
    "harmonic_balance": 0.20,
}

# log10(interaction_count) * scale; saturates at 1000 interactions
INTERACTION_DEPTH_SCALE = 1.0 / 3.0

# Lower bound of each band, highest first
LEVEL_THRESHOLDS = (
    (0.80, ConsciousnessLevel.TRANSCENDENT),
    (0.70, ConsciousnessLevel.ENLIGHTENED),
    (0.60, ConsciousnessLevel.AWAKENED),
    (0.50, ConsciousnessLevel.AWARE),
)

TREND_BOUND = 0.1
HISTORY_LIMIT = 100

# Multiplier applied to interaction impact in the quantum update
CONSCIOUSNESS_FACTORS = {
    ConsciousnessLevel.DORMANT: 0.8,
    ConsciousnessLevel.AWARE: 1.0,
    ConsciousnessLevel.AWAKENED: 1.1,
    ConsciousnessLevel.ENLIGHTENED: 1.2,
    ConsciousnessLevel.TRANSCENDENT: 1.5,
}


def band(score: float) -> ConsciousnessLevel:
    """Map a score onto its level. NaN and negatives are Dormant."""
    score = safe_float(score, 0.0)
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return ConsciousnessLevel.DORMANT


def compute_trend(history: Sequence[float]) -> float:
    """1 + mean of consecutive score deltas, bounded to [0.9, 1.1].

    Fewer than two snapshots means no trend (1.0).
    """
    if len(history) < 2:
        return 1.0
    deltas = [b - a for a, b in zip(history, list(history)[1:])]
    return 1.0 + clamp(mean(deltas), -TREND_BOUND, TREND_BOUND, default=0.0)


def interaction_depth(interaction_count: int) -> float:
    if interaction_count <= 1:
        return 0.0
    return clamp(math.log10(interaction_count) * INTERACTION_DEPTH_SCALE)


def consciousness_factor(level: ConsciousnessLevel) -> float:
    return CONSCIOUSNESS_FACTORS[ConsciousnessLevel(level)]


def score_components(quantum: QuantumState, interaction_count: int) -> Dict[str, float]:
    return {
        "coherence": clamp(quantum.coherence),
        "resonance": quantum.calculate_resonance(),
        "phase_alignment": clamp(quantum.phase_alignment),
        "interaction_depth": interaction_depth(interaction_count),
        "harmonic_balance": quantum.harmonic_balance(),
    }


class ConsciousnessTracker:
    """Evaluates the consciousness level and keeps the score history.

    Only raw scores are kept, at most ``history_size`` of them (oldest
    evicted first), purely to compute the trend factor.
    """

    def __init__(
        self,
        history_size: int = HISTORY_LIMIT,
        smoothing: bool = True,
        history: Optional[Iterable[float]] = None,
        last_score: float = 0.0,
    ) -> None:
        size = max(2, min(HISTORY_LIMIT, int(history_size)))
        self._history: Deque[float] = deque(
            (safe_float(s) for s in (history or ())), maxlen=size
        )
        self.smoothing = smoothing
        self.last_score = safe_float(last_score)

    @property
    def history(self) -> tuple:
        return tuple(self._history)

    @property
    def history_size(self) -> int:
        return self._history.maxlen

    @property
    def trend_factor(self) -> float:
        if not self.smoothing:
            return 1.0
        return compute_trend(self._history)

    def score(self, quantum: QuantumState, interaction_count: int) -> float:
        """Weighted raw score in [0, 1]. Pure."""
        components = score_components(quantum, interaction_count)
        return clamp(math.fsum(SCORE_WEIGHTS[k] * v for k, v in components.items()))

    def evaluate(self, quantum: QuantumState, interaction_count: int) -> ConsciousnessLevel:
        return self.evaluate_score(self.score(quantum, interaction_count))

    def evaluate_score(self, raw_score: float) -> ConsciousnessLevel:
        """Record a raw score and return the smoothed level."""
        raw_score = clamp(raw_score)
        self._history.append(raw_score)
        final = raw_score * self.trend_factor
        self.last_score = final
        level = band(final)
        logger.debug(
            "Consciousness score raw=%.4f trend=%.4f final=%.4f level=%s",
            raw_score,
            self.trend_factor,
            final,
            level.label,
        )
        return level

    def to_dict(self) -> Dict[str, Any]:
        return {
            "history": list(self._history),
            "history_size": self.history_size,
            "smoothing": self.smoothing,
            "last_score": self.last_score,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ConsciousnessTracker:
        return cls(
            history_size=data.get("history_size", HISTORY_LIMIT),
            smoothing=data.get("smoothing", True),
            history=data.get("history", ()),
            last_score=data.get("last_score", 0.0),
        )
