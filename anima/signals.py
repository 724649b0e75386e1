"""Consciousness-impact and growth-potential signals for an interaction.

The analysis collaborator normally supplies both. When it does not, they
are derived from the emotional reading and the entity's current traits.
"""

import logging
from dataclasses import dataclass

from anima.models import EmotionalAnalysis
from anima.traits import TraitVector
from anima.utils import clamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponseSignals:
    consciousness_impact: float = 0.0
    growth_potential: float = 0.0


def derive_growth_potential(analysis: EmotionalAnalysis, traits: TraitVector) -> float:
    emotional_depth = analysis.intensity * analysis.arousal
    return clamp(
        emotional_depth * 0.4 + analysis.dominance * 0.3 + traits.get("curiosity") * 0.3
    )


def derive_consciousness_impact(analysis: EmotionalAnalysis, traits: TraitVector) -> float:
    emotional_depth = analysis.intensity * analysis.arousal
    return clamp(
        emotional_depth * 0.3
        + analysis.dominance * 0.2
        + traits.get("consciousness") * 0.3
        + traits.get("wisdom") * 0.2
    )


def derive_signals(analysis: EmotionalAnalysis, traits: TraitVector) -> ResponseSignals:
    """Use supplied signals when present, otherwise derive them."""
    consciousness = analysis.consciousness_impact
    if consciousness is None:
        consciousness = derive_consciousness_impact(analysis, traits)
    growth = analysis.growth_potential
    if growth is None:
        growth = derive_growth_potential(analysis, traits)
    if analysis.consciousness_impact is None or analysis.growth_potential is None:
        logger.debug("Derived signals: consciousness=%.3f growth=%.3f", consciousness, growth)
    return ResponseSignals(
        consciousness_impact=clamp(consciousness),
        growth_potential=clamp(growth),
    )
