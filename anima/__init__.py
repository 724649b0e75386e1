"""
Anima - evolving personalities for living tokens.

Traits, quantum metrics, consciousness tiers and two-tier memory, updated
one interaction at a time.
"""

from .engine import EvolutionEngine
from .entity import Entity
from .models import EmotionalAnalysis, InteractionInput
from .repository import EntityRepository
from .types import ConsciousnessLevel, EventType, InteractionOutcome, Memory

try:
    from importlib.metadata import version

    __version__ = version("anima-evolution")
except Exception:
    __version__ = "0.0.0"

__all__ = [
    "ConsciousnessLevel",
    "EmotionalAnalysis",
    "Entity",
    "EntityRepository",
    "EventType",
    "EvolutionEngine",
    "InteractionInput",
    "InteractionOutcome",
    "Memory",
]
