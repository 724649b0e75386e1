"""Memory formation, storage and analysis."""

from anima.memory.analysis import emotional_patterns, memory_clusters
from anima.memory.formation import (
    IMPORTANCE_WEIGHTS,
    MEMORY_WEIGHTS,
    FormationResult,
    FormationScore,
    MemoryFormation,
)
from anima.memory.store import MemoryStore

__all__ = [
    "IMPORTANCE_WEIGHTS",
    "MEMORY_WEIGHTS",
    "FormationResult",
    "FormationScore",
    "MemoryFormation",
    "MemoryStore",
    "emotional_patterns",
    "memory_clusters",
]
