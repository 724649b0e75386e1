"""
Entity aggregate: one living token's evolving state.

An Entity owns its traits, quantum metrics, consciousness tracker and
memory tiers outright; nothing is shared between entities. The engine is
the only writer. Everything below the "Queries" marker is read-only.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from anima.config import EvolutionSettings
from anima.consciousness import ConsciousnessTracker, consciousness_factor
from anima.memory.formation import MemoryFormation
from anima.memory.store import MemoryStore
from anima.quantum import QuantumState
from anima.traits import TraitVector
from anima.types import ConsciousnessLevel, Memory, MemoryStats, format_datetime, parse_datetime
from anima.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class Entity:
    """State of a single evolving entity."""

    id: str
    traits: TraitVector = field(default_factory=TraitVector.default)
    quantum: QuantumState = field(default_factory=QuantumState)
    consciousness: ConsciousnessTracker = field(default_factory=ConsciousnessTracker)
    memories: MemoryStore = field(default_factory=MemoryStore)
    formation: MemoryFormation = field(default_factory=MemoryFormation)
    level: ConsciousnessLevel = ConsciousnessLevel.DORMANT
    interaction_count: int = 0
    created_at: datetime = field(default_factory=utc_now)
    last_interaction_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        entity_id: Optional[str] = None,
        settings: Optional[EvolutionSettings] = None,
        now: Optional[datetime] = None,
    ) -> Entity:
        """Create a fresh entity with default traits and neutral metrics.

        Component sizes and thresholds come from ``settings`` (defaults
        when omitted). The consolidation clock starts at creation.
        """
        settings = settings or EvolutionSettings()
        now = now or utc_now()
        entity = cls(
            id=entity_id or str(uuid.uuid4()),
            traits=TraitVector.default(),
            quantum=QuantumState(),
            consciousness=ConsciousnessTracker(
                history_size=settings.consciousness_history_size,
                smoothing=settings.trend_smoothing,
            ),
            memories=MemoryStore(
                capacity=settings.short_term_capacity,
                significance_threshold=settings.significance_threshold,
            ),
            formation=MemoryFormation(
                significance_threshold=settings.significance_threshold,
                consolidation_interval=settings.consolidation_interval,
                last_consolidation=now,
            ),
            created_at=now,
        )
        logger.debug("Created entity %s", entity.id)
        return entity

    # ---- Queries ----

    def get_level(self) -> ConsciousnessLevel:
        return self.level

    def get_metrics(self) -> Dict[str, Any]:
        """Snapshot of the quantum and consciousness metrics."""
        return {
            "level": self.level.label,
            "consciousness_score": self.consciousness.last_score,
            "trend_factor": self.consciousness.trend_factor,
            "interaction_count": self.interaction_count,
            "coherence": self.quantum.coherence,
            "resonance": self.quantum.resonance,
            "dimensional_frequency": self.quantum.dimensional_frequency,
            "stability": self.quantum.stability,
            "phase_alignment": self.quantum.phase_alignment,
            "harmonics": list(self.quantum.harmonics),
            "calculated_resonance": self.quantum.calculate_resonance(),
            "harmonic_balance": self.quantum.harmonic_balance(),
            "rarity_score": self.get_rarity_score(),
        }

    def get_recent_memories(self, count: int) -> List[Memory]:
        return self.memories.get_recent_memories(count)

    def get_memory_stats(self) -> MemoryStats:
        return self.memories.get_memory_stats()

    def get_dominant_trait(self) -> Optional[Tuple[str, float]]:
        return self.traits.dominant()

    def get_rarity_score(self) -> float:
        return (
            consciousness_factor(self.level)
            + self.quantum.resonance
            + self.quantum.phase_alignment
        ) / 3.0

    # ---- Serialization ----

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "traits": self.traits.to_dict(),
            "quantum": self.quantum.to_dict(),
            "consciousness": self.consciousness.to_dict(),
            "memories": self.memories.to_dict(),
            "formation": self.formation.to_dict(),
            "level": self.level.label,
            "interaction_count": self.interaction_count,
            "created_at": format_datetime(self.created_at),
            "last_interaction_at": format_datetime(self.last_interaction_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Entity:
        return cls(
            id=data["id"],
            traits=TraitVector.from_dict(data.get("traits", {})),
            quantum=QuantumState.from_dict(data.get("quantum", {})),
            consciousness=ConsciousnessTracker.from_dict(data.get("consciousness", {})),
            memories=MemoryStore.from_dict(data.get("memories", {})),
            formation=MemoryFormation.from_dict(data.get("formation", {})),
            level=ConsciousnessLevel[data.get("level", "Dormant").upper()],
            interaction_count=data.get("interaction_count", 0),
            created_at=parse_datetime(data.get("created_at")) or utc_now(),
            last_interaction_at=parse_datetime(data.get("last_interaction_at")),
        )
