"""
Shared types for anima.

These dataclasses and enums are the vocabulary passed between the trait,
quantum, consciousness and memory layers and returned to callers of the
evolution engine.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple

# === Enums ===


class ConsciousnessLevel(IntEnum):
    """Ordinal consciousness tier. Higher values are more evolved."""

    DORMANT = 0
    AWARE = 1
    AWAKENED = 2
    ENLIGHTENED = 3
    TRANSCENDENT = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


class EventType(str, Enum):
    """Classification tag attached to every formed memory."""

    LEARNING_MOMENT = "learning_moment"
    EMOTIONAL_RESPONSE = "emotional_response"
    RELATIONSHIP_DEVELOPMENT = "relationship_development"
    AUTONOMOUS_THOUGHT = "autonomous_thought"
    USER_INTERACTION = "user_interaction"


# === Shared Utility Functions ===


def parse_datetime(s: Optional[str]) -> Optional[datetime]:
    """Parse an ISO datetime string (``Z`` suffix accepted)."""
    if not s:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt is not None else None


# === Memory ===


@dataclass(frozen=True)
class Memory:
    """A scored, retained record of a past interaction.

    Memories are immutable once formed. The only thing that changes over
    their lifetime is which tier of the MemoryStore holds them.

    ``emotional_impact`` is unsigned ([0, 1]); signed affect lives only in
    the analysis valence.
    """

    timestamp: datetime
    content: str
    emotional_impact: float
    importance_score: float
    keywords: Tuple[str, ...] = ()
    event_type: EventType = EventType.USER_INTERACTION
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def consolidation_score(self) -> float:
        """Score used to rank memories during consolidation."""
        return self.importance_score * self.emotional_impact

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "content": self.content,
            "emotional_impact": self.emotional_impact,
            "importance_score": self.importance_score,
            "keywords": list(self.keywords),
            "event_type": self.event_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Memory":
        return cls(
            id=data["id"],
            timestamp=parse_datetime(data["timestamp"]),
            content=data["content"],
            emotional_impact=data["emotional_impact"],
            importance_score=data["importance_score"],
            keywords=tuple(data.get("keywords", ())),
            event_type=EventType(data.get("event_type", EventType.USER_INTERACTION.value)),
        )


@dataclass
class MemoryStats:
    """Summary counts over both memory tiers."""

    short_term_count: int
    long_term_count: int
    total_emotional_impact: float
    memory_types: Dict[str, int]
    oldest_memory: Optional[datetime] = None
    newest_memory: Optional[datetime] = None

    @property
    def total_count(self) -> int:
        return self.short_term_count + self.long_term_count


@dataclass
class ConsolidationReport:
    """What one consolidation pass did to the short-term tier."""

    promoted: int = 0  # moved to long-term
    retained: int = 0  # kept in short-term
    discarded: int = 0
    retention_threshold: float = 0.0
    trigger: str = "capacity"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "promoted": self.promoted,
            "retained": self.retained,
            "discarded": self.discarded,
            "retention_threshold": self.retention_threshold,
            "trigger": self.trigger,
        }


@dataclass
class InteractionOutcome:
    """Result of one evolution tick.

    ``new_level`` is set only when the consciousness level changed during
    this interaction; ``memory_formed`` only when the formation score
    cleared the significance threshold.
    """

    trait_deltas: List[Tuple[str, float]] = field(default_factory=list)
    new_level: Optional[ConsciousnessLevel] = None
    memory_formed: Optional[Memory] = None
    previous_level: ConsciousnessLevel = ConsciousnessLevel.DORMANT
    level: ConsciousnessLevel = ConsciousnessLevel.DORMANT
    formation_score: float = 0.0
    consolidation: Optional[ConsolidationReport] = None

    @property
    def leveled_up(self) -> bool:
        return self.level > self.previous_level

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trait_deltas": [[name, delta] for name, delta in self.trait_deltas],
            "new_level": self.new_level.label if self.new_level is not None else None,
            "memory_formed": self.memory_formed.to_dict() if self.memory_formed else None,
            "previous_level": self.previous_level.label,
            "level": self.level.label,
            "formation_score": self.formation_score,
            "consolidation": self.consolidation.to_dict() if self.consolidation else None,
        }
