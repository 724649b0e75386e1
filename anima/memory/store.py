"""Two-tier memory store.

Short-term memory is a capped list; long-term memory is unbounded. Adding
past capacity runs a consolidation pass over the short-term tier:

1. sort by ``importance_score * emotional_impact``, descending (stable,
   so equal scores keep their insertion order)
2. scores at or above ``significance_threshold * (1 + consciousness)``
   move to long-term
3. scores at or above ``significance_threshold`` stay short-term
4. everything else is discarded

If more significant memories remain than the tier can hold, the
lowest-ranked overflow is discarded too, so the capacity bound always
holds after a pass.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from anima.types import ConsolidationReport, EventType, Memory, MemoryStats
from anima.utils import clamp

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10
DEFAULT_SIGNIFICANCE_THRESHOLD = 0.5
DEFAULT_CONSCIOUSNESS = 0.5


class MemoryStore:
    """Short-term and long-term memory tiers for one entity."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        significance_threshold: float = DEFAULT_SIGNIFICANCE_THRESHOLD,
        short_term: Optional[Iterable[Memory]] = None,
        long_term: Optional[Iterable[Memory]] = None,
    ) -> None:
        self.capacity = max(1, int(capacity))
        self.significance_threshold = clamp(significance_threshold)
        self.short_term: List[Memory] = list(short_term or [])
        self.long_term: List[Memory] = list(long_term or [])
        if self.over_capacity:
            self.consolidate(trigger="capacity")

    def __len__(self) -> int:
        return len(self.short_term) + len(self.long_term)

    @property
    def over_capacity(self) -> bool:
        return len(self.short_term) > self.capacity

    def retention_threshold(self, consciousness: float = DEFAULT_CONSCIOUSNESS) -> float:
        return self.significance_threshold * (1.0 + clamp(consciousness, default=DEFAULT_CONSCIOUSNESS))

    # ---- Writes ----

    def add(
        self, memory: Memory, consciousness: float = DEFAULT_CONSCIOUSNESS
    ) -> Optional[ConsolidationReport]:
        """Append to short-term; consolidate if that breaches capacity.

        Returns the consolidation report when a pass ran.
        """
        self.short_term.append(memory)
        if self.over_capacity:
            return self.consolidate(consciousness, trigger="capacity")
        return None

    def consolidate(
        self, consciousness: float = DEFAULT_CONSCIOUSNESS, trigger: str = "manual"
    ) -> ConsolidationReport:
        """Redistribute the short-term tier. See module docstring."""
        retention = self.retention_threshold(consciousness)
        ranked = sorted(self.short_term, key=lambda m: m.consolidation_score, reverse=True)

        promoted: List[Memory] = []
        retained: List[Memory] = []
        discarded = 0
        for memory in ranked:
            score = memory.consolidation_score
            if score >= retention:
                promoted.append(memory)
            elif score >= self.significance_threshold:
                retained.append(memory)
            else:
                discarded += 1

        if len(retained) > self.capacity:
            overflow = len(retained) - self.capacity
            retained = retained[: self.capacity]
            discarded += overflow
            logger.debug("Short-term overflow after consolidation: dropped %d", overflow)

        self.long_term.extend(promoted)
        self.short_term = retained

        report = ConsolidationReport(
            promoted=len(promoted),
            retained=len(retained),
            discarded=discarded,
            retention_threshold=retention,
            trigger=trigger,
        )
        logger.debug(
            "Consolidated (%s): promoted=%d retained=%d discarded=%d",
            trigger,
            report.promoted,
            report.retained,
            report.discarded,
        )
        return report

    # ---- Queries ----

    def all_memories(self) -> List[Memory]:
        return self.short_term + self.long_term

    def get_recent_memories(self, count: int) -> List[Memory]:
        """Newest first across both tiers."""
        if count <= 0:
            return []
        ordered = sorted(self.all_memories(), key=lambda m: m.timestamp, reverse=True)
        return ordered[:count]

    def get_memories_by_type(self, event_type: EventType) -> List[Memory]:
        event_type = EventType(event_type)
        return [m for m in self.all_memories() if m.event_type == event_type]

    def get_memories_by_keywords(self, keywords: Iterable[str]) -> List[Memory]:
        wanted = {k.lower() for k in keywords}
        return [m for m in self.all_memories() if any(k.lower() in wanted for k in m.keywords)]

    def get_memory_stats(self) -> MemoryStats:
        memories = self.all_memories()
        types = Counter(m.event_type.value for m in memories)
        timestamps = [m.timestamp for m in memories]
        return MemoryStats(
            short_term_count=len(self.short_term),
            long_term_count=len(self.long_term),
            total_emotional_impact=sum(m.emotional_impact for m in memories),
            memory_types=dict(types),
            oldest_memory=min(timestamps) if timestamps else None,
            newest_memory=max(timestamps) if timestamps else None,
        )

    # ---- Serialization ----

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity": self.capacity,
            "significance_threshold": self.significance_threshold,
            "short_term": [m.to_dict() for m in self.short_term],
            "long_term": [m.to_dict() for m in self.long_term],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MemoryStore:
        return cls(
            capacity=data.get("capacity", DEFAULT_CAPACITY),
            significance_threshold=data.get("significance_threshold", DEFAULT_SIGNIFICANCE_THRESHOLD),
            short_term=[Memory.from_dict(m) for m in data.get("short_term", [])],
            long_term=[Memory.from_dict(m) for m in data.get("long_term", [])],
        )
