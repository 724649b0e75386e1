"""Read-only analysis over a MemoryStore."""

import logging
from typing import Dict, List, Tuple

from anima.memory.store import MemoryStore
from anima.types import Memory
from anima.utils import mean, pstdev

logger = logging.getLogger(__name__)


def memory_clusters(store: MemoryStore) -> List[Tuple[str, List[Memory]]]:
    """Group memories by keyword, heaviest clusters first.

    A memory appears in one cluster per keyword. Clusters are ordered by
    the summed importance of their memories; ties keep first-seen order.
    """
    clusters: Dict[str, List[Memory]] = {}
    for memory in store.all_memories():
        for keyword in memory.keywords:
            clusters.setdefault(keyword, []).append(memory)
    return sorted(
        clusters.items(),
        key=lambda item: sum(m.importance_score for m in item[1]),
        reverse=True,
    )


def emotional_growth_rate(memories: List[Memory]) -> float:
    """Mean change in emotional impact per hour between consecutive memories.

    Pairs sharing a timestamp are skipped.
    """
    ordered = sorted(memories, key=lambda m: m.timestamp)
    rates = []
    for prev, curr in zip(ordered, ordered[1:]):
        hours = (curr.timestamp - prev.timestamp).total_seconds() / 3600.0
        if hours > 0:
            rates.append((curr.emotional_impact - prev.emotional_impact) / hours)
    return mean(rates)


def emotional_patterns(store: MemoryStore) -> Dict[str, float]:
    """Average impact, stability and (when memories span time) growth rate.

    Returns an empty dict for an empty store.
    """
    memories = store.all_memories()
    if not memories:
        return {}

    impacts = [m.emotional_impact for m in memories]
    patterns = {
        "average_emotional_impact": mean(impacts),
        "emotional_stability": 1.0 - pstdev(impacts),
    }

    timestamps = [m.timestamp for m in memories]
    if max(timestamps) > min(timestamps):
        patterns["emotional_growth_rate"] = emotional_growth_rate(memories)
    logger.debug("Emotional patterns over %d memories: %s", len(memories), patterns)
    return patterns
