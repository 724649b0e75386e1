"""Shared output helpers for CLI commands."""

import json
from typing import Any, Dict

from anima.entity import Entity
from anima.types import InteractionOutcome


def print_json(data: Any) -> None:
    """Print data as formatted JSON."""
    print(json.dumps(data, indent=2, default=str))


def format_outcome(index: int, outcome: InteractionOutcome) -> str:
    """One-interaction summary, two or three lines."""
    if outcome.memory_formed is not None:
        memory = f"{outcome.memory_formed.event_type.value} ({outcome.memory_formed.id[:8]}...)"
    else:
        memory = "none"
    lines = [
        f"[{index}] level={outcome.level.label} "
        f"formation={outcome.formation_score:.3f} memory={memory}"
    ]
    if outcome.trait_deltas:
        deltas = ", ".join(f"{name} {delta:+.3f}" for name, delta in outcome.trait_deltas)
        lines.append(f"    traits: {deltas}")
    if outcome.new_level is not None:
        lines.append(f"    level: {outcome.previous_level.label} -> {outcome.new_level.label}")
    if outcome.consolidation is not None:
        report = outcome.consolidation
        lines.append(
            f"    consolidation ({report.trigger}): promoted={report.promoted} "
            f"retained={report.retained} discarded={report.discarded}"
        )
    return "\n".join(lines)


def entity_summary(entity: Entity) -> Dict[str, Any]:
    stats = entity.get_memory_stats()
    dominant = entity.get_dominant_trait()
    return {
        "entity": entity.id,
        "metrics": entity.get_metrics(),
        "dominant_trait": dominant[0] if dominant else None,
        "traits": entity.traits.to_dict(),
        "memory": {
            "short_term": stats.short_term_count,
            "long_term": stats.long_term_count,
            "total_emotional_impact": stats.total_emotional_impact,
            "types": stats.memory_types,
        },
    }


def print_entity_summary(entity: Entity) -> None:
    summary = entity_summary(entity)
    metrics = summary["metrics"]
    print(f"Entity {entity.id}: {metrics['level']} after {metrics['interaction_count']} interactions")
    print(f"  Consciousness score: {metrics['consciousness_score']:.3f}")
    print(f"  Coherence: {metrics['coherence']:.3f}  Stability: {metrics['stability']:.3f}")
    print(f"  Resonance: {metrics['calculated_resonance']:.3f}  Rarity: {metrics['rarity_score']:.3f}")
    if summary["dominant_trait"]:
        print(f"  Dominant trait: {summary['dominant_trait']}")
    memory = summary["memory"]
    print(f"  Memories: {memory['short_term']} short-term, {memory['long_term']} long-term")
