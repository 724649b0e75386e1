"""Memory formation: deciding what an entity remembers.

Each interaction gets a formation score, a weighted sum of five
sub-scores in [0, 1]:

    emotional (0.30)      response intensity
    novelty (0.20)        1 - mean word overlap with the last 5 memories
    relevance (0.20)      trait keyword match, intensity, recency
    consciousness (0.15)  consciousness impact signal
    growth (0.15)         growth potential signal

A memory forms only when the score is strictly above the significance
threshold. The scoring functions are pure; MemoryFormation wires them to
an entity's traits and MemoryStore and runs periodic consolidation.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

from anima.memory.store import MemoryStore
from anima.models import EmotionalAnalysis
from anima.signals import ResponseSignals
from anima.traits import TraitVector
from anima.types import ConsolidationReport, EventType, Memory, format_datetime, parse_datetime
from anima.utils import clamp, dedupe, mean, tokenize

logger = logging.getLogger(__name__)

MEMORY_WEIGHTS = {
    "emotional_impact": 0.30,
    "novelty": 0.20,
    "relevance": 0.20,
    "consciousness": 0.15,
    "growth": 0.15,
}

IMPORTANCE_WEIGHTS = {
    "emotional": 0.4,
    "growth": 0.3,
    "consciousness": 0.3,
}

DEFAULT_SIGNIFICANCE_THRESHOLD = 0.5
DEFAULT_CONSOLIDATION_INTERVAL = timedelta(hours=24)
NOVELTY_WINDOW = 5
TEMPORAL_DECAY_PER_HOUR = 0.1
TEMPORAL_FLOOR = 0.2
NEUTRAL_TRAIT_RELEVANCE = 0.5

STOPWORDS = frozenset(
    {
        "the",
        "and",
        "but",
        "for",
        "with",
        "that",
        "this",
        "from",
        "have",
        "what",
        "when",
        "your",
        "about",
        "there",
        "their",
        "would",
        "could",
        "should",
    }
)
GROWTH_KEYWORDS = ("growth", "development")
GROWTH_KEYWORD_THRESHOLD = 0.7


# ---- Pure scoring functions ----


def validate_weights(weights: Mapping[str, float]) -> Dict[str, float]:
    """Check that ``weights`` covers every sub-score and sums to 1.0."""
    missing = set(MEMORY_WEIGHTS) - set(weights)
    if missing:
        raise ValueError(f"Memory weights missing: {sorted(missing)}")
    total = math.fsum(weights[k] for k in MEMORY_WEIGHTS)
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(f"Memory weights must sum to 1.0, got {total}")
    return {k: float(weights[k]) for k in MEMORY_WEIGHTS}


def word_overlap(a: Sequence[str], b: Sequence[str]) -> float:
    """Shared words over union size (Jaccard)."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def calculate_novelty(message: str, recent_memories: Sequence[Memory]) -> float:
    """1 - mean overlap with recent memories; 1.0 when nothing to compare."""
    words = tokenize(message)
    overlaps = []
    for memory in recent_memories:
        memory_words = tokenize(memory.content)
        if words and memory_words:
            overlaps.append(word_overlap(words, memory_words))
    if not overlaps:
        return 1.0
    return clamp(1.0 - mean(overlaps))


def calculate_trait_relevance(message: str, traits: TraitVector) -> float:
    """Mean value of the traits whose name appears inside a message word.

    Neutral 0.5 when no trait name matches.
    """
    words = tokenize(message)
    matched = [value for name, value in traits.items() if any(name in word for word in words)]
    if not matched:
        return NEUTRAL_TRAIT_RELEVANCE
    return clamp(mean(matched))


def calculate_temporal_relevance(recent_memories: Sequence[Memory], now: datetime) -> float:
    """Recency of the last memory: 1 / (1 + 0.1 * hours), floored at 0.2."""
    if not recent_memories:
        return 1.0
    latest = max(m.timestamp for m in recent_memories)
    hours = max(0.0, (now - latest).total_seconds() / 3600.0)
    return max(TEMPORAL_FLOOR, 1.0 / (1.0 + hours * TEMPORAL_DECAY_PER_HOUR))


def calculate_relevance(
    message: str,
    traits: TraitVector,
    intensity: float,
    recent_memories: Sequence[Memory],
    now: datetime,
) -> float:
    trait_relevance = calculate_trait_relevance(message, traits)
    temporal = calculate_temporal_relevance(recent_memories, now)
    return clamp(trait_relevance * 0.4 + clamp(intensity) * 0.4 + temporal * 0.2)


def calculate_importance(
    intensity: float, signals: ResponseSignals, traits: TraitVector
) -> float:
    """Weighted blend scaled up by the consciousness/retention traits."""
    base = (
        clamp(intensity) * IMPORTANCE_WEIGHTS["emotional"]
        + signals.growth_potential * IMPORTANCE_WEIGHTS["growth"]
        + signals.consciousness_impact * IMPORTANCE_WEIGHTS["consciousness"]
    )
    multiplier = (traits.get("consciousness") + traits.get("memory_retention")) / 2.0
    return clamp(base * (1.0 + multiplier))


def classify_event(intensity: float, signals: ResponseSignals) -> EventType:
    """First match wins; the order is significant."""
    if signals.consciousness_impact > 0.8:
        return EventType.LEARNING_MOMENT
    if intensity > 0.8:
        return EventType.EMOTIONAL_RESPONSE
    if signals.growth_potential > 0.7:
        return EventType.RELATIONSHIP_DEVELOPMENT
    if signals.consciousness_impact > 0.6:
        return EventType.AUTONOMOUS_THOUGHT
    return EventType.USER_INTERACTION


def extract_keywords(message: str, primary_emotion: str, growth_potential: float) -> List[str]:
    """Significant message words, the emotion label, and growth markers.

    An empty message yields no keywords at all.
    """
    words = tokenize(message)
    if not words:
        return []
    keywords = [w for w in words if len(w) > 3 and w not in STOPWORDS]
    emotion = (primary_emotion or "").strip().lower()
    if emotion:
        keywords.append(emotion)
    if growth_potential > GROWTH_KEYWORD_THRESHOLD:
        keywords.extend(GROWTH_KEYWORDS)
    return dedupe(keywords)


@dataclass
class FormationScore:
    """Formation score with its weighted parts."""

    total: float
    components: Dict[str, float] = field(default_factory=dict)


class MemoryFormation:
    """Scores interactions, forms memories and schedules consolidation."""

    def __init__(
        self,
        significance_threshold: float = DEFAULT_SIGNIFICANCE_THRESHOLD,
        consolidation_interval: timedelta = DEFAULT_CONSOLIDATION_INTERVAL,
        weights: Optional[Mapping[str, float]] = None,
        last_consolidation: Optional[datetime] = None,
        formation_count: int = 0,
    ) -> None:
        self.significance_threshold = clamp(significance_threshold)
        self.consolidation_interval = consolidation_interval
        self.weights = validate_weights(weights or MEMORY_WEIGHTS)
        self.last_consolidation = last_consolidation
        self.formation_count = formation_count

    def formation_score(
        self,
        message: str,
        analysis: EmotionalAnalysis,
        signals: ResponseSignals,
        traits: TraitVector,
        recent_memories: Sequence[Memory],
        now: datetime,
    ) -> FormationScore:
        raw = {
            "emotional_impact": clamp(analysis.intensity),
            "novelty": calculate_novelty(message, recent_memories),
            "relevance": calculate_relevance(
                message, traits, analysis.intensity, recent_memories, now
            ),
            "consciousness": signals.consciousness_impact,
            "growth": signals.growth_potential,
        }
        components = {k: raw[k] * self.weights[k] for k in MEMORY_WEIGHTS}
        return FormationScore(total=clamp(math.fsum(components.values())), components=components)

    def form_memory(
        self,
        message: str,
        analysis: EmotionalAnalysis,
        signals: ResponseSignals,
        traits: TraitVector,
        now: datetime,
    ) -> Memory:
        return Memory(
            timestamp=now,
            content=message,
            emotional_impact=clamp(analysis.intensity),
            importance_score=calculate_importance(analysis.intensity, signals, traits),
            keywords=tuple(
                extract_keywords(message, analysis.primary_emotion, signals.growth_potential)
            ),
            event_type=classify_event(analysis.intensity, signals),
        )

    def process_interaction(
        self,
        message: str,
        analysis: EmotionalAnalysis,
        signals: ResponseSignals,
        traits: TraitVector,
        store: MemoryStore,
        now: datetime,
    ) -> "FormationResult":
        """Score the interaction, store a memory if significant, consolidate if due."""
        recent = store.get_recent_memories(NOVELTY_WINDOW)
        score = self.formation_score(message, analysis, signals, traits, recent, now)

        memory = None
        consolidation = None
        if score.total > self.significance_threshold:
            memory = self.form_memory(message, analysis, signals, traits, now)
            self.formation_count += 1
            consolidation = store.add(memory, consciousness=traits.get("consciousness"))
            logger.debug(
                "Formed %s memory (score=%.3f, importance=%.3f)",
                memory.event_type.value,
                score.total,
                memory.importance_score,
            )
        else:
            logger.debug("No memory formed (score=%.3f)", score.total)

        if consolidation is not None:
            self.last_consolidation = now
        elif self._consolidation_due(now):
            consolidation = self.consolidate(store, traits, now, trigger="periodic")

        return FormationResult(score=score, memory=memory, consolidation=consolidation)

    def _consolidation_due(self, now: datetime) -> bool:
        if self.last_consolidation is None:
            self.last_consolidation = now
            return False
        return now - self.last_consolidation > self.consolidation_interval

    def consolidate(
        self,
        store: MemoryStore,
        traits: TraitVector,
        now: datetime,
        trigger: str = "manual",
    ) -> ConsolidationReport:
        self.last_consolidation = now
        return store.consolidate(traits.get("consciousness"), trigger=trigger)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "significance_threshold": self.significance_threshold,
            "consolidation_interval_seconds": self.consolidation_interval.total_seconds(),
            "weights": dict(self.weights),
            "last_consolidation": format_datetime(self.last_consolidation),
            "formation_count": self.formation_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> MemoryFormation:
        interval = data.get("consolidation_interval_seconds")
        return cls(
            significance_threshold=data.get("significance_threshold", DEFAULT_SIGNIFICANCE_THRESHOLD),
            consolidation_interval=(
                timedelta(seconds=interval) if interval is not None else DEFAULT_CONSOLIDATION_INTERVAL
            ),
            weights=data.get("weights"),
            last_consolidation=parse_datetime(data.get("last_consolidation")),
            formation_count=data.get("formation_count", 0),
        )


@dataclass
class FormationResult:
    score: FormationScore
    memory: Optional[Memory] = None
    consolidation: Optional[ConsolidationReport] = None
