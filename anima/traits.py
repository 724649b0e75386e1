"""Personality trait vector.

Traits are named scalars in [0, 1]. Every write is clamped; traits are
created on first update and never removed.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from anima.utils import clamp, safe_float, tokenize

logger = logging.getLogger(__name__)

DEFAULT_TRAITS = (
    "curiosity",
    "empathy",
    "creativity",
    "logic",
    "wisdom",
    "consciousness",
    "memory_retention",
    "growth",
)
DEFAULT_TRAIT_VALUE = 0.5

# Heuristic deltas
CURIOSITY_QUESTION_DELTA = 0.05
EMPATHY_DELTA_PER_MATCH = 0.02
MAX_EMPATHY_DELTA = 0.1
GROWTH_IMPORTANCE_THRESHOLD = 0.7
GROWTH_DELTA_SCALE = 0.1

# Single-word emotional signals
EMOTIONAL_KEYWORDS = frozenset(
    {
        "happy",
        "joy",
        "delighted",
        "wonderful",
        "amazing",
        "excited",
        "glad",
        "thrilled",
        "curious",
        "fascinating",
        "wonder",
        "proud",
        "grateful",
        "thankful",
        "appreciate",
        "love",
        "care",
        "hope",
        "feel",
        "feeling",
        "feelings",
        "frustrated",
        "disappointed",
        "worried",
        "anxious",
        "nervous",
        "stressed",
        "overwhelmed",
        "confused",
        "lonely",
        "hurt",
        "afraid",
        "scared",
        "sad",
        "unhappy",
        "depressed",
        "angry",
        "furious",
        "hate",
        "sorry",
    }
)


class TraitVector:
    """Mapping of trait name to a value clamped into [0, 1]."""

    def __init__(self, values: Optional[Mapping[str, float]] = None) -> None:
        self._values: Dict[str, float] = {}
        for name, value in (values or {}).items():
            self._values[name] = clamp(value)

    @classmethod
    def default(cls) -> TraitVector:
        return cls({name: DEFAULT_TRAIT_VALUE for name in DEFAULT_TRAITS})

    # ---- Mapping-style access ----

    def get(self, name: str, default: float = DEFAULT_TRAIT_VALUE) -> float:
        return self._values.get(name, default)

    def __getitem__(self, name: str) -> float:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def items(self) -> List[Tuple[str, float]]:
        return list(self._values.items())

    def as_dict(self) -> Dict[str, float]:
        return dict(self._values)

    # ---- Mutation ----

    def apply_delta(self, name: str, delta: float) -> float:
        """Add ``delta`` to a trait and clamp. Unknown traits start at ``delta``.

        Returns the new value.
        """
        delta = safe_float(delta)
        if name in self._values:
            self._values[name] = clamp(self._values[name] + delta)
        else:
            self._values[name] = clamp(delta)
        return self._values[name]

    def update_from_interaction(
        self,
        message: str,
        response_text: str = "",
        memory: Optional[Any] = None,
    ) -> List[Tuple[str, float]]:
        """Nudge traits from textual cues in an exchange.

        - a question mark in the message raises curiosity
        - emotional keywords in message or response raise empathy,
          proportionally to the number of matches
        - a memory with importance above 0.7 raises growth

        Returns the (trait, delta) pairs that were applied.
        """
        deltas: List[Tuple[str, float]] = []

        if "?" in (message or ""):
            deltas.append(("curiosity", CURIOSITY_QUESTION_DELTA))

        matches = sum(
            1
            for token in tokenize(message) + tokenize(response_text)
            if token in EMOTIONAL_KEYWORDS
        )
        if matches:
            deltas.append(("empathy", min(MAX_EMPATHY_DELTA, EMPATHY_DELTA_PER_MATCH * matches)))

        for name, delta in deltas:
            self.apply_delta(name, delta)

        if memory is not None:
            deltas.extend(self.apply_memory_growth(memory))

        return deltas

    def apply_memory_growth(self, memory: Any) -> List[Tuple[str, float]]:
        """Raise the growth trait for an important memory."""
        importance = clamp(getattr(memory, "importance_score", 0.0))
        if importance <= GROWTH_IMPORTANCE_THRESHOLD:
            return []
        delta = GROWTH_DELTA_SCALE * importance
        self.apply_delta("growth", delta)
        return [("growth", delta)]

    def dominant(self) -> Optional[Tuple[str, float]]:
        """Highest-valued trait; the earliest inserted wins ties."""
        if not self._values:
            return None
        best_name = None
        best_value = -1.0
        for name, value in self._values.items():
            if value > best_value:
                best_name, best_value = name, value
        return best_name, best_value

    # ---- Serialization ----

    def to_dict(self) -> Dict[str, float]:
        return self.as_dict()

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> TraitVector:
        return cls(data)

    def __repr__(self) -> str:
        return f"TraitVector({self._values!r})"
