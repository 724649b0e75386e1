"""
Evolution engine: one interaction tick for one entity.

The tick runs in a fixed order:

1. count the interaction and stamp its time
2. nudge traits from textual cues
3. push the quantum metrics (scaled by the current level's factor)
4. re-evaluate the consciousness level; a strict increase grants a
   one-time resonance bonus
5. score the interaction for memory formation, consolidating when the
   short-term tier overflows or the consolidation interval has passed

Every step is a total numeric function over clamped input; no step
performs I/O, so a tick cannot stop half way on bad data.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional, Union

from anima.config import EvolutionSettings, get_settings
from anima.consciousness import consciousness_factor
from anima.entity import Entity
from anima.logging_config import log_consolidation, log_interaction, log_level_change
from anima.models import EmotionalAnalysis, InteractionInput
from anima.protocols import Clock, RandomSource
from anima.repository import EntityRepository
from anima.signals import derive_signals
from anima.types import ConsolidationReport, InteractionOutcome
from anima.utils import utc_now

logger = logging.getLogger(__name__)

AnalysisLike = Union[EmotionalAnalysis, Dict[str, Any], None]


class EvolutionEngine:
    """Orchestrates trait, quantum, consciousness and memory updates.

    Args:
        repository: Entity store; a fresh in-memory one when omitted
        settings: Engine settings; ``get_settings()`` when omitted
        clock: Callable returning the current aware datetime
        rng: Random source for harmonic drift (drift is off without one)
    """

    def __init__(
        self,
        repository: Optional[EntityRepository] = None,
        settings: Optional[EvolutionSettings] = None,
        clock: Optional[Clock] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.repository = repository if repository is not None else EntityRepository()
        self.settings = settings or get_settings()
        self._clock = clock or utc_now
        self._rng = rng

    @classmethod
    def seeded(cls, seed: int, **kwargs) -> EvolutionEngine:
        """Engine with a deterministic ``random.Random(seed)`` source."""
        return cls(rng=random.Random(seed), **kwargs)

    def create_entity(self, entity_id: Optional[str] = None) -> Entity:
        return self.repository.create(entity_id, settings=self.settings, now=self._clock())

    def handle(self, entity_id: str, interaction: Union[InteractionInput, Dict[str, Any]]) -> InteractionOutcome:
        """Process an interaction for a stored entity under its lock."""
        if not isinstance(interaction, InteractionInput):
            interaction = InteractionInput.model_validate(interaction)
        with self.repository.session(entity_id) as entity:
            return self.process_interaction(
                entity,
                interaction.message,
                interaction.analysis,
                response_text=interaction.response_text,
            )

    def process_interaction(
        self,
        entity: Entity,
        message: str,
        analysis: AnalysisLike = None,
        response_text: str = "",
    ) -> InteractionOutcome:
        """Run one evolution tick on ``entity``.

        Args:
            entity: Entity to evolve (mutated in place)
            message: User message text
            analysis: Emotional analysis of the exchange (model or dict)
            response_text: The entity's reply, scanned for emotional cues

        Returns:
            InteractionOutcome with the applied trait deltas, the new level
            (only when it changed) and the formed memory (if any)
        """
        analysis = self._coerce_analysis(analysis)
        now = self._clock()
        signals = derive_signals(analysis, entity.traits)

        entity.interaction_count += 1
        entity.last_interaction_at = now

        trait_deltas = entity.traits.update_from_interaction(message, response_text)

        previous_level = entity.level
        entity.quantum.record_interaction(
            analysis.intensity,
            consciousness_factor(previous_level),
            rng=self._rng,
            drift=self.settings.harmonic_drift,
        )

        level = entity.consciousness.evaluate(entity.quantum, entity.interaction_count)
        if level > previous_level:
            entity.quantum.apply_resonance_bonus(self.settings.level_up_bonus)
        entity.level = level
        if level != previous_level:
            logger.info(
                "Entity %s consciousness %s -> %s (score=%.3f)",
                entity.id,
                previous_level.label,
                level.label,
                entity.consciousness.last_score,
            )

        result = entity.formation.process_interaction(
            message, analysis, signals, entity.traits, entity.memories, now
        )
        if result.memory is not None:
            trait_deltas.extend(entity.traits.apply_memory_growth(result.memory))

        outcome = InteractionOutcome(
            trait_deltas=trait_deltas,
            new_level=level if level != previous_level else None,
            memory_formed=result.memory,
            previous_level=previous_level,
            level=level,
            formation_score=result.score.total,
            consolidation=result.consolidation,
        )
        if self.settings.event_log_enabled:
            self._write_event_log(entity, outcome)
        return outcome

    def consolidate(self, entity: Entity) -> ConsolidationReport:
        """Run a manual consolidation pass on ``entity``."""
        report = entity.formation.consolidate(entity.memories, entity.traits, self._clock())
        if self.settings.event_log_enabled:
            self._log_consolidation(entity, report)
        return report

    # ---- Internals ----

    @staticmethod
    def _coerce_analysis(analysis: AnalysisLike) -> EmotionalAnalysis:
        if analysis is None:
            return EmotionalAnalysis()
        if isinstance(analysis, EmotionalAnalysis):
            return analysis
        return EmotionalAnalysis.model_validate(analysis)

    def _write_event_log(self, entity: Entity, outcome: InteractionOutcome) -> None:
        memory_id = outcome.memory_formed.id if outcome.memory_formed else None
        log_interaction(entity.id, entity.interaction_count, outcome.formation_score, memory_id)
        if outcome.new_level is not None:
            log_level_change(
                entity.id,
                outcome.previous_level.label,
                outcome.level.label,
                entity.consciousness.last_score,
            )
        if outcome.consolidation is not None:
            self._log_consolidation(entity, outcome.consolidation)

    @staticmethod
    def _log_consolidation(entity: Entity, report: ConsolidationReport) -> None:
        log_consolidation(
            entity.id, report.trigger, report.promoted, report.retained, report.discarded
        )
