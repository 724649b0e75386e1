"""Tests for derived response signals."""

import logging

import pytest

from anima.models import EmotionalAnalysis
from anima.signals import (
    derive_consciousness_impact,
    derive_growth_potential,
    derive_signals,
)
from anima.traits import TraitVector


class TestDerivedSignals:
    def test_growth_potential(self, curious_analysis):
        # 0.4 * (0.8 * 0.7) + 0.3 * 0.4 + 0.3 * 0.5
        value = derive_growth_potential(curious_analysis, TraitVector.default())
        assert value == pytest.approx(0.494)

    def test_consciousness_impact(self, curious_analysis):
        # 0.3 * 0.56 + 0.2 * 0.4 + 0.3 * 0.5 + 0.2 * 0.5
        value = derive_consciousness_impact(curious_analysis, TraitVector.default())
        assert value == pytest.approx(0.498)

    def test_derived_values_bounded(self):
        analysis = EmotionalAnalysis(intensity=1.0, arousal=1.0, dominance=1.0)
        traits = TraitVector({"curiosity": 1.0, "consciousness": 1.0, "wisdom": 1.0})
        signals = derive_signals(analysis, traits)
        assert signals.growth_potential == pytest.approx(1.0)
        assert signals.consciousness_impact == pytest.approx(1.0)
        assert signals.growth_potential <= 1.0

    def test_supplied_values_win(self, curious_analysis):
        analysis = curious_analysis.model_copy(
            update={"consciousness_impact": 0.9, "growth_potential": 0.1}
        )
        signals = derive_signals(analysis, TraitVector.default())
        assert signals.consciousness_impact == 0.9
        assert signals.growth_potential == 0.1

    def test_partial_supply(self, curious_analysis):
        analysis = curious_analysis.model_copy(update={"growth_potential": 0.2})
        signals = derive_signals(analysis, TraitVector.default())
        assert signals.growth_potential == 0.2
        assert signals.consciousness_impact == pytest.approx(0.498)


class TestSignalLogging:
    def test_derivation_logged_at_debug(self, curious_analysis, caplog):
        caplog.set_level(logging.DEBUG, logger="anima.signals")
        derive_signals(curious_analysis, TraitVector.default())
        assert "Derived signals" in caplog.text

    def test_supplied_signals_not_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="anima.signals")
        derive_signals(
            EmotionalAnalysis(consciousness_impact=0.2, growth_potential=0.3), TraitVector.default()
        )
        assert "Derived signals" not in caplog.text
