"""Tests for anima.traits."""

import math

import pytest

from anima.traits import (
    CURIOSITY_QUESTION_DELTA,
    DEFAULT_TRAITS,
    MAX_EMPATHY_DELTA,
    TraitVector,
)


class TestTraitVectorBasics:
    """Construction and mapping access."""

    def test_default_traits_all_half(self):
        """Default vector has the eight standard traits at 0.5."""
        traits = TraitVector.default()
        assert list(traits) == list(DEFAULT_TRAITS)
        assert all(value == 0.5 for _, value in traits.items())

    def test_values_clamped_on_construction(self):
        """Out-of-range and NaN values are clamped on the way in."""
        traits = TraitVector({"a": 2.0, "b": -1.0, "c": float("nan")})
        assert traits["a"] == 1.0
        assert traits["b"] == 0.0
        assert traits["c"] == 0.0

    def test_get_missing_returns_default(self):
        traits = TraitVector()
        assert traits.get("unknown") == 0.5
        assert "unknown" not in traits


class TestApplyDelta:
    """Additive updates with clamping."""

    @pytest.mark.parametrize("delta", [-5.0, -0.3, 0.0, 0.2, 0.7, 5.0, float("inf"), float("-inf")])
    def test_result_always_in_unit_interval(self, delta):
        """Whatever the delta, the stored value stays in [0, 1]."""
        traits = TraitVector.default()
        value = traits.apply_delta("curiosity", delta)
        assert 0.0 <= value <= 1.0
        assert traits["curiosity"] == value

    def test_nan_delta_is_ignored(self):
        traits = TraitVector.default()
        traits.apply_delta("logic", float("nan"))
        assert traits["logic"] == 0.5

    def test_unknown_trait_inserted_with_delta(self):
        """Unknown traits start at the (clamped) delta."""
        traits = TraitVector.default()
        traits.apply_delta("playfulness", 0.3)
        assert traits["playfulness"] == pytest.approx(0.3)
        traits.apply_delta("stubbornness", -0.3)
        assert traits["stubbornness"] == 0.0

    def test_traits_never_removed(self):
        traits = TraitVector.default()
        traits.apply_delta("curiosity", -10)
        assert "curiosity" in traits
        assert len(traits) == len(DEFAULT_TRAITS)


class TestUpdateFromInteraction:
    """Textual heuristics."""

    def test_question_raises_curiosity(self):
        traits = TraitVector.default()
        deltas = traits.update_from_interaction("What is this?")
        assert ("curiosity", CURIOSITY_QUESTION_DELTA) in deltas
        assert traits["curiosity"] > 0.5

    def test_no_cues_no_deltas(self):
        traits = TraitVector.default()
        assert traits.update_from_interaction("The sky is blue.") == []
        assert traits.as_dict() == TraitVector.default().as_dict()

    def test_emotional_keywords_raise_empathy_proportionally(self):
        """Two matches give twice the single-match delta."""
        one = TraitVector.default()
        two = TraitVector.default()
        d1 = dict(one.update_from_interaction("I feel fine"))
        d2 = dict(two.update_from_interaction("I feel happy"))
        assert d2["empathy"] == pytest.approx(2 * d1["empathy"])

    def test_response_text_counts_for_empathy(self):
        traits = TraitVector.default()
        deltas = dict(traits.update_from_interaction("ok", "I am so happy and grateful!"))
        assert deltas["empathy"] > 0

    def test_empathy_delta_capped(self):
        traits = TraitVector.default()
        message = " ".join(["love"] * 20)
        deltas = dict(traits.update_from_interaction(message))
        assert deltas["empathy"] == MAX_EMPATHY_DELTA

    def test_important_memory_raises_growth(self, memory_factory):
        traits = TraitVector.default()
        deltas = dict(traits.update_from_interaction("hi", memory=memory_factory(importance=0.9)))
        assert deltas["growth"] == pytest.approx(0.09)
        assert traits["growth"] == pytest.approx(0.59)

    def test_unimportant_memory_no_growth(self, memory_factory):
        traits = TraitVector.default()
        deltas = traits.update_from_interaction("hi", memory=memory_factory(importance=0.7))
        assert deltas == []

    def test_deterministic(self):
        """Identical inputs produce identical results."""
        a = TraitVector.default()
        b = TraitVector.default()
        msg = "Do you love to wonder?"
        assert a.update_from_interaction(msg) == b.update_from_interaction(msg)
        assert a.as_dict() == b.as_dict()

    def test_values_stay_bounded_over_many_updates(self):
        traits = TraitVector.default()
        for _ in range(100):
            traits.update_from_interaction("Why do I love and wonder and feel?")
        assert all(0.0 <= v <= 1.0 and not math.isnan(v) for _, v in traits.items())
        assert traits["curiosity"] == 1.0


class TestDominantTrait:
    """Highest-valued trait lookup."""

    def test_dominant_picks_highest(self):
        traits = TraitVector.default()
        traits.apply_delta("wisdom", 0.2)
        assert traits.dominant() == ("wisdom", pytest.approx(0.7))

    def test_tie_goes_to_first_inserted(self):
        assert TraitVector.default().dominant()[0] == "curiosity"

    def test_empty_vector(self):
        assert TraitVector().dominant() is None


class TestTraitSerialization:
    def test_round_trip_preserves_order(self):
        traits = TraitVector.default()
        traits.apply_delta("zeal", 0.4)
        restored = TraitVector.from_dict(traits.to_dict())
        assert restored.items() == traits.items()
