"""Tests for the two-tier MemoryStore and consolidation."""

from datetime import timedelta

import pytest

from anima.memory.store import MemoryStore
from anima.types import EventType


class TestConsolidation:
    """Three-way split and capacity bound."""

    def test_capacity_breach_example(self, memory_factory):
        """Scores [0.9, 0.3, 0.95] at capacity 2: third insert consolidates."""
        store = MemoryStore(capacity=2, significance_threshold=0.5)
        first = memory_factory(importance=0.9, content="first")
        second = memory_factory(importance=0.3, content="second")
        third = memory_factory(importance=0.95, content="third")

        assert store.add(first) is None
        assert store.add(second) is None
        report = store.add(third)

        assert report is not None
        assert report.trigger == "capacity"
        assert len(store.short_term) < 3
        # retention cutoff is 0.5 * (1 + 0.5) = 0.75; both top scores clear it
        assert report.retention_threshold == pytest.approx(0.75)
        assert [m.content for m in store.long_term] == ["third", "first"]
        assert store.short_term == []
        assert report.discarded == 1

    def test_three_way_split(self, memory_factory):
        store = MemoryStore(capacity=10, significance_threshold=0.5)
        for importance in (0.9, 0.6, 0.2):
            store.add(memory_factory(importance=importance, content=str(importance)))

        report = store.consolidate(consciousness=0.5)

        assert [m.content for m in store.long_term] == ["0.9"]
        assert [m.content for m in store.short_term] == ["0.6"]
        assert (report.promoted, report.retained, report.discarded) == (1, 1, 1)

    def test_higher_consciousness_raises_retention_cutoff(self, memory_factory):
        store = MemoryStore(capacity=10, significance_threshold=0.5)
        store.add(memory_factory(importance=0.9))
        store.consolidate(consciousness=1.0)  # cutoff 1.0
        assert store.long_term == []
        assert len(store.short_term) == 1

    def test_ties_keep_insertion_order(self, memory_factory):
        store = MemoryStore(capacity=10, significance_threshold=0.5)
        for name in ("a", "b", "c"):
            store.add(memory_factory(importance=0.8, content=name))
        store.consolidate(consciousness=0.5)
        assert [m.content for m in store.long_term] == ["a", "b", "c"]

    def test_short_term_overflow_trimmed(self, memory_factory):
        """Retained items beyond capacity are dropped lowest-ranked first."""
        store = MemoryStore(capacity=2, significance_threshold=0.5)
        store.add(memory_factory(importance=0.6, content="low"))
        store.add(memory_factory(importance=0.7, content="high"))
        report = store.add(memory_factory(importance=0.65, content="mid"), consciousness=0.9)

        assert [m.content for m in store.short_term] == ["high", "mid"]
        assert report.discarded == 1
        assert len(store.short_term) <= store.capacity

    def test_capacity_bound_holds_under_load(self, memory_factory):
        store = MemoryStore(capacity=3, significance_threshold=0.2)
        for i in range(50):
            store.add(memory_factory(importance=(i % 10) / 10), consciousness=1.0)
            assert len(store.short_term) <= 3


class TestQueries:
    """Read-only queries over both tiers."""

    def _populated(self, memory_factory, clock):
        store = MemoryStore(capacity=10)
        store.long_term.append(
            memory_factory(content="old", timestamp=clock.now, keywords=("quantum",))
        )
        store.short_term.append(
            memory_factory(
                content="new",
                timestamp=clock.now + timedelta(hours=2),
                keywords=("Joy",),
                event_type=EventType.EMOTIONAL_RESPONSE,
            )
        )
        store.short_term.append(
            memory_factory(content="mid", timestamp=clock.now + timedelta(hours=1))
        )
        return store

    def test_recent_memories_newest_first(self, memory_factory, clock):
        store = self._populated(memory_factory, clock)
        assert [m.content for m in store.get_recent_memories(2)] == ["new", "mid"]
        assert store.get_recent_memories(0) == []
        assert len(store.get_recent_memories(10)) == 3

    def test_by_type(self, memory_factory, clock):
        store = self._populated(memory_factory, clock)
        found = store.get_memories_by_type(EventType.EMOTIONAL_RESPONSE)
        assert [m.content for m in found] == ["new"]
        assert len(store.get_memories_by_type("user_interaction")) == 2

    def test_by_keywords_case_insensitive(self, memory_factory, clock):
        store = self._populated(memory_factory, clock)
        assert [m.content for m in store.get_memories_by_keywords(["JOY"])] == ["new"]
        assert store.get_memories_by_keywords(["missing"]) == []

    def test_stats(self, memory_factory, clock):
        store = self._populated(memory_factory, clock)
        stats = store.get_memory_stats()
        assert stats.short_term_count == 2
        assert stats.long_term_count == 1
        assert stats.total_count == 3
        assert stats.total_emotional_impact == pytest.approx(3.0)
        assert stats.memory_types == {"user_interaction": 2, "emotional_response": 1}
        assert stats.oldest_memory == clock.now
        assert stats.newest_memory == clock.now + timedelta(hours=2)

    def test_stats_empty(self):
        stats = MemoryStore().get_memory_stats()
        assert stats.total_count == 0
        assert stats.oldest_memory is None


class TestStoreSerialization:
    def test_round_trip_preserves_order_and_fields(self, memory_factory, clock):
        store = MemoryStore(capacity=4, significance_threshold=0.4)
        for i in range(3):
            store.short_term.append(
                memory_factory(
                    importance=0.1 * i,
                    content=f"short {i}",
                    timestamp=clock.now + timedelta(minutes=i),
                    keywords=("k", str(i)),
                )
            )
        store.long_term.append(
            memory_factory(content="long", event_type=EventType.LEARNING_MOMENT)
        )

        restored = MemoryStore.from_dict(store.to_dict())

        assert restored.short_term == store.short_term
        assert restored.long_term == store.long_term
        assert restored.capacity == 4
        assert restored.significance_threshold == 0.4
        assert restored.to_dict() == store.to_dict()

    def test_oversized_short_term_consolidated_on_load(self, memory_factory):
        """A stored short-term tier larger than capacity is brought back within bounds."""
        data = MemoryStore(capacity=10).to_dict()
        data["capacity"] = 2
        data["short_term"] = [
            memory_factory(importance=importance, content=str(importance)).to_dict()
            for importance in (0.9, 0.6, 0.55, 0.65, 0.2)
        ]

        restored = MemoryStore.from_dict(data)

        assert len(restored.short_term) <= restored.capacity
        # cutoff 0.75 promotes 0.9; 0.65 and 0.6 stay; 0.55 overflows; 0.2 is dropped
        assert [m.content for m in restored.long_term] == ["0.9"]
        assert [m.content for m in restored.short_term] == ["0.65", "0.6"]

    def test_oversized_short_term_via_constructor(self, memory_factory):
        memories = [memory_factory(importance=0.6, content=str(i)) for i in range(4)]
        store = MemoryStore(capacity=3, short_term=memories)
        assert [m.content for m in store.short_term] == ["0", "1", "2"]
