"""Tests for EntityRepository."""

import threading

import pytest

from anima.entity import Entity
from anima.protocols import AnimaError, EntityAlreadyExistsError, EntityNotFoundError
from anima.repository import EntityRepository


class TestEntityRepository:
    def test_create_and_get(self, repository):
        entity = repository.create("e1")
        assert repository.get("e1") is entity
        assert "e1" in repository
        assert len(repository) == 1
        assert repository.ids() == ["e1"]

    def test_duplicate_rejected(self, repository):
        repository.create("e1")
        with pytest.raises(EntityAlreadyExistsError) as exc_info:
            repository.add(Entity.create("e1"))
        assert exc_info.value.entity_id == "e1"

    def test_missing_entity(self, repository):
        with pytest.raises(EntityNotFoundError):
            repository.get("nope")
        with pytest.raises(AnimaError):
            repository.remove("nope")

    def test_remove(self, repository):
        repository.create("e1")
        removed = repository.remove("e1")
        assert removed.id == "e1"
        assert "e1" not in repository
        with pytest.raises(EntityNotFoundError):
            with repository.session("e1"):
                pass

    def test_session_yields_entity(self, repository):
        entity = repository.create("e1")
        with repository.session("e1") as held:
            assert held is entity

    def test_session_serializes_same_entity(self, repository):
        """Concurrent sessions on one entity never interleave."""
        repository.create("e1")
        inside = []
        overlaps = []

        def worker():
            for _ in range(200):
                with repository.session("e1") as entity:
                    inside.append(1)
                    if len(inside) > 1:
                        overlaps.append(True)
                    entity.interaction_count += 1
                    inside.pop()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
        assert repository.get("e1").interaction_count == 800

    def test_sessions_on_different_entities_independent(self, repository):
        repository.create("a")
        repository.create("b")
        with repository.session("a"):
            with repository.session("b") as b:
                assert b.id == "b"
