"""In-memory entity repository with per-entity locking.

Entities share no state, so each one gets its own lock and independent
entities can be processed concurrently. Use ``session()`` around any
read-modify-write of a single entity.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from typing import Dict, Iterator, List, Optional

from anima.config import EvolutionSettings
from anima.entity import Entity
from anima.protocols import EntityAlreadyExistsError, EntityNotFoundError

logger = logging.getLogger(__name__)


class EntityRepository:
    """Keyed store of entities."""

    def __init__(self) -> None:
        self._entities: Dict[str, Entity] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def create(
        self,
        entity_id: Optional[str] = None,
        settings: Optional[EvolutionSettings] = None,
        **kwargs,
    ) -> Entity:
        """Create and register a fresh entity."""
        return self.add(Entity.create(entity_id, settings=settings, **kwargs))

    def add(self, entity: Entity) -> Entity:
        with self._registry_lock:
            if entity.id in self._entities:
                raise EntityAlreadyExistsError(entity.id)
            self._entities[entity.id] = entity
            self._locks[entity.id] = threading.Lock()
        logger.debug("Registered entity %s", entity.id)
        return entity

    def get(self, entity_id: str) -> Entity:
        try:
            return self._entities[entity_id]
        except KeyError:
            raise EntityNotFoundError(entity_id) from None

    def remove(self, entity_id: str) -> Entity:
        with self._registry_lock:
            if entity_id not in self._entities:
                raise EntityNotFoundError(entity_id)
            self._locks.pop(entity_id, None)
            entity = self._entities.pop(entity_id)
        logger.debug("Removed entity %s", entity_id)
        return entity

    def ids(self) -> List[str]:
        return list(self._entities)

    @contextlib.contextmanager
    def session(self, entity_id: str) -> Iterator[Entity]:
        """Hold the entity's lock for the duration of the block."""
        with self._registry_lock:
            if entity_id not in self._locks:
                raise EntityNotFoundError(entity_id)
            lock = self._locks[entity_id]
        with lock:
            entity = self._entities.get(entity_id)
            if entity is None:
                raise EntityNotFoundError(entity_id)
            yield entity
