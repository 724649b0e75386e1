"""
Errors and collaborator protocols for anima.

The evolution core is a set of total numeric functions, so the error
hierarchy only covers the surfaces around it: entity lookup in the
repository. Clock and random source are protocols so hosts and tests can
inject deterministic implementations.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

# =============================================================================
# ERRORS
# =============================================================================


class AnimaError(Exception):
    """Base for all anima errors."""

    pass


class EntityNotFoundError(AnimaError):
    """Raised when a repository lookup names an unknown entity."""

    def __init__(self, entity_id: str):
        super().__init__(f"Entity not found: {entity_id}")
        self.entity_id = entity_id


class EntityAlreadyExistsError(AnimaError):
    """Raised when registering an entity id that is already taken."""

    def __init__(self, entity_id: str):
        super().__init__(f"Entity already exists: {entity_id}")
        self.entity_id = entity_id


# =============================================================================
# COLLABORATORS
# =============================================================================


@runtime_checkable
class Clock(Protocol):
    """Source of the current time (aware UTC datetimes)."""

    def __call__(self) -> datetime: ...


@runtime_checkable
class RandomSource(Protocol):
    """The subset of ``random.Random`` the engine draws from."""

    def uniform(self, a: float, b: float) -> float: ...
