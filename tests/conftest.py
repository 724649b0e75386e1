"""
Pytest fixtures and test configuration for anima tests.
"""

import logging
import os
import random
from datetime import datetime, timedelta, timezone

import pytest

from anima.config import EvolutionSettings, get_settings
from anima.engine import EvolutionEngine
from anima.models import EmotionalAnalysis
from anima.repository import EntityRepository
from anima.types import EventType, Memory

START = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def make_memory(
    importance: float = 0.5,
    impact: float = 1.0,
    content: str = "a memory",
    timestamp: datetime = START,
    keywords=(),
    event_type: EventType = EventType.USER_INTERACTION,
) -> Memory:
    return Memory(
        timestamp=timestamp,
        content=content,
        emotional_impact=impact,
        importance_score=importance,
        keywords=tuple(keywords),
        event_type=event_type,
    )


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep settings and log files away from the real environment."""
    for name in list(os.environ):
        if name.startswith("ANIMA_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ANIMA_DATA_DIR", str(tmp_path / "anima-home"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def settings():
    return EvolutionSettings()


@pytest.fixture
def repository():
    return EntityRepository()


@pytest.fixture
def engine(repository, settings, clock):
    return EvolutionEngine(repository=repository, settings=settings, clock=clock)


@pytest.fixture
def entity(engine):
    return engine.create_entity("entity-1")


@pytest.fixture
def curious_analysis():
    return EmotionalAnalysis(
        primary_emotion="curious",
        intensity=0.8,
        valence=0.6,
        arousal=0.7,
        dominance=0.4,
    )


@pytest.fixture
def clean_anima_logger():
    """Remove handlers from the anima logger before/after a test."""
    logger = logging.getLogger("anima")

    def reset():
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    reset()
    yield logger
    reset()


@pytest.fixture
def memory_factory():
    return make_memory
