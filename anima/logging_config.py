"""Logging setup for anima.

Two streams:

* the ``anima`` logger, written to ``<data dir>/logs/local-<date>.log``
  (plus the console at DEBUG level);
* an append-only evolution event log, ``evolution-events-<date>.log``,
  with one line per interaction, level change or consolidation.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from anima.utils import get_anima_home

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _log_dir() -> Path:
    path = get_anima_home() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


def setup_anima_logging(entity_id: str = "default", level: str = "INFO") -> logging.Logger:
    """Configure the ``anima`` logger with a dated file handler.

    Safe to call repeatedly; handlers are only attached once.

    Args:
        entity_id: Entity the process is working for (recorded in the first line)
        level: Level name, case-insensitive; unknown names fall back to INFO

    Returns:
        The configured ``anima`` logger
    """
    level_name = (level or "INFO").upper()
    if level_name not in _VALID_LEVELS:
        level_name = "INFO"
    numeric_level = getattr(logging, level_name)

    logger = logging.getLogger("anima")
    logger.setLevel(numeric_level)

    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(_log_dir() / f"local-{_today()}.log", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    has_console = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )
    if numeric_level == logging.DEBUG and not has_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console)

    logger.debug("Logging configured for entity=%s", entity_id)
    return logger


def log_evolution_event(event_type: str, details: str, entity_id: str = "default") -> None:
    """Append one line to the evolution event log."""
    timestamp = datetime.now(timezone.utc).isoformat()
    path = _log_dir() / f"evolution-events-{_today()}.log"
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{timestamp} | {event_type} | entity={entity_id} | {details}\n")


def log_interaction(
    entity_id: str,
    interaction_count: int,
    formation_score: float,
    memory_id: Optional[str] = None,
) -> None:
    memory = f"{memory_id[:8]}..." if memory_id else "none"
    log_evolution_event(
        "interaction",
        f"count={interaction_count}, formation_score={formation_score:.3f}, memory={memory}",
        entity_id=entity_id,
    )


def log_level_change(entity_id: str, previous: str, current: str, score: float) -> None:
    log_evolution_event(
        "level_change",
        f"from={previous}, to={current}, score={score:.3f}",
        entity_id=entity_id,
    )


def log_consolidation(
    entity_id: str, trigger: str, promoted: int, retained: int, discarded: int
) -> None:
    log_evolution_event(
        "consolidation",
        f"trigger={trigger}, promoted={promoted}, retained={retained}, discarded={discarded}",
        entity_id=entity_id,
    )
