"""Numeric and text helpers shared by the evolution engine."""

import math
import os
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence


def utc_now() -> datetime:
    """Get the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def get_anima_home() -> Path:
    """Directory for anima logs and local data.

    Honors ``ANIMA_DATA_DIR``; falls back to ``~/.anima``.
    """
    override = os.environ.get("ANIMA_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".anima"


def safe_float(value: Any, default: float = 0.0) -> float:
    """Convert to float, mapping unconvertible values and NaN to ``default``."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result):
        return default
    return result


def clamp(
    value: Any,
    low: float = 0.0,
    high: float = 1.0,
    default: Optional[float] = None,
) -> float:
    """Clamp ``value`` into ``[low, high]``.

    NaN and unconvertible input map to ``default`` (``low`` when unset).
    Infinities clamp to the nearest bound.
    """
    fallback = low if default is None else default
    result = safe_float(value, fallback)
    return max(low, min(high, result))


def mean(values: Sequence[float], default: float = 0.0) -> float:
    if not values:
        return default
    return math.fsum(values) / len(values)


def pstdev(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    return math.sqrt(math.fsum((v - avg) ** 2 for v in values) / len(values))


def tokenize(text: Optional[str]) -> List[str]:
    """Lower-case whitespace tokens with surrounding punctuation stripped."""
    if not text:
        return []
    tokens = []
    for raw in text.split():
        word = raw.strip(string.punctuation).lower()
        if word:
            tokens.append(word)
    return tokens


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop repeats, keeping the first occurrence of each item."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
