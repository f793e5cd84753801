"""
Utility functions and performance helpers for lycanstats.

This module provides:
- Performance monitoring for pipeline stages
- Timestamp and number coercion for raw game-log fields
- Nullable rate helpers
- Content hashing for game fingerprints
- Atomic JSON writes
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """
    Context manager for monitoring performance of code blocks.

    Usage:
        with PerformanceMonitor("aggregating modded slice"):
            aggregate(games)
    """

    def __init__(self, operation_name: str, log_level: int = logging.INFO):
        self.operation_name = operation_name
        self.log_level = log_level
        self.start_time: float | None = None
        self.elapsed: float = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - (self.start_time or 0)
        if exc_type is not None:
            logger.error(f"{self.operation_name} failed after {self.elapsed:.3f}s: {exc_val}")
        else:
            logger.log(self.log_level, f"{self.operation_name} completed in {self.elapsed:.3f}s")
        return False


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 timestamp from the game log.

    Naive timestamps are assumed to be UTC so that durations can always be
    computed. Anything unparseable yields None.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_order_timestamp(value: datetime | None) -> str:
    """Fixed-width UTC rendering so string comparison matches time order."""
    if value is None:
        return ""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")


def to_float(value: Any) -> float | None:
    """Coerce a raw numeric field, treating bools, blanks and junk as missing."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if result != result:  # NaN
        return None
    return result


def stored_number(value: Any, name: str, integral: bool = False) -> int | float:
    """
    Check a number read back from our own JSON files.

    Unlike to_float nothing is coerced: a value of the wrong type means the
    file was not written by us.

    Raises:
        TypeError: if the value is not a finite number (an int when integral)
    """
    allowed = int if integral else (int, float)
    if isinstance(value, bool) or not isinstance(value, allowed):
        raise TypeError(f"{name} must be {'an int' if integral else 'a number'}, got {value!r}")
    if value != value or value in (float("inf"), float("-inf")):
        raise TypeError(f"{name} must be finite, got {value!r}")
    return value


def safe_rate(
    numerator: float,
    denominator: float,
    min_denominator: float = 0,
    scale: float = 100.0,
) -> float | None:
    """
    Ratio of numerator to denominator, scaled.

    Returns None unless the denominator is positive and at least
    ``min_denominator``. A null rate means "insufficient sample".
    """
    if denominator <= 0 or denominator < min_denominator:
        return None
    return numerator / denominator * scale


def compute_content_hash(content: str) -> str:
    """Compute hash of string content."""
    return hashlib.sha256(content.encode()).hexdigest()


def fingerprint_record(record: dict[str, Any]) -> str:
    """Stable content hash of a raw JSON record."""
    canonical = json.dumps(record, sort_keys=True, ensure_ascii=False, default=str)
    return compute_content_hash(canonical)


def format_percentage(value: float | None, decimals: int = 1) -> str:
    """Format an already-scaled percentage, or a dash when missing."""
    if value is None:
        return "-"
    return f"{value:.{decimals}f}%"


def atomic_write_json(path: Path, payload: Any, indent: int | None = 2) -> None:
    """
    Write JSON so readers only ever see the old or the new file.

    The payload goes to a sibling ``.tmp`` file which is flushed, fsynced and
    then renamed over the target.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=indent)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)
