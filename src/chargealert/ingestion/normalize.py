"""Normalization helpers.

Centralizes defensive parsing of battery levels so the state machine only
ever receives valid samples.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from chargealert.models.sample import BatteryReading, BatterySample

_UNKNOWN_MARKERS = frozenset({"", "--", "unknown", "n/a"})


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().lower() in _UNKNOWN_MARKERS:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_percent(value: Any) -> int | None:
    """Normalize a 0-100 percentage reading.

    - Missing/unparseable/negative -> None (unknown)
    - Above 100 -> 100
    - Fractional percents are rounded half up
    """
    parsed = safe_float(value)
    if parsed is None or parsed < 0:
        return None
    return _round_half_up(min(parsed, 100.0))


def to_sample(
    reading: BatteryReading,
    previous_level: int | None,
    now: datetime,
) -> BatterySample | None:
    """Convert a source reading into a sample for the state machine.

    An unknown level means "no change": the previous level is reused while
    the charging flag still applies. Returns ``None`` when no level has ever
    been observed.
    """
    level = normalize_percent(reading.level)
    if level is None:
        level = previous_level
    if level is None:
        return None
    return BatterySample(level=level, charging=bool(reading.charging), timestamp=now)
