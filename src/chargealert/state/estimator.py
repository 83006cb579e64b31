"""Charge-rate estimation.

Consumes ``(level, timestamp)`` samples while charging and produces a
smoothed rate in percent per minute, plus an ETA to the alert threshold.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass
from datetime import datetime

from chargealert._constants import MAX_RATE_SAMPLES, MIN_USABLE_RATE

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LevelSample:
    level: int
    time: datetime


class RateEstimator:
    """Moving-average charge-rate estimator.

    Rates are only recorded for strictly increasing levels within one
    charging session. A level regression while still charging starts a
    fresh baseline instead of averaging across the dip.
    """

    def __init__(self, *, max_samples: int = MAX_RATE_SAMPLES) -> None:
        self._charging = False
        self._last_sample: LevelSample | None = None
        self._recent_rates: deque[float] = deque(maxlen=max_samples)

    @property
    def is_charging(self) -> bool:
        return self._charging

    @property
    def last_sample(self) -> LevelSample | None:
        return self._last_sample

    @property
    def recent_rates(self) -> tuple[float, ...]:
        return tuple(self._recent_rates)

    @property
    def average_rate(self) -> float | None:
        """Mean of the recorded rates, or ``None`` when there are none."""
        if not self._recent_rates:
            return None
        return sum(self._recent_rates) / len(self._recent_rates)

    def on_charging_started(self, level: int, now: datetime) -> None:
        self._charging = True
        self._last_sample = LevelSample(level, now)
        self._recent_rates.clear()

    def on_charging_stopped(self) -> None:
        self._charging = False
        self._last_sample = None
        self._recent_rates.clear()

    def on_sample(self, level: int, now: datetime) -> None:
        """Record a sample taken while charging continues."""
        self._charging = True
        last = self._last_sample
        if last is None:
            self._last_sample = LevelSample(level, now)
            return

        if level > last.level:
            delta_minutes = (now - last.time).total_seconds() / 60.0
            if delta_minutes > 0:
                self._recent_rates.append((level - last.level) / delta_minutes)
            self._last_sample = LevelSample(level, now)
        elif level < last.level:
            _logger.debug("Level dipped while charging (%d -> %d); resetting estimate", last.level, level)
            self._last_sample = LevelSample(level, now)
            self._recent_rates.clear()

    def estimate_minutes_to_threshold(self, current_level: int, threshold: int) -> int | None:
        """Minutes until *threshold* is reached, ``0`` if already there.

        Returns ``None`` when not charging, when no rate has been measured
        yet, or when the average rate is too small to be meaningful.
        """
        if not self._charging:
            return None
        if current_level >= threshold:
            return 0
        average = self.average_rate
        if average is None or average <= MIN_USABLE_RATE:
            return None
        return math.ceil((threshold - current_level) / average)
