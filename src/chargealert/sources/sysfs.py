"""Linux ``/sys/class/power_supply`` battery source."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from chargealert._constants import SYSFS_BATTERY_PATHS, SYSFS_CHARGING_STATES
from chargealert.exceptions import BatterySourceError
from chargealert.ingestion.normalize import normalize_percent
from chargealert.models.sample import BatteryReading

_logger = logging.getLogger(__name__)


def find_battery_dir(paths: Sequence[str | Path]) -> Path | None:
    """Return the first candidate directory that exposes a ``capacity`` file."""
    for candidate in paths:
        path = Path(candidate)
        if (path / "capacity").is_file():
            return path
    return None


class SysfsBatterySource:
    """Reads ``capacity`` and ``status`` from the first available battery.

    ``Full`` counts as charging: the charger is still connected. Attribute
    files are ASCII; undecodable content counts as unreadable.
    """

    def __init__(self, paths: Sequence[str | Path] = SYSFS_BATTERY_PATHS) -> None:
        self._paths = tuple(paths)
        self._battery_dir: Path | None = None

    @property
    def battery_dir(self) -> Path | None:
        return self._battery_dir

    def _resolve(self) -> Path:
        if self._battery_dir is None:
            self._battery_dir = find_battery_dir(self._paths)
        if self._battery_dir is None:
            raise BatterySourceError(f"No battery found in {', '.join(map(str, self._paths))}")
        return self._battery_dir

    def _read_sync(self) -> BatteryReading | None:
        battery = self._resolve()
        try:
            status = (battery / "status").read_text(encoding="ascii").strip().lower()
        except (OSError, UnicodeDecodeError):
            _logger.debug("Cannot read %s/status", battery, exc_info=True)
            return None

        try:
            level = normalize_percent((battery / "capacity").read_text(encoding="ascii").strip())
        except (OSError, UnicodeDecodeError):
            _logger.debug("Cannot read %s/capacity", battery, exc_info=True)
            level = None

        return BatteryReading(level=level, charging=status in SYSFS_CHARGING_STATES)

    async def read(self) -> BatteryReading | None:
        return await asyncio.to_thread(self._read_sync)
