"""Cross-platform battery source backed by :mod:`psutil`."""

from __future__ import annotations

import asyncio

import psutil

from chargealert.exceptions import BatterySourceError
from chargealert.ingestion.normalize import normalize_percent
from chargealert.models.sample import BatteryReading


class PsutilBatterySource:
    """Uses ``psutil.sensors_battery()``; ``power_plugged`` is the charging flag."""

    def _read_sync(self) -> BatteryReading | None:
        battery = psutil.sensors_battery()
        if battery is None:
            raise BatterySourceError("psutil reports no battery on this system")
        if battery.power_plugged is None:
            return None
        return BatteryReading(level=normalize_percent(battery.percent), charging=bool(battery.power_plugged))

    async def read(self) -> BatteryReading | None:
        return await asyncio.to_thread(self._read_sync)
