"""Battery sources."""

from chargealert.sources.base import BatterySource, poll_readings
from chargealert.sources.psutil_source import PsutilBatterySource
from chargealert.sources.sysfs import SysfsBatterySource, find_battery_dir

__all__ = [
    "BatterySource",
    "PsutilBatterySource",
    "SysfsBatterySource",
    "find_battery_dir",
    "poll_readings",
]
