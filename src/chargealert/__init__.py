"""chargealert - one-shot battery charge threshold alerts."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("chargealert")
except PackageNotFoundError:
    __version__ = "0+local"
from chargealert._constants import BATTERY_HEALTH_TIP, clamp_threshold
from chargealert._persistence import JsonFileBackend, MemoryBackend, SettingsBackend
from chargealert.config import MonitorConfig
from chargealert.exceptions import (
    BatterySourceError,
    ChargeAlertConfigError,
    ChargeAlertError,
    NotifierError,
    SettingsStoreError,
)
from chargealert.models import (
    AlertEvent,
    AlertPhase,
    BatteryReading,
    BatterySample,
    MonitorState,
    Settings,
)
from chargealert.runner import BatteryMonitor, build_notifier, build_source, run_monitor
from chargealert.state import AlertStateMachine, RateEstimator, SettingsStore, format_eta

__all__ = [
    "__version__",
    "AlertEvent",
    "AlertPhase",
    "AlertStateMachine",
    "BATTERY_HEALTH_TIP",
    "BatteryMonitor",
    "BatteryReading",
    "BatterySample",
    "BatterySourceError",
    "ChargeAlertConfigError",
    "ChargeAlertError",
    "JsonFileBackend",
    "MemoryBackend",
    "MonitorConfig",
    "MonitorState",
    "NotifierError",
    "RateEstimator",
    "Settings",
    "SettingsBackend",
    "SettingsStore",
    "SettingsStoreError",
    "build_notifier",
    "build_source",
    "clamp_threshold",
    "format_eta",
    "run_monitor",
]
