"""Data models for chargealert."""

from chargealert.models._base import ChargeAlertBaseModel, UtcDatetime
from chargealert.models.alert import AlertEvent
from chargealert.models.monitor import AlertPhase, MonitorState
from chargealert.models.sample import BatteryReading, BatterySample
from chargealert.models.settings import Settings

__all__ = [
    "AlertEvent",
    "AlertPhase",
    "BatteryReading",
    "BatterySample",
    "ChargeAlertBaseModel",
    "MonitorState",
    "Settings",
    "UtcDatetime",
]
