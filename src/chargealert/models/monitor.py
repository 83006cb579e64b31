"""Observable monitor state."""

from __future__ import annotations

from enum import StrEnum

from chargealert.models._base import ChargeAlertBaseModel


class AlertPhase(StrEnum):
    """Phase derived from ``(is_charging, has_alerted_for_current_charge)``."""

    IDLE = "idle"
    ARMED = "armed"
    FIRED = "fired"


class MonitorState(ChargeAlertBaseModel):
    """Point-in-time view of the alert state machine."""

    battery_level: int = 0
    is_charging: bool = False
    estimated_minutes_to_threshold: int | None = None
    alert_threshold: int
    phase: AlertPhase = AlertPhase.IDLE
