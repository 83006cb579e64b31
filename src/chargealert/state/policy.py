"""Alert decision policy.

Pure functions only; the state machine owns all mutation.
"""

from __future__ import annotations

from chargealert.models.monitor import AlertPhase
from chargealert.models.settings import Settings


def should_fire_alert(settings: Settings, *, is_charging: bool, level: int) -> bool:
    """Whether an alert must be emitted for this observation."""
    return (
        settings.is_enabled
        and is_charging
        and level >= settings.alert_threshold
        and not settings.has_alerted_for_current_charge
    )


def derive_phase(*, is_charging: bool, has_alerted: bool) -> AlertPhase:
    if not is_charging:
        return AlertPhase.IDLE
    return AlertPhase.FIRED if has_alerted else AlertPhase.ARMED


def format_eta(minutes: int | None) -> str:
    """Human readable ETA text."""
    if minutes is None:
        return "Calculating..."
    if minutes <= 0:
        return "Reached"
    return f"~{minutes} min"
