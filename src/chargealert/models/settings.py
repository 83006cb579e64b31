"""User-configurable alert settings."""

from __future__ import annotations

from pydantic import field_validator

from chargealert._constants import DEFAULT_ALERT_THRESHOLD, clamp_threshold
from chargealert.models._base import ChargeAlertBaseModel


class Settings(ChargeAlertBaseModel):
    """Alert parameters plus the per-charge-cycle alert latch.

    Persisted as a flat record with the keys ``alertThreshold``,
    ``isEnabled``, ``soundEnabled``, ``vibrationEnabled`` and
    ``hasAlertedForCurrentCharge``.
    """

    alert_threshold: int = DEFAULT_ALERT_THRESHOLD
    """Battery percentage that triggers the alert while charging (1-100)."""
    is_enabled: bool = True
    """Master switch. Monitoring and estimation keep running when disabled."""
    sound_enabled: bool = True
    vibration_enabled: bool = True
    has_alerted_for_current_charge: bool = False
    """Latch: set once the alert fired in the current charge cycle."""

    @field_validator("alert_threshold")
    @classmethod
    def _clamp_threshold(cls, value: int) -> int:
        return clamp_threshold(value)

    def with_latch(self, alerted: bool) -> Settings:
        """Return a copy with ``has_alerted_for_current_charge`` set to *alerted*."""
        return self.model_copy(update={"has_alerted_for_current_charge": alerted})
