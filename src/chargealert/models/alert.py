"""Alert event emitted when the charge threshold is crossed."""

from __future__ import annotations

from pydantic import Field

from chargealert._constants import ALERT_TITLE, alert_message
from chargealert.models._base import ChargeAlertBaseModel, UtcDatetime, utcnow


class AlertEvent(ChargeAlertBaseModel):
    """One alert, emitted at most once per charge cycle."""

    level: int
    sound_enabled: bool
    vibration_enabled: bool
    threshold: int | None = None
    """Threshold in effect when the alert fired."""
    fired_at: UtcDatetime = Field(default_factory=utcnow)

    @property
    def title(self) -> str:
        return ALERT_TITLE

    @property
    def message(self) -> str:
        return alert_message(self.level)
