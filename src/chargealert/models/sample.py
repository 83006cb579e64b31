"""Battery observations."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from chargealert.models._base import ChargeAlertBaseModel, UtcDatetime, utcnow


@dataclass(frozen=True)
class BatteryReading:
    """Raw observation produced by a battery source.

    ``level`` is ``None`` when the platform reports the level as unknown.
    """

    level: int | None
    charging: bool


class BatterySample(ChargeAlertBaseModel):
    """A validated observation accepted by the alert state machine."""

    level: int = Field(..., ge=0, le=100)
    charging: bool
    timestamp: UtcDatetime = Field(default_factory=utcnow)
