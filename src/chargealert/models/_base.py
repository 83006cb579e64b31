"""Base model for chargealert records.

Every record inherits from :class:`ChargeAlertBaseModel` which provides:

* ``alias_generator=to_camel`` so the persisted/serialized form uses
  camelCase keys (``alertThreshold``) while Python code uses snake_case.
* ``populate_by_name=True`` so either spelling is accepted on input.
* Frozen instances; updates go through ``model_copy(update=...)``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_tz_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(ensure_tz_aware)]
"""Annotated datetime that is always timezone-aware."""


class ChargeAlertBaseModel(BaseModel):
    """Base for chargealert data records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
