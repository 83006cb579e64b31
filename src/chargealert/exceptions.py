"""Custom exception hierarchy for chargealert."""

from __future__ import annotations


class ChargeAlertError(Exception):
    """Base exception for all chargealert errors."""


class ChargeAlertConfigError(ChargeAlertError):
    """Invalid or missing configuration."""


class SettingsStoreError(ChargeAlertError):
    """Settings backend could not be read or written.

    Raised by persistence backends only.
    :class:`~chargealert.state.store.SettingsStore` catches it so that a
    broken store never interrupts monitoring.
    """


class BatterySourceError(ChargeAlertError):
    """No usable battery was found, or the source could not be read."""


class NotifierError(ChargeAlertError):
    """Alert delivery failed on a notification channel."""

    def __init__(
        self,
        message: str,
        *,
        channel: str = "",
    ) -> None:
        self.channel = channel
        super().__init__(message)
