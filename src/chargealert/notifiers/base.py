"""Notifier interface and simple implementations."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from chargealert.exceptions import NotifierError
from chargealert.models.alert import AlertEvent

_logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Delivers one user-visible alert per event.

    Raises :class:`NotifierError` when delivery fails. Callers do not retry.
    """

    async def notify(self, event: AlertEvent) -> None:
        ...


class LoggingNotifier:
    """Writes alerts to the log. Used when no delivery channel is configured."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    async def notify(self, event: AlertEvent) -> None:
        self._logger.warning(
            "%s %s (sound=%s vibration=%s)",
            event.title,
            event.message,
            event.sound_enabled,
            event.vibration_enabled,
        )


class CompositeNotifier:
    """Fans an event out to several channels.

    Every channel is attempted; if any failed, a single
    :class:`NotifierError` naming the failed channels is raised afterwards.
    """

    def __init__(self, notifiers: Sequence[Notifier]) -> None:
        self._notifiers = tuple(notifiers)

    @property
    def notifiers(self) -> tuple[Notifier, ...]:
        return self._notifiers

    async def notify(self, event: AlertEvent) -> None:
        failed: list[str] = []
        for notifier in self._notifiers:
            try:
                await notifier.notify(event)
            except NotifierError as exc:
                _logger.debug("Notifier %r failed", notifier, exc_info=True)
                failed.append(exc.channel or type(notifier).__name__)
        if failed:
            raise NotifierError(f"Alert delivery failed on: {', '.join(failed)}", channel="composite")

    async def close(self) -> None:
        for notifier in self._notifiers:
            await close_notifier(notifier)


async def close_notifier(notifier: Notifier) -> None:
    """Release resources held by *notifier*, if it holds any."""
    close = getattr(notifier, "close", None)
    if close is not None:
        await close()
