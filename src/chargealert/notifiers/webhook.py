"""HTTP webhook notifier."""

from __future__ import annotations

import logging

import aiohttp

from chargealert.exceptions import NotifierError
from chargealert.models.alert import AlertEvent

_logger = logging.getLogger(__name__)


class WebhookNotifier:
    """POSTs the alert as JSON to a webhook URL.

    The payload is the event's camelCase record plus ``title`` and
    ``message``. An externally supplied ``aiohttp.ClientSession`` is reused
    and never closed by this class.
    """

    def __init__(
        self,
        url: str,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._external_session = session is not None
        self._http_session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @staticmethod
    def build_payload(event: AlertEvent) -> dict[str, object]:
        payload: dict[str, object] = event.to_payload()
        payload["title"] = event.title
        payload["message"] = event.message
        return payload

    async def notify(self, event: AlertEvent) -> None:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        try:
            async with self._http_session.post(
                self._url,
                json=self.build_payload(event),
                timeout=self._timeout,
            ) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise NotifierError(
                        f"Webhook returned HTTP {response.status}: {body[:200]}",
                        channel="webhook",
                    )
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise NotifierError(f"Webhook request failed: {exc}", channel="webhook") from exc
        _logger.debug("Webhook alert delivered to %s", self._url)

    async def close(self) -> None:
        if self._http_session is not None and not self._external_session:
            await self._http_session.close()
        self._http_session = None
