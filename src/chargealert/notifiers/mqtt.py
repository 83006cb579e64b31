"""MQTT notifier for home-automation setups."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, cast

import paho.mqtt.client as mqtt

from chargealert.exceptions import NotifierError
from chargealert.models.alert import AlertEvent

_logger = logging.getLogger(__name__)


class MqttNotifier:
    """Publishes alerts as JSON on an MQTT topic.

    The paho network loop runs in its own thread; publishes are awaited
    via :func:`asyncio.to_thread` so the event loop never blocks.
    """

    def __init__(
        self,
        host: str,
        *,
        port: int = 1883,
        topic: str = "chargealert/alert",
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = False,
        keepalive: int = 60,
        publish_timeout: float = 5.0,
        client: mqtt.Client | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._topic = topic
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._keepalive = keepalive
        self._publish_timeout = publish_timeout
        self._client = client
        self._connected = client is not None

    @property
    def topic(self) -> str:
        return self._topic

    def _connect(self) -> mqtt.Client:
        if self._client is not None and self._connected:
            return self._client

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            protocol=mqtt.MQTTv311,
        )
        client.enable_logger(_logger)
        if self._username:
            client.username_pw_set(self._username, self._password)
        if self._use_tls:
            client.tls_set()

        _logger.debug("MQTT connecting host=%s port=%s", self._host, self._port)
        client.connect(self._host, self._port, keepalive=self._keepalive)
        client.loop_start()
        self._client = client
        self._connected = True
        return client

    def _publish_sync(self, payload: str) -> None:
        client = self._connect()
        info = client.publish(self._topic, payload, qos=1)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise NotifierError(f"MQTT publish rejected: {mqtt.error_string(info.rc)}", channel="mqtt")
        info.wait_for_publish(timeout=self._publish_timeout)
        if not info.is_published():
            raise NotifierError(
                f"MQTT publish not acknowledged within {self._publish_timeout}s",
                channel="mqtt",
            )

    async def notify(self, event: AlertEvent) -> None:
        payload = json.dumps(event.to_payload(), separators=(",", ":"))
        try:
            await asyncio.to_thread(self._publish_sync, payload)
        except (OSError, RuntimeError, ValueError) as exc:
            raise NotifierError(f"MQTT publish failed: {exc}", channel="mqtt") from exc
        _logger.debug("MQTT alert published topic=%s", self._topic)

    async def close(self) -> None:
        """Disconnect and stop the network loop."""
        await asyncio.to_thread(self._close_sync)

    def _close_sync(self) -> None:
        client = self._client
        self._client = None
        was_connected = self._connected
        self._connected = False
        if client is None:
            return
        try:
            if was_connected:
                client.disconnect()
        finally:
            client.loop_stop()
