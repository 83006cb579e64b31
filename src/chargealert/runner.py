"""Async monitor loop wiring sources, the state machine and notifiers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable, Callable
from datetime import datetime

from chargealert._persistence import JsonFileBackend
from chargealert.config import MonitorConfig
from chargealert.exceptions import NotifierError
from chargealert.ingestion.normalize import to_sample
from chargealert.models._base import utcnow
from chargealert.models.alert import AlertEvent
from chargealert.models.sample import BatteryReading
from chargealert.notifiers.base import CompositeNotifier, LoggingNotifier, Notifier, close_notifier
from chargealert.notifiers.desktop import DesktopNotifier
from chargealert.notifiers.mqtt import MqttNotifier
from chargealert.notifiers.webhook import WebhookNotifier
from chargealert.sources.base import BatterySource, poll_readings
from chargealert.sources.psutil_source import PsutilBatterySource
from chargealert.sources.sysfs import SysfsBatterySource, find_battery_dir
from chargealert.state.machine import AlertStateMachine
from chargealert.state.store import SettingsStore

_logger = logging.getLogger(__name__)


def build_source(config: MonitorConfig) -> BatterySource:
    """Pick the battery source named by *config*."""
    if config.source == "sysfs":
        return SysfsBatterySource(config.sysfs_paths)
    if config.source == "psutil":
        return PsutilBatterySource()
    if find_battery_dir(config.sysfs_paths) is not None:
        return SysfsBatterySource(config.sysfs_paths)
    return PsutilBatterySource()


def _build_channel(name: str, config: MonitorConfig) -> Notifier:
    if name == "desktop":
        return DesktopNotifier(config.notify_command)
    if name == "webhook":
        return WebhookNotifier(config.webhook_url or "", timeout=config.webhook_timeout)
    if name == "mqtt":
        return MqttNotifier(
            config.mqtt_host or "",
            port=config.mqtt_port,
            topic=config.mqtt_topic,
            username=config.mqtt_username,
            password=config.mqtt_password,
            use_tls=config.mqtt_tls,
        )
    return LoggingNotifier()


def build_notifier(config: MonitorConfig) -> Notifier:
    """Build the delivery channel(s) named by *config*."""
    channels = [_build_channel(name, config) for name in dict.fromkeys(config.notifiers)]
    if len(channels) == 1:
        return channels[0]
    return CompositeNotifier(channels)


def build_machine(config: MonitorConfig) -> AlertStateMachine:
    return AlertStateMachine(SettingsStore(JsonFileBackend(config.settings_path)))


class BatteryMonitor:
    """Feeds readings through the state machine one at a time.

    Readings are serialized with an :class:`asyncio.Lock`, so concurrent
    producers may call :meth:`process` safely. Alert delivery failures are
    logged and never retried; the latch stays set.
    """

    def __init__(
        self,
        machine: AlertStateMachine,
        notifier: Notifier,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._machine = machine
        self._notifier = notifier
        self._clock = clock
        self._lock = asyncio.Lock()
        self._has_level = False

    @property
    def machine(self) -> AlertStateMachine:
        return self._machine

    async def process(self, reading: BatteryReading) -> AlertEvent | None:
        """Apply one reading; returns the alert that was dispatched, if any."""
        async with self._lock:
            previous = self._machine.battery_level if self._has_level else None
            sample = to_sample(reading, previous, self._clock())
            if sample is None:
                _logger.debug("Ignoring reading without a known level: %s", reading)
                return None
            self._has_level = True
            event = self._machine.apply(sample)
            _logger.debug(
                "Sample level=%d charging=%s eta=%s",
                sample.level,
                sample.charging,
                self._machine.estimated_minutes_to_threshold,
            )
            if event is not None:
                await self._dispatch(event)
            return event

    async def _dispatch(self, event: AlertEvent) -> None:
        try:
            await self._notifier.notify(event)
        except NotifierError as exc:
            _logger.warning("Alert delivery failed (%s): %s", exc.channel or "notifier", exc)

    async def run(self, readings: AsyncIterable[BatteryReading]) -> None:
        """Consume *readings* until the stream ends or the task is cancelled."""
        async for reading in readings:
            await self.process(reading)

    async def close(self) -> None:
        await close_notifier(self._notifier)


async def run_monitor(config: MonitorConfig) -> None:
    """Run the monitor with sources and channels built from *config*."""
    monitor = BatteryMonitor(build_machine(config), build_notifier(config))
    source = build_source(config)
    _logger.info(
        "Monitoring battery via %s every %ss (threshold %d%%)",
        type(source).__name__,
        config.poll_interval,
        monitor.machine.settings.alert_threshold,
    )
    try:
        await monitor.run(poll_readings(source, config.poll_interval))
    finally:
        await monitor.close()
