"""Monitor configuration for chargealert."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from chargealert._constants import DEFAULT_POLL_INTERVAL, SETTINGS_FILENAME, SYSFS_BATTERY_PATHS
from chargealert.exceptions import ChargeAlertConfigError

SOURCE_CHOICES = frozenset({"auto", "sysfs", "psutil"})
NOTIFIER_CHOICES = frozenset({"log", "desktop", "webhook", "mqtt"})


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.replace(os.pathsep, ",").split(",") if item.strip())


def _env_number(env_key: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)
    except ValueError as exc:
        raise ChargeAlertConfigError(f"{env_key} must be a number, got {value!r}") from exc


def default_settings_path() -> Path:
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "chargealert" / SETTINGS_FILENAME


@dataclasses.dataclass(frozen=True)
class MonitorConfig:
    """Runtime configuration.

    Parameters
    ----------
    settings_path : Path
        JSON file holding the persisted alert settings.
    poll_interval : float
        Seconds between battery reads for polled sources.
    source : str
        ``"auto"``, ``"sysfs"`` or ``"psutil"``. ``auto`` prefers sysfs
        when a battery directory exists.
    sysfs_paths : tuple of str
        Candidate ``/sys/class/power_supply`` battery directories.
    notifiers : tuple of str
        Delivery channels: any of ``"log"``, ``"desktop"``, ``"webhook"``,
        ``"mqtt"``.
    notify_command : str
        Executable used by the desktop channel.
    webhook_url : str or None
        Target URL for the webhook channel.
    webhook_timeout : float
        Total request timeout for the webhook channel, in seconds.
    mqtt_host, mqtt_port, mqtt_topic : str, int, str
        Broker address and topic for the MQTT channel.
    mqtt_username, mqtt_password : str or None
        Optional broker credentials.
    mqtt_tls : bool
        Connect to the broker over TLS.
    """

    settings_path: Path = dataclasses.field(default_factory=default_settings_path)
    poll_interval: float = DEFAULT_POLL_INTERVAL
    source: str = "auto"
    sysfs_paths: tuple[str, ...] = SYSFS_BATTERY_PATHS
    notifiers: tuple[str, ...] = ("desktop",)
    notify_command: str = "notify-send"
    webhook_url: str | None = None
    webhook_timeout: float = 10.0
    mqtt_host: str | None = None
    mqtt_port: int = 1883
    mqtt_topic: str = "chargealert/alert"
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_tls: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings_path", Path(self.settings_path).expanduser())
        if self.poll_interval <= 0:
            raise ChargeAlertConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.source not in SOURCE_CHOICES:
            raise ChargeAlertConfigError(f"source must be one of {sorted(SOURCE_CHOICES)}, got {self.source!r}")
        if not self.notifiers:
            raise ChargeAlertConfigError("at least one notifier is required")
        unknown = [name for name in self.notifiers if name not in NOTIFIER_CHOICES]
        if unknown:
            raise ChargeAlertConfigError(f"unknown notifier(s) {unknown}; choose from {sorted(NOTIFIER_CHOICES)}")
        if "webhook" in self.notifiers and not self.webhook_url:
            raise ChargeAlertConfigError("webhook notifier requires webhook_url")
        if "mqtt" in self.notifiers and not self.mqtt_host:
            raise ChargeAlertConfigError("mqtt notifier requires mqtt_host")

    @classmethod
    def from_env(cls, **overrides: Any) -> MonitorConfig:
        """Create configuration from ``CHARGEALERT_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        ChargeAlertConfigError
            If a variable cannot be parsed or the result is inconsistent.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CHARGEALERT_SETTINGS_PATH": "settings_path",
            "CHARGEALERT_SOURCE": "source",
            "CHARGEALERT_NOTIFY_COMMAND": "notify_command",
            "CHARGEALERT_WEBHOOK_URL": "webhook_url",
            "CHARGEALERT_MQTT_HOST": "mqtt_host",
            "CHARGEALERT_MQTT_TOPIC": "mqtt_topic",
            "CHARGEALERT_MQTT_USERNAME": "mqtt_username",
            "CHARGEALERT_MQTT_PASSWORD": "mqtt_password",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "CHARGEALERT_POLL_INTERVAL": ("poll_interval", float),
            "CHARGEALERT_WEBHOOK_TIMEOUT": ("webhook_timeout", float),
            "CHARGEALERT_MQTT_PORT": ("mqtt_port", int),
        }
        for env_key, (field_name, kind) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, kind)

        notifiers_env = env.get("CHARGEALERT_NOTIFIERS")
        if notifiers_env is not None and "notifiers" not in overrides:
            config_kwargs["notifiers"] = _env_list(notifiers_env)

        sysfs_env = env.get("CHARGEALERT_SYSFS_PATHS")
        if sysfs_env is not None and "sysfs_paths" not in overrides:
            config_kwargs["sysfs_paths"] = _env_list(sysfs_env)

        if "mqtt_tls" not in overrides:
            config_kwargs["mqtt_tls"] = _env_bool(env.get("CHARGEALERT_MQTT_TLS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
