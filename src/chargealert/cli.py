"""Command line entry point.

Usage::

    chargealert run                      # monitor until interrupted
    chargealert status [--json]          # one reading plus current settings
    chargealert set --threshold 85 --no-sound

Configuration comes from ``CHARGEALERT_*`` environment variables; the
global options below override them.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from chargealert._constants import BATTERY_HEALTH_TIP
from chargealert._persistence import JsonFileBackend
from chargealert.config import NOTIFIER_CHOICES, SOURCE_CHOICES, MonitorConfig
from chargealert.exceptions import BatterySourceError, ChargeAlertConfigError
from chargealert.models.sample import BatteryReading
from chargealert.models.settings import Settings
from chargealert.runner import build_machine, build_source, run_monitor
from chargealert.state.policy import derive_phase, format_eta
from chargealert.state.store import SettingsStore

_logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chargealert",
        description="Alert once per charge cycle when the battery reaches a threshold.",
    )
    parser.add_argument("--settings", dest="settings_path", help="Settings JSON file")
    parser.add_argument("--source", choices=sorted(SOURCE_CHOICES), help="Battery source")
    parser.add_argument("--interval", dest="poll_interval", type=float, help="Poll interval in seconds")
    parser.add_argument(
        "--notifier",
        dest="notifiers",
        action="append",
        choices=sorted(NOTIFIER_CHOICES),
        help="Alert channel (repeatable)",
    )
    parser.add_argument("--webhook-url", dest="webhook_url", help="Webhook URL for the webhook channel")
    parser.add_argument("--mqtt-host", dest="mqtt_host", help="Broker host for the mqtt channel")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("run", help="Monitor the battery until interrupted")

    status = sub.add_parser("status", help="Show battery state and alert settings")
    status.add_argument("--json", action="store_true", help="Output as machine-readable JSON")

    settings = sub.add_parser("set", help="Update alert settings")
    settings.add_argument("--threshold", type=int, help="Alert threshold percent (clamped to 1-100)")
    settings.add_argument("--enabled", action=argparse.BooleanOptionalAction, default=None)
    settings.add_argument("--sound", action=argparse.BooleanOptionalAction, default=None)
    settings.add_argument("--vibration", action=argparse.BooleanOptionalAction, default=None)
    return parser


def _config_from_args(args: argparse.Namespace) -> MonitorConfig:
    overrides: dict[str, Any] = {}
    for name in ("settings_path", "source", "poll_interval", "webhook_url", "mqtt_host"):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    if args.notifiers:
        overrides["notifiers"] = tuple(args.notifiers)
    return MonitorConfig.from_env(**overrides)


def _status_payload(reading: BatteryReading | None, settings: Settings) -> dict[str, Any]:
    level = reading.level if reading is not None else None
    charging = bool(reading.charging) if reading is not None else False
    eta: int | None = None
    if charging and level is not None and level >= settings.alert_threshold:
        eta = 0
    return {
        "level": level,
        "charging": charging,
        "phase": str(derive_phase(is_charging=charging, has_alerted=settings.has_alerted_for_current_charge)),
        "eta": format_eta(eta) if charging else None,
        "settings": settings.to_payload(),
        "tip": BATTERY_HEALTH_TIP,
    }


def _cmd_status(config: MonitorConfig, *, as_json: bool) -> int:
    source = build_source(config)
    try:
        reading = asyncio.run(source.read())
    except BatterySourceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    settings = SettingsStore(JsonFileBackend(config.settings_path)).load()
    payload = _status_payload(reading, settings)
    if as_json:
        print(json.dumps(payload, indent=2))
        return 0

    level_text = f"{payload['level']}%" if payload["level"] is not None else "unknown"
    print(f"Battery Level:   {level_text}")
    print(f"Status:          {'Charging' if payload['charging'] else 'Not Charging'}")
    print(f"Alert Threshold: {settings.alert_threshold}%")
    print(f"Alerts:          {'on' if settings.is_enabled else 'off'} (phase: {payload['phase']})")
    if payload["eta"] is not None:
        print(f"Time to alert:   {payload['eta']}")
    print()
    print(f"Tip: {BATTERY_HEALTH_TIP}")
    return 0


def _cmd_set(config: MonitorConfig, args: argparse.Namespace) -> int:
    machine = build_machine(config)
    update: dict[str, Any] = {}
    if args.threshold is not None:
        update["alert_threshold"] = args.threshold
    if args.enabled is not None:
        update["is_enabled"] = args.enabled
    if args.sound is not None:
        update["sound_enabled"] = args.sound
    if args.vibration is not None:
        update["vibration_enabled"] = args.vibration

    settings = machine.update_settings(machine.settings.model_copy(update=update))
    print(json.dumps(settings.to_payload(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
    except ChargeAlertConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.command == "status":
        return _cmd_status(config, as_json=args.json)
    if args.command == "set":
        return _cmd_set(config, args)

    try:
        asyncio.run(run_monitor(config))
    except KeyboardInterrupt:
        _logger.info("Interrupted; stopping monitor")
    return 0


if __name__ == "__main__":
    sys.exit(main())
