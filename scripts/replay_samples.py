#!/usr/bin/env python3
"""Replay a recorded charge session through the alert state machine.

Reads a CSV with ``minute,level,charging`` rows and prints, per sample,
the derived phase and ETA plus any alert that would have fired. Settings
are kept in memory; nothing is persisted.

Usage
-----
::

    python scripts/replay_samples.py session.csv --threshold 80

CSV example::

    minute,level,charging
    0,78,1
    3,80,1
    5,81,1
    6,81,0

Options::

    --threshold N     Alert threshold (default: 80)
    --disabled        Replay with alerts disabled
    --json            Output one JSON object per sample
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from chargealert import AlertStateMachine, MemoryBackend, Settings, SettingsStore, format_eta  # noqa: E402
from chargealert.ingestion.normalize import normalize_percent, safe_float  # noqa: E402

_START = datetime(2000, 1, 1, tzinfo=UTC)


def _parse_charging(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "charging", "full"}


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("csv_file", type=Path)
    parser.add_argument("--threshold", type=int, default=80)
    parser.add_argument("--disabled", action="store_true")
    parser.add_argument("--json", action="store_true")
    args = parser.parse_args()

    machine = AlertStateMachine(SettingsStore(MemoryBackend()))
    machine.update_settings(Settings(alert_threshold=args.threshold, is_enabled=not args.disabled))

    alerts = 0
    with args.csv_file.open(newline="") as handle:
        for row_no, row in enumerate(csv.DictReader(handle), start=2):
            minute = safe_float(row.get("minute"))
            level = normalize_percent(row.get("level"))
            if minute is None or level is None:
                print(f"line {row_no}: skipping unusable row {row}", file=sys.stderr)
                continue

            event = machine.on_sample(level, _parse_charging(row.get("charging", "")), _START + timedelta(minutes=minute))
            alerts += event is not None
            state = machine.snapshot()
            if args.json:
                record = state.to_payload()
                record["minute"] = minute
                record["alert"] = event.to_payload() if event is not None else None
                print(json.dumps(record))
            else:
                eta = format_eta(state.estimated_minutes_to_threshold) if state.is_charging else "-"
                marker = "  <-- ALERT" if event is not None else ""
                print(f"{minute:>8.1f}  {level:>3d}%  {state.phase:<6}  eta={eta}{marker}")

    if not args.json:
        print(f"\n{alerts} alert(s) fired")
    return 0


if __name__ == "__main__":
    sys.exit(main())
