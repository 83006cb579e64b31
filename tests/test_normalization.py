from __future__ import annotations

from datetime import UTC, datetime

import pytest

from chargealert.ingestion.normalize import normalize_percent, safe_float, to_sample
from chargealert.models.sample import BatteryReading

NOW = datetime(2026, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (57, 57),
        ("85\n", 85),
        (49.5, 50),
        (64.4, 64),
        (0, 0),
        (100, 100),
        (150, 100),
        (-1, None),
        (None, None),
        ("", None),
        ("--", None),
        ("Unknown", None),
        ("abc", None),
        (float("nan"), None),
        (True, None),
    ],
)
def test_normalize_percent(raw: object, expected: int | None) -> None:
    assert normalize_percent(raw) == expected


def test_safe_float_rejects_non_numbers() -> None:
    assert safe_float(" 42.5 ") == 42.5
    assert safe_float(object()) is None
    assert safe_float(float("inf")) is None


def test_to_sample_with_known_level() -> None:
    sample = to_sample(BatteryReading(level=72, charging=True), None, NOW)

    assert sample is not None
    assert sample.level == 72
    assert sample.charging is True
    assert sample.timestamp == NOW


def test_to_sample_unknown_level_keeps_previous_level() -> None:
    sample = to_sample(BatteryReading(level=None, charging=False), 64, NOW)

    assert sample is not None
    assert sample.level == 64
    assert sample.charging is False


def test_to_sample_unknown_level_without_history_is_dropped() -> None:
    assert to_sample(BatteryReading(level=None, charging=True), None, NOW) is None


def test_to_sample_out_of_range_level_is_clamped() -> None:
    sample = to_sample(BatteryReading(level=130, charging=True), None, NOW)

    assert sample is not None
    assert sample.level == 100
