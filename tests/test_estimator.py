from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from chargealert.state.estimator import RateEstimator

T0 = datetime(2026, 1, 1, tzinfo=UTC)


def _at(minutes: float) -> datetime:
    return T0 + timedelta(minutes=minutes)


def test_rate_and_eta_from_two_samples() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(50, _at(0))
    estimator.on_sample(60, _at(10))

    assert estimator.average_rate == pytest.approx(1.0)
    assert estimator.estimate_minutes_to_threshold(60, 80) == 20


def test_eta_is_rounded_up() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(50, _at(0))
    estimator.on_sample(54, _at(3))

    # 26 points at 4/3 %/min -> 19.5 minutes
    assert estimator.estimate_minutes_to_threshold(54, 80) == 20


def test_dip_while_charging_clears_rates() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(70, _at(0))
    estimator.on_sample(72, _at(2))
    assert estimator.recent_rates

    estimator.on_sample(65, _at(3))

    assert estimator.recent_rates == ()
    assert estimator.last_sample is not None
    assert estimator.last_sample.level == 65
    assert estimator.estimate_minutes_to_threshold(65, 80) is None


def test_unchanged_level_is_a_no_op() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(40, _at(0))
    estimator.on_sample(40, _at(5))

    assert estimator.recent_rates == ()
    assert estimator.last_sample is not None
    assert estimator.last_sample.time == _at(0)


def test_rising_level_without_elapsed_time_moves_baseline_only() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(40, _at(0))
    estimator.on_sample(41, _at(0))

    assert estimator.recent_rates == ()
    assert estimator.last_sample is not None
    assert estimator.last_sample.level == 41


def test_window_keeps_six_most_recent_rates() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(10, _at(0))
    level = 10
    for minute in range(1, 9):
        level += minute
        estimator.on_sample(level, _at(minute))

    assert estimator.recent_rates == (3.0, 4.0, 5.0, 6.0, 7.0, 8.0)


def test_near_zero_rate_cannot_estimate() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(10, _at(0))
    estimator.on_sample(11, _at(200))

    assert estimator.average_rate == pytest.approx(0.005)
    assert estimator.estimate_minutes_to_threshold(11, 80) is None


def test_threshold_already_reached_returns_zero() -> None:
    estimator = RateEstimator()
    estimator.on_charging_started(85, _at(0))

    assert estimator.estimate_minutes_to_threshold(85, 80) == 0
    assert estimator.estimate_minutes_to_threshold(80, 80) == 0


def test_not_charging_returns_none() -> None:
    estimator = RateEstimator()
    assert estimator.estimate_minutes_to_threshold(90, 80) is None

    estimator.on_charging_started(50, _at(0))
    estimator.on_sample(60, _at(10))
    estimator.on_charging_stopped()

    assert estimator.last_sample is None
    assert estimator.recent_rates == ()
    assert estimator.estimate_minutes_to_threshold(60, 80) is None


def test_first_sample_without_start_becomes_baseline() -> None:
    estimator = RateEstimator()
    estimator.on_sample(30, _at(0))
    estimator.on_sample(32, _at(1))

    assert estimator.recent_rates == (2.0,)
