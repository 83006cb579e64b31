from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

from chargealert._persistence import MemoryBackend
from chargealert.exceptions import SettingsStoreError
from chargealert.models.alert import AlertEvent
from chargealert.models.monitor import AlertPhase
from chargealert.models.settings import Settings
from chargealert.state.machine import AlertStateMachine
from chargealert.state.store import SettingsStore

T0 = datetime(2026, 1, 1, tzinfo=UTC)


def _at(minutes: float) -> datetime:
    return T0 + timedelta(minutes=minutes)


def _backend(**settings: object) -> MemoryBackend:
    record = Settings(**settings).to_payload()  # type: ignore[arg-type]
    return MemoryBackend(json.dumps(record).encode())


def _machine(backend: MemoryBackend | None = None) -> AlertStateMachine:
    return AlertStateMachine(SettingsStore(backend or MemoryBackend()))


def _stored(backend: MemoryBackend) -> dict[str, object]:
    assert backend.blob is not None
    return json.loads(backend.blob)


class _FailingBackend:
    def read(self) -> bytes | None:
        return None

    def write(self, blob: bytes) -> None:
        raise SettingsStoreError("read-only filesystem")


def test_charge_cycle_scenario_emits_two_alerts() -> None:
    machine = _machine(_backend(alert_threshold=80))
    samples = [(78, True), (80, True), (81, True), (81, False), (50, True), (80, True)]

    events = [machine.on_sample(level, charging, _at(i)) for i, (level, charging) in enumerate(samples)]

    fired = [i for i, event in enumerate(events) if event is not None]
    assert fired == [1, 5]
    first = events[1]
    assert isinstance(first, AlertEvent)
    assert first.level == 80
    assert first.sound_enabled is True
    assert first.vibration_enabled is True
    assert first.threshold == 80


def test_latch_holds_while_level_fluctuates() -> None:
    machine = _machine()
    events = [
        machine.on_sample(level, True, _at(i))
        for i, level in enumerate([79, 80, 79, 80, 82, 78, 85, 90])
    ]

    assert sum(event is not None for event in events) == 1
    assert machine.phase == AlertPhase.FIRED


def test_unplug_rearms_alert() -> None:
    machine = _machine()
    assert machine.on_sample(85, True, _at(0)) is not None
    assert machine.on_sample(86, True, _at(1)) is None

    machine.on_sample(86, False, _at(2))
    assert machine.phase == AlertPhase.IDLE
    assert machine.settings.has_alerted_for_current_charge is False

    assert machine.on_sample(86, True, _at(3)) is not None


def test_latch_is_persisted_on_fire_and_unplug() -> None:
    backend = MemoryBackend()
    machine = _machine(backend)

    machine.on_sample(80, True, _at(0))
    assert _stored(backend)["hasAlertedForCurrentCharge"] is True

    machine.on_sample(80, False, _at(1))
    assert _stored(backend)["hasAlertedForCurrentCharge"] is False


def test_persisted_latch_survives_restart_mid_cycle() -> None:
    machine = _machine(_backend(has_alerted_for_current_charge=True))

    assert machine.on_sample(90, True, _at(0)) is None
    assert machine.phase == AlertPhase.FIRED


def test_persisted_latch_cleared_when_first_sample_is_discharging() -> None:
    backend = _backend(has_alerted_for_current_charge=True)
    machine = _machine(backend)

    machine.on_sample(90, False, _at(0))

    assert machine.settings.has_alerted_for_current_charge is False
    assert _stored(backend)["hasAlertedForCurrentCharge"] is False


def test_disabled_alerts_never_fire_but_eta_still_runs() -> None:
    machine = _machine(_backend(is_enabled=False))

    assert machine.on_sample(50, True, _at(0)) is None
    assert machine.on_sample(60, True, _at(10)) is None
    assert machine.estimated_minutes_to_threshold == 20
    assert machine.on_sample(95, True, _at(20)) is None
    assert machine.settings.has_alerted_for_current_charge is False


def test_no_alert_while_discharging_above_threshold() -> None:
    machine = _machine()

    assert machine.on_sample(95, False, _at(0)) is None
    assert machine.estimated_minutes_to_threshold is None


def test_eta_follows_samples_and_resets_on_unplug() -> None:
    machine = _machine()
    machine.on_sample(50, True, _at(0))
    assert machine.estimated_minutes_to_threshold is None

    machine.on_sample(60, True, _at(10))
    assert machine.estimated_minutes_to_threshold == 20

    machine.on_sample(60, False, _at(11))
    assert machine.estimated_minutes_to_threshold is None
    assert machine.estimator.recent_rates == ()


def test_update_settings_clamps_persists_and_recomputes_eta() -> None:
    backend = MemoryBackend()
    machine = _machine(backend)
    machine.on_sample(50, True, _at(0))
    machine.on_sample(60, True, _at(10))

    updated = machine.update_settings(machine.settings.model_copy(update={"alert_threshold": 150}))

    assert updated.alert_threshold == 100
    assert _stored(backend)["alertThreshold"] == 100
    assert machine.estimated_minutes_to_threshold == 40


def test_update_settings_does_not_fire_retroactively() -> None:
    listener_events: list[AlertEvent] = []
    machine = AlertStateMachine(SettingsStore(MemoryBackend()), on_alert=listener_events.append)
    machine.on_sample(70, True, _at(0))

    machine.update_settings(machine.settings.model_copy(update={"alert_threshold": 60}))
    assert listener_events == []
    assert machine.estimated_minutes_to_threshold == 0

    assert machine.on_sample(70, True, _at(1)) is not None
    assert len(listener_events) == 1


def test_listener_failure_does_not_break_latch() -> None:
    received: list[AlertEvent] = []

    def _boom(_event: AlertEvent) -> None:
        raise RuntimeError("listener bug")

    machine = _machine()
    machine.add_alert_listener(_boom)
    machine.add_alert_listener(received.append)

    event = machine.on_sample(80, True, _at(0))

    assert event is not None
    assert received == [event]
    assert machine.settings.has_alerted_for_current_charge is True


def test_listener_can_unsubscribe() -> None:
    received: list[AlertEvent] = []
    machine = _machine()
    remove = machine.add_alert_listener(received.append)
    remove()

    machine.on_sample(80, True, _at(0))

    assert received == []


def test_persistence_failure_is_silent() -> None:
    machine = AlertStateMachine(SettingsStore(_FailingBackend()))

    assert machine.on_sample(80, True, _at(0)) is not None
    assert machine.on_sample(81, True, _at(1)) is None
    assert machine.settings.has_alerted_for_current_charge is True


def test_snapshot_reflects_state() -> None:
    machine = _machine()
    machine.on_sample(50, True, _at(0))
    machine.on_sample(60, True, _at(10))

    snapshot = machine.snapshot()

    assert snapshot.battery_level == 60
    assert snapshot.is_charging is True
    assert snapshot.estimated_minutes_to_threshold == 20
    assert snapshot.alert_threshold == 80
    assert snapshot.phase == AlertPhase.ARMED


def test_naive_timestamps_are_treated_as_utc() -> None:
    machine = _machine()
    machine.on_sample(50, True, datetime(2026, 1, 1, 0, 0))
    machine.on_sample(60, True, datetime(2026, 1, 1, 0, 10, tzinfo=UTC))

    assert machine.estimated_minutes_to_threshold == 20


def test_clock_used_when_no_timestamp_given() -> None:
    ticks = iter([_at(0), _at(10)])
    machine = AlertStateMachine(SettingsStore(MemoryBackend()), clock=lambda: next(ticks))

    machine.on_sample(50, True)
    machine.on_sample(60, True)

    assert machine.estimated_minutes_to_threshold == 20


def test_settings_written_by_another_store_apply_to_next_sample() -> None:
    backend = _backend(alert_threshold=80)
    machine = _machine(backend)
    machine.on_sample(70, True, _at(0))

    editor = _machine(backend)
    editor.update_settings(editor.settings.model_copy(update={"alert_threshold": 95, "sound_enabled": False}))

    assert machine.on_sample(80, True, _at(1)) is None
    assert machine.settings.alert_threshold == 95
    assert machine.settings.sound_enabled is False
    assert _stored(backend)["alertThreshold"] == 95

    event = machine.on_sample(95, True, _at(2))
    assert event is not None
    assert event.sound_enabled is False
    assert _stored(backend)["alertThreshold"] == 95
    assert _stored(backend)["soundEnabled"] is False


def test_refresh_keeps_in_memory_latch() -> None:
    backend = _backend(alert_threshold=80)
    machine = _machine(backend)
    assert machine.on_sample(80, True, _at(0)) is not None

    backend.blob = json.dumps(Settings(alert_threshold=85).to_payload()).encode()

    assert machine.on_sample(86, True, _at(1)) is None
    assert machine.settings.alert_threshold == 85
    assert machine.settings.has_alerted_for_current_charge is True


def test_unusable_stored_record_keeps_current_settings() -> None:
    backend = _backend(alert_threshold=90)
    machine = _machine(backend)
    backend.blob = b"{not json"

    assert machine.on_sample(85, True, _at(0)) is None
    assert machine.settings.alert_threshold == 90
