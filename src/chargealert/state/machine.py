"""Alert state machine.

The single owner of monitor state. Consumes ``(level, charging)`` samples,
drives the rate estimator, maintains the per-cycle alert latch and emits
at most one :class:`~chargealert.models.AlertEvent` per charge cycle.

Calls must be serialized by the caller; the machine is not thread-safe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from chargealert._constants import clamp_threshold
from chargealert.models._base import ensure_tz_aware, utcnow
from chargealert.models.alert import AlertEvent
from chargealert.models.monitor import AlertPhase, MonitorState
from chargealert.models.sample import BatterySample
from chargealert.models.settings import Settings
from chargealert.state.estimator import RateEstimator
from chargealert.state.policy import derive_phase, should_fire_alert
from chargealert.state.store import SettingsStore

_logger = logging.getLogger(__name__)

AlertListener = Callable[[AlertEvent], None]


class AlertStateMachine:
    """Latched, edge-triggered charge alert.

    Usage::

        machine = AlertStateMachine(SettingsStore(JsonFileBackend(path)))
        event = machine.on_sample(82, True)
        if event is not None:
            await notifier.notify(event)
    """

    def __init__(
        self,
        store: SettingsStore,
        *,
        estimator: RateEstimator | None = None,
        on_alert: AlertListener | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._estimator = estimator or RateEstimator()
        self._clock = clock
        self._settings = store.load()
        self._battery_level = 0
        self._is_charging = False
        self._eta: int | None = None
        self._listeners: list[AlertListener] = []
        if on_alert is not None:
            self._listeners.append(on_alert)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def estimator(self) -> RateEstimator:
        return self._estimator

    @property
    def battery_level(self) -> int:
        return self._battery_level

    @property
    def is_charging(self) -> bool:
        return self._is_charging

    @property
    def estimated_minutes_to_threshold(self) -> int | None:
        return self._eta

    @property
    def phase(self) -> AlertPhase:
        return derive_phase(
            is_charging=self._is_charging,
            has_alerted=self._settings.has_alerted_for_current_charge,
        )

    def snapshot(self) -> MonitorState:
        return MonitorState(
            battery_level=self._battery_level,
            is_charging=self._is_charging,
            estimated_minutes_to_threshold=self._eta,
            alert_threshold=self._settings.alert_threshold,
            phase=self.phase,
        )

    def add_alert_listener(self, listener: AlertListener) -> Callable[[], None]:
        """Register *listener* for alert events. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def apply(self, sample: BatterySample) -> AlertEvent | None:
        return self.on_sample(sample.level, sample.charging, sample.timestamp)

    def on_sample(self, level: int, charging: bool, now: datetime | None = None) -> AlertEvent | None:
        """Process one observation. Returns the emitted alert, if any."""
        now = ensure_tz_aware(now) if now is not None else self._clock()
        self.refresh_settings()
        was_charging = self._is_charging
        self._battery_level = level
        self._is_charging = charging

        if not charging:
            if was_charging:
                _logger.debug("Charging stopped at level=%d", level)
            self._estimator.on_charging_stopped()
            if self._settings.has_alerted_for_current_charge:
                self._settings = self._settings.with_latch(False)
                self._store.save(self._settings)
                _logger.debug("Alert latch cleared on unplug")
        elif not was_charging:
            _logger.debug("Charging started at level=%d", level)
            self._estimator.on_charging_started(level, now)
        else:
            self._estimator.on_sample(level, now)

        self._recompute_eta()
        return self._evaluate_alert(now)

    def refresh_settings(self) -> Settings:
        """Pick up settings written to the store by another process.

        The alert latch is owned by this machine and is kept as is. An
        unusable stored record leaves the in-memory settings untouched.
        """
        stored = self._store.load_persisted()
        if stored is None:
            return self._settings
        stored = stored.with_latch(self._settings.has_alerted_for_current_charge)
        if stored != self._settings:
            _logger.debug("Settings changed in store: %s", stored)
            self._settings = stored
        return self._settings

    def update_settings(self, new_settings: Settings) -> Settings:
        """Replace settings, persist them and refresh the ETA.

        Never re-arms or fires an alert by itself; the next sample is
        evaluated against the new settings.
        """
        threshold = clamp_threshold(new_settings.alert_threshold)
        self._settings = new_settings.model_copy(update={"alert_threshold": threshold})
        self._store.save(self._settings)
        self._recompute_eta()
        return self._settings

    def _recompute_eta(self) -> None:
        self._eta = self._estimator.estimate_minutes_to_threshold(
            self._battery_level,
            self._settings.alert_threshold,
        )

    def _evaluate_alert(self, now: datetime) -> AlertEvent | None:
        if not should_fire_alert(self._settings, is_charging=self._is_charging, level=self._battery_level):
            return None

        self._settings = self._settings.with_latch(True)
        self._store.save(self._settings)

        event = AlertEvent(
            level=self._battery_level,
            sound_enabled=self._settings.sound_enabled,
            vibration_enabled=self._settings.vibration_enabled,
            threshold=self._settings.alert_threshold,
            fired_at=now,
        )
        _logger.info("Battery reached %d%% (threshold %d%%); alert fired", event.level, event.threshold)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _logger.warning("Alert listener failed", exc_info=True)
        return event
