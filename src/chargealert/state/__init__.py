"""State layer.

The alert state machine is the single owner of mutable monitor state; the
estimator and the settings store are its collaborators.
"""

from chargealert.state.estimator import RateEstimator
from chargealert.state.machine import AlertStateMachine
from chargealert.state.policy import derive_phase, format_eta, should_fire_alert
from chargealert.state.store import SettingsStore

__all__ = [
    "AlertStateMachine",
    "RateEstimator",
    "SettingsStore",
    "derive_phase",
    "format_eta",
    "should_fire_alert",
]
