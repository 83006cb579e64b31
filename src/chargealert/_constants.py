"""Internal constants shared across the library."""

THRESHOLD_MIN = 1
THRESHOLD_MAX = 100

DEFAULT_ALERT_THRESHOLD = 80

#: Sliding window of charge-rate samples kept by the estimator.
MAX_RATE_SAMPLES = 6

#: Average rates at or below this (percent per minute) are too small to
#: produce a meaningful ETA.
MIN_USABLE_RATE = 0.01

#: Polling cadence for sources that cannot push changes.
DEFAULT_POLL_INTERVAL = 30.0

SETTINGS_FILENAME = "settings.json"

ALERT_TITLE = "Battery Alert!"

BATTERY_HEALTH_TIP = (
    "Keeping your battery between 20-80% can help extend its lifespan. Avoid charging to 100% regularly."
)

SYSFS_BATTERY_PATHS: tuple[str, ...] = (
    "/sys/class/power_supply/BAT0",
    "/sys/class/power_supply/BAT1",
)

#: sysfs ``status`` values that count as plugged in and charging.
SYSFS_CHARGING_STATES: frozenset[str] = frozenset({"charging", "full"})


def clamp_threshold(value: int) -> int:
    """Clamp an alert threshold into ``[1, 100]``."""
    return max(THRESHOLD_MIN, min(THRESHOLD_MAX, int(value)))


def alert_message(level: int) -> str:
    """Body text for the charge alert notification."""
    return f"Your battery has reached {level}%. Time to unplug!"
