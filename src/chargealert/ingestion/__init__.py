"""Ingestion boundary.

Battery sources produce raw :class:`~chargealert.models.BatteryReading`
values; this package turns them into validated samples.
"""

from chargealert.ingestion.normalize import normalize_percent, to_sample

__all__ = ["normalize_percent", "to_sample"]
