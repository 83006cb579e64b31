"""Battery source interface."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Protocol

from chargealert._constants import DEFAULT_POLL_INTERVAL
from chargealert.exceptions import BatterySourceError
from chargealert.models.sample import BatteryReading

_logger = logging.getLogger(__name__)


class BatterySource(Protocol):
    """Structural interface for platform battery access.

    ``read`` returns ``None`` when nothing usable could be observed this
    time. A reading may still carry ``level=None`` when only the charging
    state is known.
    """

    async def read(self) -> BatteryReading | None:
        ...


async def poll_readings(
    source: BatterySource,
    interval: float = DEFAULT_POLL_INTERVAL,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[BatteryReading]:
    """Poll *source* every *interval* seconds, yielding usable readings.

    The first read happens immediately. Transient source failures are
    logged and skipped; the loop ends only when the consumer stops.
    """
    while True:
        try:
            reading = await source.read()
        except BatterySourceError:
            _logger.debug("Battery read failed; skipping this poll", exc_info=True)
            reading = None
        except Exception:
            _logger.warning("Unexpected battery source error; skipping this poll", exc_info=True)
            reading = None
        if reading is not None:
            yield reading
        await sleep(interval)
