"""Desktop notifications through ``notify-send`` (libnotify)."""

from __future__ import annotations

import asyncio
import logging

from chargealert.exceptions import NotifierError
from chargealert.models.alert import AlertEvent

_logger = logging.getLogger(__name__)


class DesktopNotifier:
    """Runs ``notify-send``. Works with any freedesktop notification daemon.

    Urgency is ``critical`` when the sound channel is enabled so that the
    daemon plays its alert sound, ``normal`` otherwise.
    """

    def __init__(self, command: str = "notify-send", *, app_name: str = "chargealert", timeout: float = 5.0) -> None:
        self._command = command
        self._app_name = app_name
        self._timeout = timeout

    def build_command(self, event: AlertEvent) -> list[str]:
        urgency = "critical" if event.sound_enabled else "normal"
        return [self._command, "-u", urgency, "-a", self._app_name, event.title, event.message]

    async def notify(self, event: AlertEvent) -> None:
        cmd = self.build_command(event)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise NotifierError(f"Cannot run {self._command}: {exc}", channel="desktop") from exc

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise NotifierError(f"{self._command} timed out after {self._timeout}s", channel="desktop") from exc

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip() if stderr else ""
            raise NotifierError(
                f"{self._command} exited with {proc.returncode}: {detail}",
                channel="desktop",
            )
        _logger.debug("Desktop notification sent level=%d", event.level)
