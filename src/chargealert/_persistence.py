"""Settings persistence backends."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from chargealert.exceptions import SettingsStoreError

_logger = logging.getLogger(__name__)


class SettingsBackend(Protocol):
    """Structural persistence interface used by the settings store.

    ``read`` returns ``None`` when nothing has been stored yet. Both methods
    raise :class:`SettingsStoreError` on I/O failure.
    """

    def read(self) -> bytes | None:
        ...

    def write(self, blob: bytes) -> None:
        ...


class MemoryBackend:
    """In-process backend, mainly useful for tests and dry runs."""

    def __init__(self, blob: bytes | None = None) -> None:
        self.blob = blob
        self.writes = 0

    def read(self) -> bytes | None:
        return self.blob

    def write(self, blob: bytes) -> None:
        self.blob = blob
        self.writes += 1


class JsonFileBackend:
    """File backend that replaces the settings file atomically."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> bytes | None:
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SettingsStoreError(f"Cannot read {self._path}: {exc}") from exc

    def write(self, blob: bytes) -> None:
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".settings-", suffix=".tmp")
            with os.fdopen(fd, "wb") as handle:
                handle.write(blob)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
            _logger.debug("Settings written to %s", self._path)
        except OSError as exc:
            raise SettingsStoreError(f"Cannot write {self._path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
