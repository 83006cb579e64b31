"""Settings store.

Loads and saves :class:`~chargealert.models.Settings` through a
persistence backend. Every failure degrades to defaults or in-memory
state; nothing here raises to the caller.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from chargealert._constants import clamp_threshold
from chargealert._persistence import SettingsBackend
from chargealert.exceptions import SettingsStoreError
from chargealert.models.settings import Settings

_logger = logging.getLogger(__name__)


def _field_keys() -> dict[str, set[str]]:
    """Map every accepted input key to all spellings of the same field."""
    groups: dict[str, set[str]] = {}
    for name, info in Settings.model_fields.items():
        spellings = {name, to_camel(name)}
        if info.alias:
            spellings.add(info.alias)
        for key in spellings:
            groups[key] = spellings
    return groups


def _validate_lenient(record: dict[str, Any]) -> Settings:
    """Validate *record*, replacing invalid fields with their defaults."""
    groups = _field_keys()
    data = {key: value for key, value in record.items() if key in groups}
    while True:
        try:
            return Settings.model_validate(data)
        except ValidationError as exc:
            bad: set[str] = set()
            for error in exc.errors():
                loc = error.get("loc") or ()
                if loc and isinstance(loc[0], str):
                    bad |= groups.get(loc[0], {loc[0]})
            remaining = {key: value for key, value in data.items() if key not in bad}
            if len(remaining) == len(data):
                _logger.debug("Stored settings unusable; using defaults", exc_info=True)
                return Settings()
            _logger.debug("Dropping invalid stored settings fields: %s", sorted(bad & set(data)))
            data = remaining


class SettingsStore:
    """Best-effort settings persistence.

    ``load`` never raises: a missing, unreadable, or corrupt record yields
    defaults. ``save`` never raises either; a failed write leaves the
    in-memory settings authoritative until the next successful save.
    """

    def __init__(self, backend: SettingsBackend) -> None:
        self._backend = backend

    @staticmethod
    def clamp_threshold(value: int) -> int:
        return clamp_threshold(value)

    def load(self) -> Settings:
        settings = self.load_persisted()
        return settings if settings is not None else Settings()

    def load_persisted(self) -> Settings | None:
        """Return the stored record, or ``None`` when there is nothing usable."""
        try:
            blob = self._backend.read()
        except SettingsStoreError:
            _logger.debug("Settings read failed", exc_info=True)
            return None
        if blob is None:
            return None

        try:
            record = json.loads(blob)
        except ValueError:
            _logger.debug("Stored settings are not valid JSON")
            return None
        if not isinstance(record, dict):
            _logger.debug("Stored settings are not a JSON object")
            return None
        return _validate_lenient(record)

    def save(self, settings: Settings) -> bool:
        """Persist *settings*. Returns ``False`` when the write failed."""
        blob = json.dumps(settings.to_payload(), indent=2, sort_keys=True).encode("utf-8")
        try:
            self._backend.write(blob)
        except SettingsStoreError:
            _logger.debug("Settings write failed; keeping in-memory state", exc_info=True)
            return False
        return True
