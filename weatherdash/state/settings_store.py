"""User settings: each field validated against its enum and persisted alone."""

import dataclasses
import logging
from enum import StrEnum

from weatherdash.models.common import UnitSystem
from weatherdash.models.settings import FIELD_TYPES, SettingField, Settings
from weatherdash.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEYS: dict[SettingField, str] = {
    SettingField.TEMPERATURE_UNIT: "weather-dashboard-unit",
    SettingField.WIND_SPEED_UNIT: "weather-dashboard-wind",
    SettingField.THEME: "weather-dashboard-theme",
}

DEFAULTS = Settings()


def _coerce(field: SettingField, value: object) -> StrEnum | None:
    """Return the enum member for value, or None when it is not allowed."""
    enum_type = FIELD_TYPES[field]
    try:
        return enum_type(value)
    except ValueError:
        return None


class SettingsStore:
    def __init__(self, store: KeyValueStore):
        self.store = store
        self._settings = DEFAULTS

    @property
    def settings(self) -> Settings:
        return self._settings

    def load(self) -> Settings:
        """Read every field; missing, invalid or unreadable values use the default."""
        values = {}
        for field, key in STORAGE_KEYS.items():
            try:
                raw = self.store.get(key)
            except Exception:
                logger.warning("Could not read setting %s", key, exc_info=True)
                raw = None
            member = _coerce(field, raw) if raw is not None else None
            if member is None:
                if raw is not None:
                    logger.info("Ignoring invalid stored %s=%r", field.value, raw)
                member = getattr(DEFAULTS, field.value)
            values[field.value] = member
        self._settings = Settings(**values)
        return self._settings

    def set(self, field: str, value: str) -> Settings:
        """Update one field. Unknown fields and out-of-enum values are ignored."""
        try:
            setting = SettingField(field)
        except ValueError:
            logger.debug("Ignoring unknown setting %r", field)
            return self._settings

        member = _coerce(setting, value)
        if member is None:
            logger.debug("Ignoring invalid %s=%r", setting.value, value)
            return self._settings

        self._settings = dataclasses.replace(self._settings, **{setting.value: member})
        self._save(setting, member)
        return self._settings

    def toggle_unit(self) -> Settings:
        """Flip the temperature unit between metric and imperial."""
        current = self._settings.temperature_unit
        new = UnitSystem.IMPERIAL if current == UnitSystem.METRIC else UnitSystem.METRIC
        return self.set(SettingField.TEMPERATURE_UNIT, new)

    def _save(self, field: SettingField, member: StrEnum) -> None:
        try:
            self.store.set(STORAGE_KEYS[field], member.value)
        except Exception:
            logger.exception("Could not save setting %s", field.value)
