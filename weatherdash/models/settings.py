"""User preference enums and the settings record."""

from dataclasses import dataclass
from enum import StrEnum

from weatherdash.models.common import UnitSystem


class WindSpeedUnit(StrEnum):
    KPH = "kph"
    MS = "ms"
    MPH = "mph"


class Theme(StrEnum):
    DARK = "dark"
    LIGHT = "light"
    AUTO = "auto"


class SettingField(StrEnum):
    TEMPERATURE_UNIT = "temperature_unit"
    WIND_SPEED_UNIT = "wind_speed_unit"
    THEME = "theme"


@dataclass(frozen=True)
class Settings:
    temperature_unit: UnitSystem = UnitSystem.METRIC
    wind_speed_unit: WindSpeedUnit = WindSpeedUnit.KPH
    theme: Theme = Theme.DARK


FIELD_TYPES: dict[SettingField, type[StrEnum]] = {
    SettingField.TEMPERATURE_UNIT: UnitSystem,
    SettingField.WIND_SPEED_UNIT: WindSpeedUnit,
    SettingField.THEME: Theme,
}
