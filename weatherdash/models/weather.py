"""Weather snapshot models as returned by the provider client."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentConditions:
    temp: float
    feels_like: float
    humidity: int  # 0-100
    wind_speed_kph: float  # always km/h, whatever the unit system
    description: str
    icon_ref: str
    clouds: int  # 0-100
    uv_index: float
    visibility_meters: float
    pressure_hpa: float


@dataclass(frozen=True)
class DailyForecast:
    epoch_seconds: int
    temp_max: float
    temp_min: float
    description: str
    icon_ref: str
    precipitation_chance: int  # 0-100


@dataclass(frozen=True)
class WeatherSnapshot:
    city: str
    country: str
    lat: float
    lon: float
    current: CurrentConditions
    daily: tuple[DailyForecast, ...]  # chronological, index 0 = today
    fetched_at_epoch_millis: int

    @property
    def today(self) -> DailyForecast:
        return self.daily[0]
