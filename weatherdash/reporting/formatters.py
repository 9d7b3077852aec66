"""Plain-text output for the CLI: city cards, forecast and analytics tables."""

import json
from datetime import UTC, datetime

from weatherdash.ingest.staleness import is_snapshot_stale
from weatherdash.models.analytics import AnalyticsSeries
from weatherdash.models.common import round_half_up
from weatherdash.models.settings import Settings, WindSpeedUnit
from weatherdash.models.status import FetchStatus
from weatherdash.models.weather import DailyForecast, WeatherSnapshot

KPH_PER_MS = 3.6
KPH_PER_MPH = 1.609344

WIND_UNIT_LABELS = {
    WindSpeedUnit.KPH: "km/h",
    WindSpeedUnit.MS: "m/s",
    WindSpeedUnit.MPH: "mph",
}


def convert_wind_speed(kph: float, unit: WindSpeedUnit | str) -> float:
    """Convert a km/h reading for display, rounded to 1 decimal."""
    unit = WindSpeedUnit(unit)
    if unit == WindSpeedUnit.MS:
        value = kph / KPH_PER_MS
    elif unit == WindSpeedUnit.MPH:
        value = kph / KPH_PER_MPH
    else:
        value = kph
    return round_half_up(value, 1)


def wind_unit_label(unit: WindSpeedUnit | str) -> str:
    return WIND_UNIT_LABELS[WindSpeedUnit(unit)]


def format_wind(kph: float, unit: WindSpeedUnit | str) -> str:
    return f"{convert_wind_speed(kph, unit)} {wind_unit_label(unit)}"


def format_city_card(
    snapshot: WeatherSnapshot,
    settings: Settings,
    unit_symbol: str,
    favourite: bool = False,
    stale_after_seconds: int = 60,
    now_millis: int | None = None,
) -> str:
    c = snapshot.current
    star = "*" if favourite else " "
    stale = " (stale)" if is_snapshot_stale(snapshot, stale_after_seconds, now_millis) else ""
    today = snapshot.today
    lines = [
        f"{star} {snapshot.city}, {snapshot.country}{stale}",
        f"    {c.temp:.1f}{unit_symbol} {c.description} "
        f"(feels like {c.feels_like:.1f}{unit_symbol})",
        f"    High {today.temp_max:.1f}{unit_symbol} | Low {today.temp_min:.1f}{unit_symbol} "
        f"| Rain {today.precipitation_chance}%",
        f"    Humidity {c.humidity}% | Wind {format_wind(c.wind_speed_kph, settings.wind_speed_unit)} "
        f"| Clouds {c.clouds}%",
        f"    UV {c.uv_index:g} | Visibility {c.visibility_meters / 1000:g} km "
        f"| Pressure {c.pressure_hpa:g} hPa",
    ]
    return "\n".join(lines)


def format_status(city_name: str, status: FetchStatus) -> str:
    if status.is_error:
        return f"! {city_name}: {status.error}"
    return f"  {city_name}: {status.state.value}"


def format_favourites(favourites: tuple[str, ...]) -> str:
    if not favourites:
        return "No favourite cities yet."
    return "\n".join(f"* {name}" for name in favourites)


def _day_name(day: DailyForecast) -> str:
    return datetime.fromtimestamp(day.epoch_seconds, UTC).strftime("%a %d %b")


def format_forecast(
    snapshot: WeatherSnapshot, daily: tuple[DailyForecast, ...], unit_symbol: str
) -> str:
    lines = [f"=== Forecast: {snapshot.city}, {snapshot.country} ==="]
    for day in daily:
        lines.append(
            f"{_day_name(day):<11} {day.temp_max:>6.1f}{unit_symbol} / "
            f"{day.temp_min:>6.1f}{unit_symbol}  rain {day.precipitation_chance:>3}%  "
            f"{day.description}"
        )
    return "\n".join(lines)


def format_analytics(
    series: AnalyticsSeries, unit_symbol: str, wind_unit: WindSpeedUnit | str
) -> str:
    s = series.summary
    lines = [
        f"=== 24h Analytics: {series.city}, {series.country} ===",
        f"Temperature: avg {s.avg_temp}{unit_symbol} | high {s.max_temp}{unit_symbol} "
        f"| low {s.min_temp}{unit_symbol}",
        f"Humidity: avg {s.avg_humidity}% ({series.humidity_status})",
        f"Wind: noon {format_wind(series.wind_at_noon, wind_unit)} "
        f"| max {format_wind(series.max_wind, wind_unit)}",
        "",
        f"{'Time':<6} {'Temp':>8} {'Humidity':>9} {'Wind':>12}",
    ]
    for p in series.points:
        lines.append(
            f"{p.time_label:<6} {p.temp:>6}{unit_symbol} {p.humidity:>8}% "
            f"{format_wind(p.wind_speed_kph, wind_unit):>12}"
        )
    return "\n".join(lines)


def format_settings_json(settings: Settings) -> str:
    data = {
        "temperature_unit": settings.temperature_unit.value,
        "wind_speed_unit": settings.wind_speed_unit.value,
        "theme": settings.theme.value,
    }
    return json.dumps(data, indent=2)
