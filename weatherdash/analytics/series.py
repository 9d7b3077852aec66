"""Synthetic intraday series derived from a daily min/max forecast.

The temperature follows a sine curve between today's low and high, peaking
at 14:00. Humidity moves against temperature and wind wobbles around the
current reading, each with a fixed per-slot offset. Nothing here is measured
data; the same snapshot always yields the same series.
"""

import math

from weatherdash.models.analytics import AnalyticsPoint, AnalyticsSeries, AnalyticsSummary
from weatherdash.models.common import round_half_up
from weatherdash.models.weather import WeatherSnapshot

SLOT_COUNT = 12
FIRST_HOUR = 6
SLOT_HOURS = 2
PEAK_HOUR = 14


def hour_label(hour: int) -> str:
    """12-hour clock label: 0 -> '12 AM', 12 -> '12 PM', 15 -> '3 PM'."""
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def slot_hour(i: int) -> int:
    return (FIRST_HOUR + SLOT_HOURS * i) % 24


def derive_points(snapshot: WeatherSnapshot) -> tuple[AnalyticsPoint, ...]:
    """Expand today's forecast into 12 two-hourly points starting at 6 AM."""
    if not snapshot.daily:
        raise ValueError(f"Snapshot for {snapshot.city} has no daily forecast")

    min_t = snapshot.today.temp_min
    max_t = snapshot.today.temp_max
    base_humidity = snapshot.current.humidity
    base_wind = snapshot.current.wind_speed_kph

    points = []
    for i in range(SLOT_COUNT):
        hour = slot_hour(i)
        radians = ((hour - PEAK_HOUR) / 24) * 2 * math.pi
        normalised = (math.sin(radians) + 1) / 2

        temp = min_t + normalised * (max_t - min_t)

        humidity_offset = -((normalised - 0.5) * 20) + (((i * 7) % 11) - 5)
        humidity = int(round_half_up(base_humidity + humidity_offset))
        humidity = min(100, max(10, humidity))

        wind_offset = (((i * 13) % 9) - 4) * 0.8
        wind = max(0.0, round_half_up((base_wind + wind_offset) * 10) / 10)

        points.append(
            AnalyticsPoint(
                time_label=hour_label(hour),
                temp=round_half_up(temp, 1),
                humidity=humidity,
                wind_speed_kph=wind,
            )
        )
    return tuple(points)


def summarize(
    points: tuple[AnalyticsPoint, ...], snapshot: WeatherSnapshot
) -> AnalyticsSummary:
    """Averages come from the series; high/low come from today's forecast."""
    temps = [p.temp for p in points]
    humidities = [p.humidity for p in points]
    return AnalyticsSummary(
        avg_temp=round_half_up(sum(temps) / len(temps), 1),
        max_temp=round_half_up(snapshot.today.temp_max, 1),
        min_temp=round_half_up(snapshot.today.temp_min, 1),
        avg_humidity=int(round_half_up(sum(humidities) / len(humidities))),
    )


def derive_series(snapshot: WeatherSnapshot) -> AnalyticsSeries:
    points = derive_points(snapshot)
    return AnalyticsSeries(
        city=snapshot.city,
        country=snapshot.country,
        points=points,
        summary=summarize(points, snapshot),
    )
