"""Derived intraday analytics models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalyticsPoint:
    time_label: str  # e.g. "6 AM"
    temp: float
    humidity: int  # clamped to 10-100
    wind_speed_kph: float


@dataclass(frozen=True)
class AnalyticsSummary:
    avg_temp: float
    max_temp: float
    min_temp: float
    avg_humidity: int


@dataclass(frozen=True)
class AnalyticsSeries:
    city: str
    country: str
    points: tuple[AnalyticsPoint, ...]
    summary: AnalyticsSummary

    @property
    def humidity_status(self) -> str:
        if self.summary.avg_humidity < 40:
            return "Dry"
        if self.summary.avg_humidity < 70:
            return "Normal"
        return "Humid"

    @property
    def wind_at_noon(self) -> float:
        for p in self.points:
            if p.time_label == "12 PM":
                return p.wind_speed_kph
        return self.points[0].wind_speed_kph

    @property
    def max_wind(self) -> float:
        return max(p.wind_speed_kph for p in self.points)
