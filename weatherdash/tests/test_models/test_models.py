"""Tests for shared model types and helpers."""

import dataclasses

import pytest

from weatherdash.models.analytics import AnalyticsPoint, AnalyticsSeries, AnalyticsSummary
from weatherdash.models.common import UnitSystem, city_key, round_half_up
from weatherdash.models.settings import Settings, Theme, WindSpeedUnit
from weatherdash.models.status import IDLE, FetchState, FetchStatus
from weatherdash.tests.factories import make_snapshot


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, ndigits, expected",
        [
            (2.5, 0, 3.0),
            (3.5, 0, 4.0),
            (-2.5, 0, -2.0),
            (12.45, 0, 12.0),
            (12.25, 1, 12.3),
            (6.75, 1, 6.8),
        ],
    )
    def test_values(self, value, ndigits, expected):
        assert round_half_up(value, ndigits) == expected

    def test_differs_from_builtin_bankers_rounding(self):
        assert round(2.5) == 2
        assert round_half_up(2.5) == 3


class TestCityKey:
    def test_case_insensitive(self):
        assert city_key("New York") == city_key("NEW YORK") == "new york"


class TestFetchStatus:
    def test_failed(self):
        status = FetchStatus.failed("boom")
        assert status.is_error
        assert not status.is_loading
        assert status.error == "boom"

    def test_idle_has_no_error(self):
        assert IDLE.state == FetchState.IDLE
        assert IDLE.error is None


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.temperature_unit == UnitSystem.METRIC
        assert s.wind_speed_unit == WindSpeedUnit.KPH
        assert s.theme == Theme.DARK

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().theme = Theme.LIGHT


def _series(humidity: int, labels=("6 AM", "12 PM", "6 PM"), winds=(5.0, 9.0, 14.0)):
    points = tuple(
        AnalyticsPoint(time_label=label, temp=10.0, humidity=humidity, wind_speed_kph=w)
        for label, w in zip(labels, winds)
    )
    return AnalyticsSeries(
        city="Paris",
        country="France",
        points=points,
        summary=AnalyticsSummary(10.0, 10.0, 10.0, humidity),
    )


class TestAnalyticsSeries:
    @pytest.mark.parametrize(
        "humidity, label",
        [(39, "Dry"), (40, "Normal"), (69, "Normal"), (70, "Humid")],
    )
    def test_humidity_status(self, humidity, label):
        assert _series(humidity).humidity_status == label

    def test_wind_at_noon(self):
        assert _series(50).wind_at_noon == 9.0

    def test_wind_at_noon_falls_back_to_first(self):
        assert _series(50, labels=("6 AM", "8 AM", "10 AM")).wind_at_noon == 5.0

    def test_max_wind(self):
        assert _series(50).max_wind == 14.0


class TestWeatherSnapshot:
    def test_today_is_first_day(self):
        snap = make_snapshot(days=3)
        assert snap.today is snap.daily[0]
