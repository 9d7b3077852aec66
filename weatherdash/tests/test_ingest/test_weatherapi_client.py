"""Tests for the WeatherAPI.com client with mocked httpx."""

import httpx
import pytest
import respx

from weatherdash.ingest.weatherapi_client import ProviderError, WeatherApiClient, parse_snapshot
from weatherdash.models.common import UnitSystem
from weatherdash.tests.factories import weatherapi_payload

BASE_URL = "https://test-weather.example.com/v1"
FORECAST_URL = f"{BASE_URL}/forecast.json"


@pytest.fixture
async def client():
    c = WeatherApiClient(api_key="test-key", base_url=BASE_URL)
    yield c
    await c.close()


class TestFetchWeather:
    @respx.mock
    async def test_success_metric(self, client: WeatherApiClient):
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=weatherapi_payload())
        )

        snap = await client.fetch_weather("paris", UnitSystem.METRIC)

        assert snap.city == "Paris"
        assert snap.country == "France"
        assert snap.current.temp == 15.0
        assert snap.daily[0].temp_max == 20.0
        assert len(snap.daily) == 2

    @respx.mock
    async def test_query_params(self, client: WeatherApiClient):
        route = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=weatherapi_payload())
        )

        await client.fetch_weather("São Paulo", UnitSystem.METRIC)

        params = route.calls[0].request.url.params
        assert params["key"] == "test-key"
        assert params["q"] == "São Paulo"
        assert params["days"] == "5"
        assert params["aqi"] == "no"
        assert params["alerts"] == "no"
        assert "weatherdash" in route.calls[0].request.headers["user-agent"]

    @respx.mock
    async def test_provider_error_message_verbatim(self, client: WeatherApiClient):
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(
                400, json={"error": {"code": 1006, "message": "No matching location found."}}
            )
        )

        with pytest.raises(ProviderError, match="No matching location found."):
            await client.fetch_weather("Atlantis", UnitSystem.METRIC)

    @respx.mock
    async def test_http_error_without_body(self, client: WeatherApiClient):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(503, text="down"))

        with pytest.raises(ProviderError) as exc_info:
            await client.fetch_weather("Paris", UnitSystem.METRIC)
        assert str(exc_info.value) == "HTTP error 503"

    @respx.mock
    async def test_network_error(self, client: WeatherApiClient):
        respx.get(FORECAST_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ProviderError, match="refused"):
            await client.fetch_weather("Paris", UnitSystem.METRIC)

    @respx.mock
    async def test_malformed_payload(self, client: WeatherApiClient):
        respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json={"location": {}})
        )

        with pytest.raises(ProviderError, match="Malformed"):
            await client.fetch_weather("Paris", UnitSystem.METRIC)

    @respx.mock
    async def test_no_retry(self, client: WeatherApiClient):
        route = respx.get(FORECAST_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(ProviderError):
            await client.fetch_weather("Paris", UnitSystem.METRIC)
        assert route.call_count == 1


class TestParseSnapshot:
    def test_imperial_picks_fahrenheit(self):
        snap = parse_snapshot(weatherapi_payload(), UnitSystem.IMPERIAL, fetched_at=42)
        assert snap.current.temp == 59.0
        assert snap.current.feels_like == 57.2
        assert snap.daily[0].temp_max == 68.0
        assert snap.daily[0].temp_min == 50.0
        assert snap.fetched_at_epoch_millis == 42

    def test_wind_is_always_kph(self):
        metric = parse_snapshot(weatherapi_payload(), UnitSystem.METRIC)
        imperial = parse_snapshot(weatherapi_payload(), UnitSystem.IMPERIAL)
        assert metric.current.wind_speed_kph == imperial.current.wind_speed_kph == 13.0

    def test_unit_conversions(self):
        snap = parse_snapshot(weatherapi_payload(), UnitSystem.METRIC)
        assert snap.current.visibility_meters == 10000.0
        assert snap.current.pressure_hpa == 1012.0
        assert snap.current.clouds == 50
        assert snap.daily[0].precipitation_chance == 40
        assert snap.daily[0].icon_ref == "//cdn.weatherapi.com/176.png"

    def test_daily_chronological(self):
        snap = parse_snapshot(weatherapi_payload(), UnitSystem.METRIC)
        assert [d.epoch_seconds for d in snap.daily] == [1_700_000_000, 1_700_086_400]

    def test_empty_forecast_rejected(self):
        payload = weatherapi_payload()
        payload["forecast"]["forecastday"] = []
        with pytest.raises(ValueError):
            parse_snapshot(payload, UnitSystem.METRIC)
