"""WeatherAPI.com forecast client (current conditions plus daily forecast)."""

import logging
from typing import Any

import httpx

from weatherdash.models.common import UnitSystem, epoch_millis
from weatherdash.models.weather import CurrentConditions, DailyForecast, WeatherSnapshot

logger = logging.getLogger(__name__)

WEATHERAPI_BASE_URL = "https://api.weatherapi.com/v1"
DEFAULT_USER_AGENT = "weatherdash/0.1.0"


class ProviderError(Exception):
    """Weather provider failure; str(exc) is the user-facing message."""


class WeatherApiClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = WEATHERAPI_BASE_URL,
        timeout: float = 15.0,
        forecast_days: int = 5,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.forecast_days = forecast_days
        self._client = http_client
        self._owns_client = http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": DEFAULT_USER_AGENT},
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_weather(
        self, city_name: str, unit_system: UnitSystem
    ) -> WeatherSnapshot:
        """Fetch current conditions and the daily forecast for a city.

        The provider accepts free-text city names and returns both Celsius
        and Fahrenheit fields; the unit system only picks which are kept.

        Raises:
            ProviderError: on transport failure, non-2xx response, or a
                payload that cannot be mapped to a snapshot.
        """
        url = f"{self.base_url}/forecast.json"
        params = {
            "key": self.api_key,
            "q": city_name,
            "days": str(self.forecast_days),
            "aqi": "no",
            "alerts": "no",
        }

        try:
            resp = await self._get_client().get(url, params=params)
        except httpx.RequestError as e:
            logger.warning("Weather request for %r failed: %s", city_name, e)
            raise ProviderError(f"Network error: {e}") from e

        if resp.is_error:
            message = _error_message(resp)
            logger.warning(
                "Weather provider returned %d for %r: %s",
                resp.status_code, city_name, message,
            )
            raise ProviderError(message)

        try:
            return parse_snapshot(resp.json(), unit_system)
        except (KeyError, TypeError, ValueError) as e:
            logger.exception("Malformed weather payload for %r", city_name)
            raise ProviderError(f"Malformed weather data: {e}") from e


def _error_message(resp: httpx.Response) -> str:
    """Pull the provider's message out of {"error": {"message": ...}}."""
    try:
        body = resp.json()
        message = body["error"]["message"]
        if message:
            return str(message)
    except (ValueError, KeyError, TypeError):
        pass
    return f"HTTP error {resp.status_code}"


def parse_snapshot(
    data: dict[str, Any], unit_system: UnitSystem, fetched_at: int | None = None
) -> WeatherSnapshot:
    """Map a forecast.json payload onto a WeatherSnapshot."""
    metric = unit_system == UnitSystem.METRIC
    location = data["location"]
    current = data["current"]

    daily = tuple(
        DailyForecast(
            epoch_seconds=int(day["date_epoch"]),
            temp_max=float(day["day"]["maxtemp_c" if metric else "maxtemp_f"]),
            temp_min=float(day["day"]["mintemp_c" if metric else "mintemp_f"]),
            description=day["day"]["condition"]["text"],
            icon_ref=day["day"]["condition"]["icon"],
            precipitation_chance=int(day["day"].get("daily_chance_of_rain", 0)),
        )
        for day in data["forecast"]["forecastday"]
    )
    if not daily:
        raise ValueError("forecast contains no days")

    return WeatherSnapshot(
        city=location["name"],
        country=location["country"],
        lat=float(location["lat"]),
        lon=float(location["lon"]),
        current=CurrentConditions(
            temp=float(current["temp_c" if metric else "temp_f"]),
            feels_like=float(current["feelslike_c" if metric else "feelslike_f"]),
            humidity=int(current["humidity"]),
            wind_speed_kph=float(current["wind_kph"]),
            description=current["condition"]["text"],
            icon_ref=current["condition"]["icon"],
            clouds=int(current["cloud"]),
            uv_index=float(current["uv"]),
            visibility_meters=float(current["vis_km"]) * 1000,
            pressure_hpa=float(current["pressure_mb"]),
        ),
        daily=daily,
        fetched_at_epoch_millis=fetched_at if fetched_at is not None else epoch_millis(),
    )
