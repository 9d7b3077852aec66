"""Application container: builds the stores once and wires them together."""

import logging
import sqlite3
from collections.abc import Mapping

from weatherdash.config.schema import AppConfig
from weatherdash.ingest.weatherapi_client import WeatherApiClient
from weatherdash.models.common import CityKey, UnitSystem
from weatherdash.models.settings import SettingField, Settings
from weatherdash.models.status import FetchStatus
from weatherdash.state.favourites import FavouritesStore
from weatherdash.state.selectors import Selectors
from weatherdash.state.settings_store import SettingsStore
from weatherdash.state.weather_cache import CityWeatherCache, FetchWeather
from weatherdash.storage.database import open_database
from weatherdash.storage.kv_store import KeyValueStore, MemoryKeyValueStore, SqliteKeyValueStore

logger = logging.getLogger(__name__)


def open_store(db_path: str) -> tuple[KeyValueStore, sqlite3.Connection | None]:
    """Open the SQLite preference store, or fall back to memory if it fails."""
    try:
        conn = open_database(db_path)
    except (sqlite3.Error, OSError):
        logger.exception("Could not open %s, preferences will not persist", db_path)
        return MemoryKeyValueStore(), None
    return SqliteKeyValueStore(conn), conn


class WeatherApp:
    def __init__(
        self,
        config: AppConfig,
        store: KeyValueStore | None = None,
        fetch_weather: FetchWeather | None = None,
    ):
        self.config = config
        self._conn: sqlite3.Connection | None = None
        if store is None:
            store, self._conn = open_store(config.storage.db_path)
        self.store = store

        self.client: WeatherApiClient | None = None
        if fetch_weather is None:
            self.client = WeatherApiClient(
                api_key=config.provider.api_key,
                base_url=config.provider.base_url,
                timeout=config.provider.timeout_seconds,
                forecast_days=config.provider.forecast_days,
            )
            fetch_weather = self.client.fetch_weather

        self.settings = SettingsStore(store)
        self.favourites = FavouritesStore(store)
        self.cache = CityWeatherCache(fetch_weather)
        self.selectors = Selectors(self.cache, self.favourites, self.settings)

        self.settings.load()
        self.favourites.load()
        logger.info(
            "Loaded %d favourites, unit=%s",
            len(self.favourites.cities), self.settings.settings.temperature_unit,
        )

    # --- Commands ---

    async def search(self, city_name: str) -> FetchStatus | None:
        """Fetch a typed city name in the current unit. Blank input is ignored."""
        city = city_name.strip()
        if not city:
            return None
        return await self.cache.request_fetch(city, self.selectors.temperature_unit())

    async def load_favourite_cities(self) -> Mapping[CityKey, FetchStatus]:
        """Fetch every favourite that is not cached yet."""
        unit = self.selectors.temperature_unit()
        for name in self.selectors.pending_favourites():
            self.cache.request_fetch(name, unit)
        await self.cache.wait_idle()
        return self.cache.statuses

    async def refresh_all(self) -> Mapping[CityKey, FetchStatus]:
        return await self.cache.refresh_all()

    async def refresh_stale(self) -> Mapping[CityKey, FetchStatus]:
        """Refetch cities older than the configured staleness window, or failed."""
        return await self.cache.refresh_stale(self.config.staleness_seconds)

    def remove_city(self, city_name: str) -> None:
        self.cache.remove(city_name)
        self.selectors.forget_city(city_name)

    def toggle_favourite(self, city_name: str) -> tuple[str, ...]:
        return self.favourites.toggle(city_name.strip())

    def set_setting(self, field: str, value: str) -> Settings:
        return self.settings.set(field, value)

    async def change_unit(self, unit: UnitSystem | str) -> Mapping[CityKey, FetchStatus]:
        """Switch the temperature unit and refetch cached cities in it."""
        before = self.settings.settings.temperature_unit
        after = self.settings.set(SettingField.TEMPERATURE_UNIT, unit).temperature_unit
        if after != before:
            for snapshot in self.selectors.all_cities():
                self.cache.request_fetch(snapshot.city, after)
            await self.cache.wait_idle()
        return self.cache.statuses

    async def close(self) -> None:
        await self.cache.wait_idle()
        if self.client is not None:
            await self.client.close()
        if self._conn is not None:
            self._conn.close()
            self._conn = None
