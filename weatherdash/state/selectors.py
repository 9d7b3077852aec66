"""Read-only, memoized projections over the weather, favourites and settings stores.

A selector recomputes only when one of its inputs is a different object than
on the previous call. The stores rebind their state on every mutation, so an
unchanged store always yields the very same result object.
"""

from collections.abc import Callable
from typing import Any

from weatherdash.analytics.series import derive_series
from weatherdash.models.analytics import AnalyticsSeries
from weatherdash.models.common import UnitSystem, city_key
from weatherdash.models.settings import Theme, WindSpeedUnit
from weatherdash.models.status import IDLE, FetchStatus
from weatherdash.models.weather import DailyForecast, WeatherSnapshot
from weatherdash.state.favourites import FavouritesStore
from weatherdash.state.settings_store import SettingsStore
from weatherdash.state.weather_cache import CityWeatherCache

UNIT_SYMBOLS = {UnitSystem.METRIC: "°C", UnitSystem.IMPERIAL: "°F"}

_UNSET = object()


def memoize_last(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Cache fn's last result, keyed on the identity of each argument."""
    last_args: tuple = ()
    last_result: Any = _UNSET

    def wrapper(*args: Any) -> Any:
        nonlocal last_args, last_result
        if (
            last_result is _UNSET
            or len(args) != len(last_args)
            or any(a is not b for a, b in zip(args, last_args))
        ):
            last_result = fn(*args)
            last_args = args
        return last_result

    return wrapper


def create_selector(*inputs: Callable[[], Any], combiner: Callable[..., Any]) -> Callable[[], Any]:
    """Combine input selectors; recompute only when an input result changes identity."""
    memo = memoize_last(combiner)

    def selector() -> Any:
        return memo(*(fn() for fn in inputs))

    return selector


def resolve_city(
    snapshots: tuple[WeatherSnapshot, ...],
    favourites: tuple[str, ...],
    selected_city: str | None,
) -> WeatherSnapshot | None:
    """Explicit choice if cached, else the first favourite if cached, else the first city."""
    by_key = {city_key(s.city): s for s in snapshots}
    candidates = [selected_city] if selected_city else []
    if favourites:
        candidates.append(favourites[0])
    for name in candidates:
        snapshot = by_key.get(city_key(name))
        if snapshot is not None:
            return snapshot
    return snapshots[0] if snapshots else None


class Selectors:
    def __init__(
        self,
        cache: CityWeatherCache,
        favourites: FavouritesStore,
        settings: SettingsStore,
    ):
        self.cache = cache
        self.favourites_store = favourites
        self.settings_store = settings

        self._all_cities = create_selector(
            lambda: self.cache.entries,
            combiner=lambda entries: tuple(e.snapshot for e in entries.values()),
        )
        self._unit_symbol = create_selector(
            lambda: self.settings_store.settings.temperature_unit,
            combiner=lambda unit: UNIT_SYMBOLS[unit],
        )
        self._pending_favourites = create_selector(
            lambda: self.favourites_store.cities,
            lambda: self.cache.entries,
            combiner=lambda favs, entries: tuple(
                f for f in favs if city_key(f) not in entries
            ),
        )
        self._favourite_cities = create_selector(
            lambda: self.favourites_store.cities,
            lambda: self.cache.entries,
            combiner=lambda favs, entries: tuple(
                entries[city_key(f)].snapshot for f in favs if city_key(f) in entries
            ),
        )
        self._status_selectors: dict[str, Callable[[], FetchStatus]] = {}
        self._resolve = memoize_last(resolve_city)
        self._series = memoize_last(derive_series)

    def all_cities(self) -> tuple[WeatherSnapshot, ...]:
        """Every cached snapshot, in the order cities were first added."""
        return self._all_cities()

    def city_status(self, city_name: str) -> FetchStatus:
        """The city's fetch status; IDLE when nothing was ever requested.

        Only keys the cache holds a status for keep a memo.
        """
        key = city_key(city_name)
        if key not in self.cache.statuses:
            self._status_selectors.pop(key, None)
            return IDLE
        selector = self._status_selectors.get(key)
        if selector is None:
            selector = create_selector(
                lambda: self.cache.statuses.get(key, IDLE),
                combiner=lambda status: status,
            )
            self._status_selectors[key] = selector
        return selector()

    def forget_city(self, city_name: str) -> None:
        """Drop memos held for a removed city."""
        self._status_selectors.pop(city_key(city_name), None)

    def unit_symbol(self) -> str:
        return self._unit_symbol()

    def temperature_unit(self) -> UnitSystem:
        return self.settings_store.settings.temperature_unit

    def wind_speed_unit(self) -> WindSpeedUnit:
        return self.settings_store.settings.wind_speed_unit

    def theme(self) -> Theme:
        return self.settings_store.settings.theme

    def favourites(self) -> tuple[str, ...]:
        return self.favourites_store.cities

    def is_favourite(self, city_name: str) -> bool:
        key = city_key(city_name)
        return any(city_key(f) == key for f in self.favourites_store.cities)

    def pending_favourites(self) -> tuple[str, ...]:
        """Favourites with no cached snapshot yet."""
        return self._pending_favourites()

    def favourite_cities(self) -> tuple[WeatherSnapshot, ...]:
        """Cached snapshots of favourite cities, in favourites order."""
        return self._favourite_cities()

    def selected_snapshot(self, selected_city: str | None = None) -> WeatherSnapshot | None:
        return self._resolve(self.all_cities(), self.favourites(), selected_city)

    def analytics(self, selected_city: str | None = None) -> AnalyticsSeries | None:
        """Synthetic intraday series for the resolved city, or None with an empty cache."""
        snapshot = self.selected_snapshot(selected_city)
        if snapshot is None:
            return None
        return self._series(snapshot)

    def forecast(self, selected_city: str | None = None) -> tuple[DailyForecast, ...]:
        snapshot = self.selected_snapshot(selected_city)
        if snapshot is None:
            return ()
        return snapshot.daily
