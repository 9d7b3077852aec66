"""Per-city weather cache and fetch lifecycle.

Snapshots are keyed by the lower-cased canonical name the provider returns,
so "paris", "PARIS" and "Paris" all land on one entry. Statuses are keyed the
same way, except that a failed or in-flight lookup stays under the key of the
name the user typed until the provider tells us the canonical one.

Every request_fetch takes a fresh generation number for its key and remove
discards it. A fetch whose generation is no longer current when it resolves
is dropped, so the most recently issued request wins and a removed city
stays removed.
"""

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

from weatherdash.ingest.staleness import STALENESS_THRESHOLD_SECONDS, is_snapshot_stale
from weatherdash.ingest.weatherapi_client import ProviderError
from weatherdash.models.common import CityKey, UnitSystem, city_key
from weatherdash.models.status import IDLE, LOADING, SUCCESS, FetchStatus
from weatherdash.models.weather import WeatherSnapshot

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong"

FetchWeather = Callable[[str, UnitSystem], Awaitable[WeatherSnapshot]]


@dataclass(frozen=True)
class CityEntry:
    snapshot: WeatherSnapshot
    unit_system: UnitSystem  # unit system the snapshot was fetched with


class CityWeatherCache:
    def __init__(self, fetch_weather: FetchWeather):
        self._fetch_weather = fetch_weather
        # Both maps are replaced, never mutated in place, so readers can
        # detect change by identity.
        self._entries: dict[CityKey, CityEntry] = {}
        self._statuses: dict[CityKey, FetchStatus] = {}
        self._generations: dict[CityKey, int] = {}
        self._counter = itertools.count(1)
        self._inflight: set[asyncio.Task] = set()

    # --- Read access ---

    @property
    def entries(self) -> Mapping[CityKey, CityEntry]:
        return self._entries

    @property
    def statuses(self) -> Mapping[CityKey, FetchStatus]:
        return self._statuses

    def snapshot(self, city_name: str) -> WeatherSnapshot | None:
        entry = self._entries.get(city_key(city_name))
        return entry.snapshot if entry is not None else None

    def status(self, city_name: str) -> FetchStatus:
        return self._statuses.get(city_key(city_name), IDLE)

    def unit_system_for(self, city_name: str) -> UnitSystem | None:
        entry = self._entries.get(city_key(city_name))
        return entry.unit_system if entry is not None else None

    # --- Commands ---

    def request_fetch(
        self, city_name: str, unit_system: UnitSystem | str
    ) -> "asyncio.Task[FetchStatus]":
        """Start fetching a city and return the task resolving to its final status.

        The status under the typed name's key is LOADING as soon as this
        returns. Must be called with an event loop running. The task never
        raises; failures end up in the city's status.
        """
        loop = asyncio.get_running_loop()
        unit_system = UnitSystem(unit_system)
        key = city_key(city_name)
        generation = next(self._counter)
        self._generations[key] = generation
        self._statuses = {**self._statuses, key: LOADING}
        logger.debug("Fetching %r (%s), generation %d", city_name, unit_system, generation)

        task = loop.create_task(self._run_fetch(city_name, unit_system, generation))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def remove(self, city_name: str) -> None:
        """Forget a city's snapshot and status. In-flight fetches for it are dropped."""
        key = city_key(city_name)
        self._generations.pop(key, None)
        if key in self._entries:
            self._entries = {k: v for k, v in self._entries.items() if k != key}
        if key in self._statuses:
            self._statuses = {k: v for k, v in self._statuses.items() if k != key}

    async def refresh_all(self) -> Mapping[CityKey, FetchStatus]:
        """Refetch every cached city with the unit system it was last fetched in.

        All fetches start before any is awaited. Waits for every one to
        settle; one failing city does not affect the others.
        """
        entries = list(self._entries.values())
        tasks = [self.request_fetch(e.snapshot.city, e.unit_system) for e in entries]
        if tasks:
            logger.info("Refreshing %d cities", len(tasks))
            await asyncio.gather(*tasks, return_exceptions=True)
        return self._statuses

    async def refresh_stale(
        self, max_age_seconds: int = STALENESS_THRESHOLD_SECONDS
    ) -> Mapping[CityKey, FetchStatus]:
        """Refetch only cities whose snapshot is stale or whose last fetch failed."""
        tasks = [
            self.request_fetch(entry.snapshot.city, entry.unit_system)
            for key, entry in list(self._entries.items())
            if is_snapshot_stale(entry.snapshot, max_age_seconds)
            or self._statuses.get(key, IDLE).is_error
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        return self._statuses

    async def wait_idle(self) -> None:
        """Wait until every in-flight fetch has settled."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    # --- Resolution ---

    async def _run_fetch(
        self, city_name: str, unit_system: UnitSystem, generation: int
    ) -> FetchStatus:
        input_key = city_key(city_name)
        try:
            snapshot = await self._fetch_weather(city_name, unit_system)
        except ProviderError as e:
            message = str(e) or DEFAULT_ERROR_MESSAGE
        except Exception as e:
            logger.exception("Unexpected failure fetching %r", city_name)
            message = str(e) or DEFAULT_ERROR_MESSAGE
        else:
            return self._resolve_success(input_key, generation, snapshot, unit_system)
        return self._resolve_error(input_key, generation, message)

    def _is_current(self, key: CityKey, generation: int) -> bool:
        return self._generations.get(key) == generation

    def _resolve_success(
        self,
        input_key: CityKey,
        generation: int,
        snapshot: WeatherSnapshot,
        unit_system: UnitSystem,
    ) -> FetchStatus:
        if not self._is_current(input_key, generation):
            logger.debug("Dropping superseded result for %r", input_key)
            return self.status(input_key)
        if not snapshot.daily:
            return self._resolve_error(input_key, generation, "No forecast data returned")

        key = city_key(snapshot.city)
        self._entries = {**self._entries, key: CityEntry(snapshot, unit_system)}
        statuses = {**self._statuses, key: SUCCESS}
        if key != input_key:
            statuses.pop(input_key, None)
            self._generations.pop(input_key, None)
        self._statuses = statuses
        logger.info("Fetched weather for %s, %s", snapshot.city, snapshot.country)
        return SUCCESS

    def _resolve_error(
        self, input_key: CityKey, generation: int, message: str
    ) -> FetchStatus:
        if not self._is_current(input_key, generation):
            logger.debug("Dropping superseded failure for %r", input_key)
            return self.status(input_key)
        status = FetchStatus.failed(message)
        self._statuses = {**self._statuses, input_key: status}
        logger.warning("Weather fetch for %r failed: %s", input_key, message)
        return status
