"""Favourite cities: ordered, case-insensitively unique, persisted on every change."""

import json
import logging

from weatherdash.models.common import city_key
from weatherdash.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

FAVOURITES_KEY = "weather-dashboard-favourites"


class FavouritesStore:
    def __init__(self, store: KeyValueStore):
        self.store = store
        self._cities: tuple[str, ...] = ()

    @property
    def cities(self) -> tuple[str, ...]:
        """Current favourites; a new tuple is bound on every mutation."""
        return self._cities

    def load(self) -> tuple[str, ...]:
        """Read favourites from storage. Any fault yields an empty list."""
        try:
            raw = self.store.get(FAVOURITES_KEY)
            parsed = json.loads(raw) if raw else []
        except Exception:
            logger.warning("Could not load favourites, starting empty", exc_info=True)
            parsed = []

        if not isinstance(parsed, list):
            logger.warning("Ignoring favourites payload of type %s", type(parsed).__name__)
            parsed = []

        cities: list[str] = []
        seen: set[str] = set()
        for item in parsed:
            if isinstance(item, str) and city_key(item) not in seen:
                seen.add(city_key(item))
                cities.append(item)

        self._cities = tuple(cities)
        return self._cities

    def _index_of(self, city_name: str) -> int:
        key = city_key(city_name)
        for i, c in enumerate(self._cities):
            if city_key(c) == key:
                return i
        return -1

    def is_favourite(self, city_name: str) -> bool:
        return self._index_of(city_name) != -1

    def toggle(self, city_name: str) -> tuple[str, ...]:
        """Remove the matching entry, or append city_name as typed."""
        index = self._index_of(city_name)
        if index == -1:
            self._cities = (*self._cities, city_name)
        else:
            self._cities = self._cities[:index] + self._cities[index + 1:]
        self._save()
        return self._cities

    def add(self, city_name: str) -> tuple[str, ...]:
        if not self.is_favourite(city_name):
            self._cities = (*self._cities, city_name)
            self._save()
        return self._cities

    def remove(self, city_name: str) -> tuple[str, ...]:
        key = city_key(city_name)
        self._cities = tuple(c for c in self._cities if city_key(c) != key)
        self._save()
        return self._cities

    def _save(self) -> None:
        try:
            self.store.set(FAVOURITES_KEY, json.dumps(list(self._cities)))
        except Exception:
            logger.exception("Could not save favourites")
