"""Tests for the favourites store and its persistence."""

import json

from weatherdash.state.favourites import FAVOURITES_KEY, FavouritesStore
from weatherdash.storage.kv_store import MemoryKeyValueStore


class BrokenStore:
    def get(self, key):
        raise OSError("disk gone")

    def set(self, key, value):
        raise OSError("disk gone")


class TestLoad:
    def test_missing_key_is_empty(self, memory_store: MemoryKeyValueStore):
        assert FavouritesStore(memory_store).load() == ()

    def test_loads_saved_list(self):
        store = MemoryKeyValueStore({FAVOURITES_KEY: '["Delhi", "London"]'})
        assert FavouritesStore(store).load() == ("Delhi", "London")

    def test_corrupt_json_is_empty(self):
        store = MemoryKeyValueStore({FAVOURITES_KEY: "[not json"})
        assert FavouritesStore(store).load() == ()

    def test_non_list_payload_is_empty(self):
        store = MemoryKeyValueStore({FAVOURITES_KEY: '{"city": "Delhi"}'})
        assert FavouritesStore(store).load() == ()

    def test_storage_fault_is_empty(self):
        assert FavouritesStore(BrokenStore()).load() == ()

    def test_drops_bad_items_and_duplicates(self):
        store = MemoryKeyValueStore({FAVOURITES_KEY: '["Delhi", 3, "DELHI", null, "Rome"]'})
        assert FavouritesStore(store).load() == ("Delhi", "Rome")


class TestToggle:
    def test_appends_with_original_casing(self, memory_store: MemoryKeyValueStore):
        favs = FavouritesStore(memory_store)
        favs.toggle("Delhi")
        favs.toggle("new YORK")
        assert favs.cities == ("Delhi", "new YORK")

    def test_removes_case_insensitively(self, memory_store: MemoryKeyValueStore):
        favs = FavouritesStore(memory_store)
        favs.toggle("London")
        favs.toggle("LONDON")
        assert favs.cities == ()

    def test_is_its_own_inverse(self):
        store = MemoryKeyValueStore({FAVOURITES_KEY: '["Delhi", "Rome"]'})
        favs = FavouritesStore(store)
        favs.load()
        before = favs.cities

        favs.toggle("Oslo")
        favs.toggle("oslo")
        assert favs.cities == before
        assert json.loads(store.get(FAVOURITES_KEY)) == ["Delhi", "Rome"]

    def test_removal_keeps_order(self):
        store = MemoryKeyValueStore({FAVOURITES_KEY: '["A", "B", "C"]'})
        favs = FavouritesStore(store)
        favs.load()
        favs.toggle("b")
        assert favs.cities == ("A", "C")

    def test_every_mutation_persists_full_list(self, memory_store: MemoryKeyValueStore):
        favs = FavouritesStore(memory_store)
        favs.toggle("Delhi")
        assert json.loads(memory_store.get(FAVOURITES_KEY)) == ["Delhi"]
        favs.toggle("Paris")
        assert json.loads(memory_store.get(FAVOURITES_KEY)) == ["Delhi", "Paris"]

    def test_survives_reload(self, memory_store: MemoryKeyValueStore):
        FavouritesStore(memory_store).toggle("Tokyo")
        assert FavouritesStore(memory_store).load() == ("Tokyo",)

    def test_write_fault_still_updates_memory(self):
        favs = FavouritesStore(BrokenStore())
        favs.toggle("Delhi")
        assert favs.cities == ("Delhi",)

    def test_rebinds_on_mutation(self, memory_store: MemoryKeyValueStore):
        favs = FavouritesStore(memory_store)
        before = favs.cities
        favs.toggle("Delhi")
        assert favs.cities is not before


class TestAddRemove:
    def test_add_is_idempotent(self, memory_store: MemoryKeyValueStore):
        favs = FavouritesStore(memory_store)
        favs.add("Delhi")
        favs.add("delhi")
        assert favs.cities == ("Delhi",)

    def test_remove(self, memory_store: MemoryKeyValueStore):
        favs = FavouritesStore(memory_store)
        favs.add("Delhi")
        favs.remove("DELHI")
        assert favs.cities == ()
        assert memory_store.get(FAVOURITES_KEY) == "[]"

    def test_is_favourite(self, memory_store: MemoryKeyValueStore):
        favs = FavouritesStore(memory_store)
        favs.add("Delhi")
        assert favs.is_favourite("DELHI")
        assert not favs.is_favourite("Mumbai")
