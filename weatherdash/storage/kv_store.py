"""Synchronous key-value stores backing favourites and settings.

Both implementations may raise; callers own the fail-soft handling.
"""

import sqlite3
from typing import Protocol

from weatherdash.storage import preferences_repo


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SqliteKeyValueStore:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, key: str) -> str | None:
        return preferences_repo.get_preference(self.conn, key)

    def set(self, key: str, value: str) -> None:
        preferences_repo.set_preference(self.conn, key, value)


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
