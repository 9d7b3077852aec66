"""Repository for persisted user preferences."""

import sqlite3


def get_preference(conn: sqlite3.Connection, key: str) -> str | None:
    """Get a preference value."""
    row = conn.execute(
        "SELECT value FROM preferences WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_preference(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Set a preference value."""
    conn.execute(
        "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def get_all_preferences(conn: sqlite3.Connection) -> dict[str, str]:
    """Get every stored preference keyed by name."""
    rows = conn.execute("SELECT key, value FROM preferences ORDER BY key").fetchall()
    return {r["key"]: r["value"] for r in rows}
