"""Staleness checks for cached weather snapshots."""

from weatherdash.models.common import epoch_millis
from weatherdash.models.weather import WeatherSnapshot

STALENESS_THRESHOLD_SECONDS = 60


def snapshot_age_seconds(
    snapshot: WeatherSnapshot, now_millis: int | None = None
) -> float:
    """Seconds elapsed since the snapshot was fetched."""
    if now_millis is None:
        now_millis = epoch_millis()
    return (now_millis - snapshot.fetched_at_epoch_millis) / 1000


def is_snapshot_stale(
    snapshot: WeatherSnapshot,
    max_age_seconds: int = STALENESS_THRESHOLD_SECONDS,
    now_millis: int | None = None,
) -> bool:
    """Check if a snapshot is older than max_age_seconds."""
    return snapshot_age_seconds(snapshot, now_millis) > max_age_seconds
