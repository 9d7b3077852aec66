"""Shared test fixtures."""

from pathlib import Path

import pytest
import yaml

from weatherdash.models.weather import WeatherSnapshot
from weatherdash.storage.kv_store import MemoryKeyValueStore
from weatherdash.tests.factories import make_snapshot


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def snapshot() -> WeatherSnapshot:
    return make_snapshot()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "yaml-key", "timeout_seconds": 5.0},
        "storage": {"db_path": str(tmp_path / "prefs.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
