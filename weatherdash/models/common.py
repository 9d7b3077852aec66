"""Common types and helpers shared across models."""

import math
import time
from enum import StrEnum
from typing import TypeAlias

CityKey: TypeAlias = str


class UnitSystem(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"


def city_key(city_name: str) -> CityKey:
    """Case-insensitive identity of a city name."""
    return city_name.lower()


def epoch_millis() -> int:
    return int(time.time() * 1000)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with .5 going towards positive infinity (unlike builtin round)."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor
