"""Per-city fetch lifecycle status."""

from dataclasses import dataclass
from enum import StrEnum


class FetchState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class FetchStatus:
    state: FetchState
    error: str | None = None

    @classmethod
    def failed(cls, message: str) -> "FetchStatus":
        return cls(FetchState.ERROR, message)

    @property
    def is_loading(self) -> bool:
        return self.state == FetchState.LOADING

    @property
    def is_error(self) -> bool:
        return self.state == FetchState.ERROR


IDLE = FetchStatus(FetchState.IDLE)
LOADING = FetchStatus(FetchState.LOADING)
SUCCESS = FetchStatus(FetchState.SUCCESS)
