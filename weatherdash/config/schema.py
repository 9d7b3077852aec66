"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.weatherapi.com/v1"
    api_key: str = ""
    timeout_seconds: float = Field(default=15.0, gt=0.0)
    forecast_days: int = Field(default=5, ge=1, le=14)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/weatherdash.db"


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    storage: StorageConfig = StorageConfig()
    staleness_seconds: int = Field(default=60, ge=1)
    log_level: LogLevel = LogLevel.INFO
