"""Weather Dashboard JSON API: selector projections for reads, store commands for writes."""

import dataclasses

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from weatherdash.app import WeatherApp
from weatherdash.models.settings import FIELD_TYPES, SettingField
from weatherdash.models.status import FetchStatus


class SettingUpdate(BaseModel):
    value: str


def _status_json(status: FetchStatus) -> dict:
    return {"status": status.state.value, "error": status.error}


def create_app(weather: WeatherApp) -> FastAPI:
    app = FastAPI(title="Weather Dashboard", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    sel = weather.selectors

    # ── Read endpoints ──────────────────────────────────────────────

    @app.get("/api/cities")
    def get_cities():
        """All cached cities in insertion order."""
        return [dataclasses.asdict(s) for s in sel.all_cities()]

    @app.get("/api/cities/{city}/status")
    def get_city_status(city: str):
        return _status_json(sel.city_status(city))

    @app.get("/api/favourites")
    def get_favourites():
        return {
            "favourites": list(sel.favourites()),
            "pending": list(sel.pending_favourites()),
        }

    @app.get("/api/settings")
    def get_settings():
        return {
            **dataclasses.asdict(weather.settings.settings),
            "unit_symbol": sel.unit_symbol(),
        }

    @app.get("/api/analytics")
    def get_analytics(city: str | None = None):
        series = sel.analytics(city)
        if series is None:
            raise HTTPException(404, "No cities loaded")
        return {
            **dataclasses.asdict(series),
            "humidity_status": series.humidity_status,
            "wind_at_noon": series.wind_at_noon,
            "max_wind": series.max_wind,
            "unit_symbol": sel.unit_symbol(),
        }

    @app.get("/api/forecast")
    def get_forecast(city: str | None = None):
        snapshot = sel.selected_snapshot(city)
        if snapshot is None:
            raise HTTPException(404, "No cities loaded")
        return {
            "city": snapshot.city,
            "country": snapshot.country,
            "daily": [dataclasses.asdict(d) for d in sel.forecast(city)],
        }

    # ── Commands ────────────────────────────────────────────────────

    @app.post("/api/cities/{city}")
    async def fetch_city(city: str):
        status = await weather.search(city)
        if status is None:
            raise HTTPException(400, "City name is empty")
        return _status_json(status)

    # Commands touching the preference store are async so they all run on the
    # event loop thread, one at a time.

    @app.delete("/api/cities/{city}")
    async def remove_city(city: str):
        weather.remove_city(city)
        return {"removed": city}

    @app.post("/api/refresh")
    async def refresh(stale_only: bool = False):
        if stale_only:
            statuses = await weather.refresh_stale()
        else:
            statuses = await weather.refresh_all()
        return {key: _status_json(s) for key, s in statuses.items()}

    @app.post("/api/favourites/{city}")
    async def toggle_favourite(city: str):
        favourites = weather.toggle_favourite(city)
        return {"favourites": list(favourites), "is_favourite": sel.is_favourite(city)}

    @app.put("/api/settings/{field}")
    async def update_setting(field: SettingField, update: SettingUpdate):
        try:
            FIELD_TYPES[field](update.value)
        except ValueError:
            raise HTTPException(422, f"Invalid value for {field.value}: {update.value}")
        if field == SettingField.TEMPERATURE_UNIT:
            await weather.change_unit(update.value)
        else:
            weather.set_setting(field, update.value)
        return dataclasses.asdict(weather.settings.settings)

    return app


if __name__ == "__main__":
    import uvicorn

    from weatherdash.config.loader import load_config

    uvicorn.run(create_app(WeatherApp(load_config("weatherdash.yaml"))), host="0.0.0.0", port=8777)
