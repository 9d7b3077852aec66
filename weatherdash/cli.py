"""CLI entry point for the weather dashboard."""

import argparse
import asyncio
import json
import logging

from weatherdash.app import WeatherApp
from weatherdash.config.loader import get_config_value, load_config, set_config_value
from weatherdash.config.schema import AppConfig
from weatherdash.models.settings import SettingField
from weatherdash.reporting.formatters import (
    format_analytics,
    format_city_card,
    format_favourites,
    format_forecast,
    format_settings_json,
    format_status,
)

DEFAULT_CONFIG = "weatherdash.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherdash",
        description="Multi-city weather dashboard",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")

    sub = parser.add_subparsers(dest="command")

    # search / dashboard / refresh
    search_p = sub.add_parser("search", help="Fetch weather for one or more cities")
    search_p.add_argument("cities", nargs="+")
    sub.add_parser("dashboard", help="Show weather for all favourite cities")
    sub.add_parser("refresh", help="Refetch all favourite cities")

    # favourites
    fav_p = sub.add_parser("favourite", help="Toggle a favourite city")
    fav_p.add_argument("city")
    sub.add_parser("favourites", help="List favourite cities")

    # forecast / analytics
    forecast_p = sub.add_parser("forecast", help="Show the daily forecast")
    forecast_p.add_argument("--city", default=None)
    analytics_p = sub.add_parser("analytics", help="Show 24h analytics")
    analytics_p.add_argument("--city", default=None)

    # settings show / settings set
    settings_p = sub.add_parser("settings", help="Settings operations")
    settings_sub = settings_p.add_subparsers(dest="settings_command")
    settings_sub.add_parser("show", help="Display current settings")
    set_p = settings_sub.add_parser("set", help="Set a setting")
    set_p.add_argument("field", choices=[f.value for f in SettingField])
    set_p.add_argument("value")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    config_set_p = config_sub.add_parser("set", help="Validate a config value")
    config_set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(args.config)
    if args.db:
        config = config.model_copy(
            update={"storage": config.storage.model_copy(update={"db_path": args.db})}
        )

    logging.basicConfig(
        level=config.log_level.value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "config":
        return _cmd_config(config, args)

    return asyncio.run(_dispatch(config, args))


async def _dispatch(config: AppConfig, args) -> int:
    app = WeatherApp(config)
    try:
        if args.command == "search":
            return await _cmd_search(app, args)
        elif args.command == "dashboard":
            return await _cmd_dashboard(app)
        elif args.command == "refresh":
            return await _cmd_refresh(app)
        elif args.command == "favourite":
            return _cmd_favourite(app, args)
        elif args.command == "favourites":
            print(format_favourites(app.selectors.favourites()))
            return 0
        elif args.command == "forecast":
            return await _cmd_forecast(app, args)
        elif args.command == "analytics":
            return await _cmd_analytics(app, args)
        elif args.command == "settings":
            return _cmd_settings(app, args)
        return 1
    finally:
        await app.close()


def _print_cities(app: WeatherApp) -> None:
    settings = app.settings.settings
    symbol = app.selectors.unit_symbol()
    for snapshot in app.selectors.all_cities():
        print(
            format_city_card(
                snapshot,
                settings,
                symbol,
                favourite=app.selectors.is_favourite(snapshot.city),
                stale_after_seconds=app.config.staleness_seconds,
            )
        )


def _report_errors(app: WeatherApp, names) -> int:
    failed = 0
    for name in names:
        status = app.selectors.city_status(name)
        if status.is_error:
            print(format_status(name, status))
            failed += 1
    return 1 if failed else 0


async def _cmd_search(app: WeatherApp, args) -> int:
    names = [c.strip() for c in args.cities if c.strip()]
    await asyncio.gather(*(app.search(name) for name in names))
    _print_cities(app)
    return _report_errors(app, names)


async def _cmd_dashboard(app: WeatherApp) -> int:
    pending = app.selectors.pending_favourites()
    if not pending:
        print(format_favourites(()))
        return 0
    await app.load_favourite_cities()
    _print_cities(app)
    return _report_errors(app, pending)


async def _cmd_refresh(app: WeatherApp) -> int:
    # A fresh process has an empty cache, so loading the favourites is the refresh.
    statuses = await app.load_favourite_cities()
    _print_cities(app)
    failed = [k for k, s in statuses.items() if s.is_error]
    for key in failed:
        print(format_status(key, statuses[key]))
    return 1 if failed else 0


def _cmd_favourite(app: WeatherApp, args) -> int:
    city = args.city.strip()
    if not city:
        print("Error: empty city name")
        return 1
    app.toggle_favourite(city)
    state = "added to" if app.selectors.is_favourite(city) else "removed from"
    print(f"{city} {state} favourites")
    return 0


async def _load_selected(app: WeatherApp, city: str | None) -> bool:
    await app.load_favourite_cities()
    if city:
        await app.search(city)
    return bool(app.selectors.all_cities())


async def _cmd_forecast(app: WeatherApp, args) -> int:
    if not await _load_selected(app, args.city):
        print("No cities loaded. Add a favourite or pass --city.")
        return 1
    snapshot = app.selectors.selected_snapshot(args.city)
    print(format_forecast(snapshot, app.selectors.forecast(args.city), app.selectors.unit_symbol()))
    return 0


async def _cmd_analytics(app: WeatherApp, args) -> int:
    if not await _load_selected(app, args.city):
        print("No cities loaded. Add a favourite or pass --city.")
        return 1
    series = app.selectors.analytics(args.city)
    print(
        format_analytics(
            series, app.selectors.unit_symbol(), app.selectors.wind_speed_unit()
        )
    )
    return 0


def _cmd_settings(app: WeatherApp, args) -> int:
    if args.settings_command == "show":
        print(format_settings_json(app.settings.settings))
        return 0
    elif args.settings_command == "set":
        before = app.settings.settings
        after = app.set_setting(args.field, args.value)
        if after == before and getattr(before, args.field) != args.value:
            print(f"Error: invalid value {args.value!r} for {args.field}")
            return 1
        print(f"Set {args.field} = {getattr(after, args.field).value}")
        return 0
    else:
        print("Use: settings show | settings set FIELD VALUE")
        return 1


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        data = json.loads(config.model_dump_json())
        if data["provider"]["api_key"]:
            data["provider"]["api_key"] = "***"
        print(json.dumps(data, indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
