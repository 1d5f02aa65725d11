# connects settings and the service to the terminal, the presenter never re-aggregates

from __future__ import annotations
import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from .client import OpenWeatherClient, WeatherAPIError, UNITS
from .models import UNIT_SYMBOLS, CurrentWeather, Dashboard, DailySummary
from .service import fetch_dashboard, forecast_all
from .settings import POPULAR_CITIES, Settings, SettingsStore

logger = logging.getLogger(__name__)


def _fmt_temp(value: Optional[float], symbol: str) -> str:
    return "--" if value is None else f"{round(value)}{symbol}"


def _fmt_time(ts: Optional[int]) -> str:
    return "--" if ts is None else datetime.fromtimestamp(ts).strftime("%H:%M")


def render_current(current: CurrentWeather, units: str) -> List[str]:
    symbols = UNIT_SYMBOLS[units]
    temp = symbols["temperature"]
    description = current.condition.description if current.condition else "Unknown"
    wind = "--" if current.wind_speed is None else f"{round(current.wind_speed)} {symbols['wind']}"
    humidity = "--" if current.humidity is None else f"{current.humidity}%"
    pressure = "--" if current.pressure is None else f"{current.pressure} hPa"
    return [
        f"{current.location}, {current.country}",
        datetime.now().strftime("%A, %B %d, %Y"),
        f"{_fmt_temp(current.temperature, temp)}  {description}",
        f"Feels Like: {_fmt_temp(current.feels_like, temp)}  Humidity: {humidity}",
        f"Wind Speed: {wind}  Pressure: {pressure}",
        f"Sunrise: {_fmt_time(current.sunrise)}  Sunset: {_fmt_time(current.sunset)}",
    ]


def render_daily(daily: List[DailySummary], units: str) -> List[str]:
    if not daily:
        return ["Forecast data unavailable"]
    temp = UNIT_SYMBOLS[units]["temperature"]
    lines = []
    for day in daily:
        d = day.day()
        description = day.dominant_condition.description if day.dominant_condition else "Unknown"
        lines.append(
            f"{d.strftime('%A'):<10} {d.strftime('%b %d')}  {description:<20} "
            f"{_fmt_temp(day.temperature_max, temp)} / {_fmt_temp(day.temperature_min, temp)}"
        )
    return lines


def render_dashboard(dashboard: Dashboard) -> str:
    lines = render_current(dashboard.current, dashboard.units)
    lines.append("")
    lines.append("5-Day Forecast")
    lines.extend(render_daily(dashboard.daily, dashboard.units))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weatherdash", description="Current weather and daily forecast")
    parser.add_argument("command", nargs="?", choices=("show", "cities"), default="show")
    parser.add_argument("--location", help="city to show, e.g. 'Paris'")
    parser.add_argument("--units", choices=UNITS)
    parser.add_argument("--toggle-units", action="store_true", help="switch between metric and imperial")
    parser.add_argument("--save", action="store_true", help="remember location/units for next time")
    parser.add_argument("--settings-file", help="settings path (default: $WEATHERDASH_SETTINGS or ~/.weatherdash)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def resolve_settings(args: argparse.Namespace, store: SettingsStore) -> Settings:
    settings = store.load()
    if args.location is not None:
        settings = settings.with_location(args.location)
    if args.units is not None:
        settings = settings.with_units(args.units)
    if args.toggle_units:
        settings = settings.toggle_units()
    if args.save:
        store.save(settings)
        logger.info("Saved settings: %s (%s)", settings.location, settings.units)
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = resolve_settings(args, SettingsStore(args.settings_file))
        client = OpenWeatherClient()
        if args.command == "cities":
            # quick-pick list with the first forecast day of each city
            temp = UNIT_SYMBOLS[settings.units]["temperature"]
            for city, daily in forecast_all(POPULAR_CITIES, units=settings.units, client=client).items():
                marker = "*" if city == settings.location else " "
                if not daily:
                    print(f"{marker} {city}: Forecast data unavailable")
                    continue
                first = daily[0]
                description = first.dominant_condition.description if first.dominant_condition else "Unknown"
                print(f"{marker} {city}: {description}, "
                      f"{_fmt_temp(first.temperature_max, temp)} / {_fmt_temp(first.temperature_min, temp)}")
        else:
            print(render_dashboard(fetch_dashboard(client, settings)))
    except (WeatherAPIError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
