# orchestration and business rules.
# pure functions turn provider payloads into value objects and fold 3-hour samples into days,
# fetch_dashboard / forecast_all coordinate the network calls on a ThreadPoolExecutor

from __future__ import annotations
import logging
import math
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Tuple
from .models import Condition, CurrentWeather, DailySummary, Dashboard, WeatherSample, day_key
from .client import OpenWeatherClient
from .settings import Settings

logger = logging.getLogger(__name__)


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    # nan and inf count as missing
    return f if math.isfinite(f) else None


def _to_int(value: Any) -> Optional[int]:
    f = _to_float(value)
    return int(f) if f is not None else None


def _to_timestamp(value: Any) -> Optional[int]:
    ts = _to_int(value)
    if ts is None:
        return None
    try:
        # a day of slack either side keeps it representable in any local zone
        datetime.fromtimestamp(ts - 86400, timezone.utc)
        datetime.fromtimestamp(ts + 86400, timezone.utc)
    except (OverflowError, ValueError, OSError):
        logger.debug("timestamp out of range: %r", value)
        return None
    return ts


def _parse_conditions(entries: Any) -> Tuple[Condition, ...]:
    if not isinstance(entries, list):
        return ()
    return tuple(
        Condition(
            category=w.get("main") or None,
            description=w.get("description") or "",
            icon=w.get("icon") or "",
        )
        for w in entries
        if isinstance(w, dict)
    )


def parse_samples(payload: Any) -> List[WeatherSample]:
    """Turn an OpenWeatherMap /forecast payload into WeatherSample objects.

    Records are kept even when partially broken; missing fields become None so
    the aggregator can decide what each record may still contribute. A payload
    without a usable ``list`` yields no samples.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("list"), list):
        logger.debug("forecast payload has no sample list")
        return []

    samples: List[WeatherSample] = []
    for item in payload["list"]:
        if not isinstance(item, dict):
            logger.debug("skipping non-object forecast record: %r", item)
            continue
        main = item.get("main") if isinstance(item.get("main"), dict) else {}
        samples.append(
            WeatherSample(
                timestamp=_to_timestamp(item.get("dt")),
                temperature_min=_to_float(main.get("temp_min")),
                temperature_max=_to_float(main.get("temp_max")),
                conditions=_parse_conditions(item.get("weather")),
            )
        )
    return samples


def parse_current(payload: Dict[str, Any]) -> CurrentWeather:
    # weather endpoint shape: name, sys.country, main.{temp,...}, wind.speed, weather[0]
    try:
        main = payload["main"]
        if not isinstance(main, dict):
            raise TypeError("main is not an object")
        temperature = float(main["temp"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError("Unsupported payload shape for parse_current()") from exc

    sys_info = payload.get("sys") if isinstance(payload.get("sys"), dict) else {}
    wind = payload.get("wind") if isinstance(payload.get("wind"), dict) else {}
    conditions = _parse_conditions(payload.get("weather"))
    return CurrentWeather(
        location=payload.get("name") or "",
        country=sys_info.get("country") or "",
        temperature=temperature,
        feels_like=_to_float(main.get("feels_like")),
        humidity=_to_int(main.get("humidity")),
        wind_speed=_to_float(wind.get("speed")),
        pressure=_to_int(main.get("pressure")),
        sunrise=_to_timestamp(sys_info.get("sunrise")),
        sunset=_to_timestamp(sys_info.get("sunset")),
        condition=conditions[0] if conditions else None,
    )


def _dominant_condition(ordered: List[WeatherSample]) -> Optional[Condition]:
    # one pass: count per category plus the position of its first appearance
    tally: Dict[str, List[Any]] = {}
    for pos, sample in enumerate(ordered):
        category = sample.category
        if category is None:
            continue
        entry = tally.get(category)
        if entry is None:
            tally[category] = [1, pos, sample.condition]
        else:
            entry[0] += 1

    if not tally:
        # no sample of the day carries a category: keep the first sample's raw entry
        logger.debug("no condition category for day starting at %s", ordered[0].timestamp)
        return ordered[0].condition

    # highest count wins, ties go to the category seen first
    _, _, condition = max(tally.values(), key=lambda e: (e[0], -e[1]))
    return condition


def _summarize(bucket: List[WeatherSample]) -> DailySummary:
    ordered = sorted(bucket, key=lambda s: s.timestamp)
    mins = [s.temperature_min for s in ordered if s.temperature_min is not None]
    maxes = [s.temperature_max for s in ordered if s.temperature_max is not None]
    return DailySummary(
        representative_timestamp=ordered[0].timestamp,
        temperature_min=min(mins) if mins else None,
        temperature_max=max(maxes) if maxes else None,
        dominant_condition=_dominant_condition(ordered),
    )


def aggregate(samples: Optional[Iterable[WeatherSample]], tz: Optional[tzinfo] = None) -> List[DailySummary]:
    """Fold 3-hour samples into one summary per local calendar day.

    Days are ordered by their earliest sample. Samples without a timestamp are
    dropped; a missing or non-iterable input gives an empty list. A timestamp
    that is not a number raises TypeError.
    """
    if samples is None:
        return []
    try:
        iterator = iter(samples)
    except TypeError:
        logger.debug("aggregate() got a non-iterable input: %r", type(samples).__name__)
        return []

    buckets: Dict[date, List[WeatherSample]] = {}
    for sample in iterator:
        if sample.timestamp is None:
            logger.debug("skipping sample without timestamp")
            continue
        buckets.setdefault(day_key(sample.timestamp, tz), []).append(sample)

    summaries = [_summarize(bucket) for bucket in buckets.values()]
    summaries.sort(key=lambda d: d.representative_timestamp)
    return summaries


# one refresh: current weather and forecast are independent, so fetch both at once
def fetch_dashboard(client: OpenWeatherClient, settings: Settings, tz: Optional[tzinfo] = None) -> Dashboard:
    with ThreadPoolExecutor(max_workers=2) as pool:
        current_fut = pool.submit(client.get_current_weather, settings.location, settings.units)
        forecast_fut = pool.submit(client.get_forecast, settings.location, settings.units)
        # allow exceptions to propagate, the cli reports them
        current_payload = current_fut.result()
        forecast_payload = forecast_fut.result()

    daily = aggregate(parse_samples(forecast_payload), tz)
    logger.info("%s: %d forecast day(s)", settings.location, len(daily))
    return Dashboard(units=settings.units, current=parse_current(current_payload), daily=daily)


def daily_forecast_for_city(client: OpenWeatherClient, city: str, units: str = "metric",
                            tz: Optional[tzinfo] = None) -> List[DailySummary]:
    payload = client.get_forecast(city, units)
    return aggregate(parse_samples(payload), tz)


# reuse a single client, each worker has its own thread local http session
def forecast_all(cities: Iterable[str], units: str = "metric", max_workers: int = 3,
                 client: Optional[OpenWeatherClient] = None,
                 tz: Optional[tzinfo] = None) -> Dict[str, List[DailySummary]]:
    client = client or OpenWeatherClient()
    results: Dict[str, List[DailySummary]] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {
            pool.submit(daily_forecast_for_city, client, city, units, tz): city
            for city in cities
        }
        for fut in as_completed(futures):
            results[futures[fut]] = fut.result()

    # stable ordering so output is deterministic
    return {city: results[city] for city in sorted(results, key=str.lower)}
