# dags/daily_forecast_dag.py
from __future__ import annotations
import os
from datetime import datetime, timedelta
from typing import List
from airflow.decorators import dag, task
from airflow.exceptions import AirflowFailException
from weatherdash.client import OpenWeatherClient, WeatherAPIError
from weatherdash.service import aggregate, parse_samples
from weatherdash.models import UNIT_SYMBOLS
from weatherdash.settings import POPULAR_CITIES

UNITS = os.getenv("WEATHERDASH_UNITS", "metric")


@dag(
    dag_id="weatherdash_daily_forecast",
    start_date=datetime(2025, 1, 1),
    schedule="0 6 * * *",
    catchup=False,
    default_args={"owner": "weatherdash", "retries": 1, "retry_delay": timedelta(minutes=2)},
    tags=["weather", "daily-forecast"],
)
def weatherdash_daily_forecast():
    @task(pool="openweathermap", execution_timeout=timedelta(seconds=30))
    def fetch_daily(city: str) -> dict:
        api_key = os.getenv("OPENWEATHER_API_KEY")
        if not api_key:
            raise AirflowFailException("OPENWEATHER_API_KEY not set in task environment")

        client = OpenWeatherClient(api_key=api_key)
        try:
            payload = client.get_forecast(city, units=UNITS)
        except WeatherAPIError as e:
            # carries HTTP status/body snippets from the client
            raise AirflowFailException(f"fetch_daily({city}) client error: {e}")

        daily = aggregate(parse_samples(payload))
        # xcom needs plain values
        return {
            "city": city,
            "days": [
                {
                    "ts": d.representative_timestamp,
                    "min": d.temperature_min,
                    "max": d.temperature_max,
                    "description": d.dominant_condition.description if d.dominant_condition else "Unknown",
                }
                for d in daily
            ],
        }

    results = fetch_daily.expand(city=POPULAR_CITIES)

    @task
    def publish(rows: List[dict]) -> None:
        symbol = UNIT_SYMBOLS[UNITS]["temperature"]
        by = {r["city"]: r for r in rows}
        for city in POPULAR_CITIES:
            days = by[city]["days"]
            if not days:
                print(f"{city}: Forecast data unavailable")
                continue
            parts = [
                f"{datetime.fromtimestamp(d['ts']):%a} {d['description']} "
                f"{'--' if d['max'] is None else round(d['max'])}/{'--' if d['min'] is None else round(d['min'])}{symbol}"
                for d in days
            ]
            print(f"{city}: " + " | ".join(parts))

    publish(results)


dag = weatherdash_daily_forecast()
