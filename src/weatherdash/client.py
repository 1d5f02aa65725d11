# OpenWeatherMap access: key lookup, sessions, retries and response shape checks
# the service layer only ever sees validated dicts or a WeatherAPIError

from __future__ import annotations
import logging
import os
import threading
from typing import Dict, Any, Iterable
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from dotenv import load_dotenv

load_dotenv()  # in production the key is injected through the environment

logger = logging.getLogger(__name__)

UNITS = ("metric", "imperial")


class WeatherAPIError(RuntimeError):
    pass


class OpenWeatherClient:
    BASE_URL = "https://api.openweathermap.org/data/2.5"
    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        user_agent: str = "weatherdash/0.1",
    ):
        self.api_key = api_key or os.getenv("OPENWEATHER_API_KEY")
        if not self.api_key:
            raise WeatherAPIError("OPENWEATHER_API_KEY not set")

        self.timeout = timeout
        self.user_agent = user_agent

        # sessions are per thread, fetch_dashboard and forecast_all share one client
        self._local = threading.local()
        self._retry = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.user_agent
            session.mount("https://", HTTPAdapter(max_retries=self._retry))
            self._local.session = session
        return session

    def _get(self, endpoint: str, location: str, units: str, required: Iterable[str]) -> Dict[str, Any]:
        if units not in UNITS:
            raise WeatherAPIError(f"'units' must be one of {UNITS} (got {units!r})")

        params = {"q": location, "units": units, "appid": self.api_key}
        url = f"{self.BASE_URL}/{endpoint}"
        logger.debug("GET %s q=%r units=%s", url, location, units)

        try:
            resp = self._session().get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise WeatherAPIError(f"Request error for {location!r}: {exc}") from exc

        if resp.status_code >= 400:
            # include a short response snippet to speed up triage
            snippet = (resp.text or "")[:300]
            raise WeatherAPIError(f"HTTP {resp.status_code} for {location!r} ({endpoint}). Body: {snippet}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise WeatherAPIError(f"Invalid JSON for {location!r}: {exc}") from exc

        if not isinstance(data, dict):
            raise WeatherAPIError(f"Unexpected API shape for {endpoint}: top level is {type(data).__name__}")
        missing = [key for key in required if key not in data]
        if missing:
            raise WeatherAPIError(f"Unexpected API shape for {endpoint}: missing {', '.join(missing)}")

        return data

    def get_current_weather(self, location: str, units: str = "metric") -> Dict[str, Any]:
        return self._get("weather", location, units, required=("main", "weather"))

    def get_forecast(self, location: str, units: str = "metric") -> Dict[str, Any]:
        # 5 days in 3-hour steps; the service layer turns it into daily summaries
        return self._get("forecast", location, units, required=("list",))
