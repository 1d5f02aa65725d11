# models keep data shapes explicit and reusable across the app
# every value object is frozen, so aggregation results can't be mutated after the fact

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import List, Optional, Tuple

ICON_URL = "https://openweathermap.org/img/wn/{icon}@{scale}x.png"

# display strings per unit system, keyed the same way the provider names them
UNIT_SYMBOLS = {
    "metric": {"temperature": "°C", "wind": "m/s"},
    "imperial": {"temperature": "°F", "wind": "mph"},
}


@dataclass(frozen=True)
class Condition:
    # one entry of the provider's "weather" list
    category: Optional[str]
    description: str = ""
    icon: str = ""

    def icon_url(self, scale: int = 2) -> str:
        return ICON_URL.format(icon=self.icon, scale=scale)


@dataclass(frozen=True)
class WeatherSample:
    # one 3-hour forecast measurement, fields are None when the upstream record lacked them
    timestamp: Optional[int]
    temperature_min: Optional[float] = None
    temperature_max: Optional[float] = None
    conditions: Tuple[Condition, ...] = ()

    @property
    def condition(self) -> Optional[Condition]:
        # only the first entry is meaningful
        return self.conditions[0] if self.conditions else None

    @property
    def category(self) -> Optional[str]:
        cond = self.condition
        return cond.category if cond is not None and cond.category else None


@dataclass(frozen=True)
class DailySummary:
    # output value object consumed by the presenter, never re-grouped there
    representative_timestamp: int
    temperature_min: Optional[float]
    temperature_max: Optional[float]
    dominant_condition: Optional[Condition]

    def day(self, tz: Optional[tzinfo] = None) -> date:
        return day_key(self.representative_timestamp, tz)


@dataclass(frozen=True)
class CurrentWeather:
    location: str
    country: str
    temperature: float
    feels_like: Optional[float]
    humidity: Optional[int]
    wind_speed: Optional[float]
    pressure: Optional[int]
    sunrise: Optional[int]
    sunset: Optional[int]
    condition: Optional[Condition]


@dataclass(frozen=True)
class Dashboard:
    # everything one refresh produced, replaced wholesale on the next one
    units: str
    current: CurrentWeather
    daily: List[DailySummary] = field(default_factory=list)


def day_key(timestamp: int, tz: Optional[tzinfo] = None) -> date:
    # local calendar date of an epoch timestamp; tz=None means the system zone
    return datetime.fromtimestamp(timestamp, tz).date()
