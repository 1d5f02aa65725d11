# user settings (location, unit system) and their local persistence
# a broken or missing settings file never stops the app, it falls back to defaults

from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import List

from .client import UNITS

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".weatherdash" / "settings.json"

POPULAR_CITIES: List[str] = [
    "London",
    "New York",
    "Tokyo",
    "Paris",
    "Sydney",
    "Berlin",
    "Cairo",
    "Rio de Janeiro",
]


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    location: str = "London"
    units: str = "metric"

    def with_location(self, location: str) -> "Settings":
        location = location.strip() if isinstance(location, str) else ""
        if not location:
            raise SettingsError("Please enter a valid location")
        return replace(self, location=location)

    def with_units(self, units: str) -> "Settings":
        if units not in UNITS:
            raise SettingsError(f"Unknown units {units!r}, expected one of {UNITS}")
        return replace(self, units=units)

    def toggle_units(self) -> "Settings":
        return self.with_units("imperial" if self.units == "metric" else "metric")


class SettingsStore:
    def __init__(self, path: str | os.PathLike | None = None):
        self.path = Path(path or os.getenv("WEATHERDASH_SETTINGS") or DEFAULT_PATH)

    def load(self) -> Settings:
        if not self.path.exists():
            return Settings()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return Settings().with_location(raw["location"]).with_units(raw["units"])
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.error("Failed to load settings from %s: %s", self.path, exc)
            return Settings()

    def save(self, settings: Settings) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(asdict(settings)), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to save settings to %s: %s", self.path, exc)
