import json
from pathlib import Path

import pytest

DATA = Path(__file__).parent / "data"


def load(name):
    return json.loads((DATA / name).read_text())


class FakeClient:
    # stands in for OpenWeatherClient so tests never hit the network
    def __init__(self, current=None, forecast=None, error=None):
        self.current = current
        self.forecast = forecast
        self.error = error
        self.calls = []

    def get_current_weather(self, location, units="metric"):
        self.calls.append(("weather", location, units))
        if self.error:
            raise self.error
        return self.current

    def get_forecast(self, location, units="metric"):
        self.calls.append(("forecast", location, units))
        if self.error:
            raise self.error
        return self.forecast


@pytest.fixture
def forecast_payload():
    return load("forecast_london.json")


@pytest.fixture
def current_payload():
    return load("current_london.json")


@pytest.fixture
def fake_client(current_payload, forecast_payload):
    return FakeClient(current=current_payload, forecast=forecast_payload)
