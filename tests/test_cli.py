# presenter output and the main() wiring, with the client and network replaced

import pytest

from weatherdash import cli
from weatherdash.client import WeatherAPIError
from weatherdash.models import Condition, DailySummary
from weatherdash.service import parse_current
from weatherdash.settings import Settings, SettingsStore
from conftest import FakeClient


def test_render_daily_formats_days():
    days = [DailySummary(1735732800, 9.6, 21.5, Condition("Clear", "clear sky", "01d"))]
    (line,) = cli.render_daily(days, "imperial")

    assert "clear sky" in line
    assert "22°F / 10°F" in line


def test_render_daily_empty():
    assert cli.render_daily([], "metric") == ["Forecast data unavailable"]


def test_render_daily_unknown_condition():
    (line,) = cli.render_daily([DailySummary(1735732800, None, None, None)], "metric")
    assert "Unknown" in line
    assert "-- / --" in line


def test_render_current(current_payload):
    lines = cli.render_current(parse_current(current_payload), "metric")

    assert lines[0] == "London, GB"
    assert "12°C  broken clouds" in lines[2]
    assert "Humidity: 82%" in lines[3]
    assert "5 m/s" in lines[4]


@pytest.fixture
def patched(monkeypatch, fake_client, tmp_path):
    monkeypatch.setattr(cli, "OpenWeatherClient", lambda: fake_client)
    return tmp_path / "settings.json"


def test_main_show(patched, capsys, fake_client):
    assert cli.main(["--settings-file", str(patched), "--location", "Paris"]) == 0

    out = capsys.readouterr().out
    assert "5-Day Forecast" in out
    assert ("forecast", "Paris", "metric") in fake_client.calls
    # not saved without --save
    assert not patched.exists()


def test_main_save_and_toggle(patched, fake_client):
    assert cli.main(["--settings-file", str(patched), "--location", "Sydney", "--toggle-units", "--save"]) == 0
    assert SettingsStore(patched).load() == Settings("Sydney", "imperial")


def test_main_cities(patched, capsys):
    assert cli.main(["cities", "--settings-file", str(patched)]) == 0

    out = capsys.readouterr().out.splitlines()
    assert len(out) == len(cli.POPULAR_CITIES)
    assert any(line.startswith("* London") for line in out)


def test_main_reports_errors(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(cli, "OpenWeatherClient", lambda: FakeClient(error=WeatherAPIError("HTTP 401 for 'London'")))
    assert cli.main(["--settings-file", str(tmp_path / "s.json")]) == 1
    assert "HTTP 401" in capsys.readouterr().err


def test_main_rejects_blank_location(patched, capsys):
    assert cli.main(["--settings-file", str(patched), "--location", " "]) == 1
    assert "valid location" in capsys.readouterr().err


def test_main_ignores_corrupt_settings_file(patched, fake_client):
    patched.write_text('{"location": ["x"], "units": "metric"}')
    assert cli.main(["--settings-file", str(patched), "--location", "Paris"]) == 0
    assert ("forecast", "Paris", "metric") in fake_client.calls
