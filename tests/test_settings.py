# settings rules and the json store, using pytest's tmp_path

import json

import pytest

from weatherdash.settings import POPULAR_CITIES, Settings, SettingsError, SettingsStore


def test_defaults():
    assert Settings() == Settings(location="London", units="metric")
    assert "Rio de Janeiro" in POPULAR_CITIES


def test_with_location_strips_and_rejects_blank():
    assert Settings().with_location("  Tokyo ").location == "Tokyo"
    with pytest.raises(SettingsError):
        Settings().with_location("   ")


def test_units():
    assert Settings().toggle_units().units == "imperial"
    assert Settings().toggle_units().toggle_units().units == "metric"
    with pytest.raises(SettingsError):
        Settings().with_units("kelvin")


def test_store_roundtrip(tmp_path):
    store = SettingsStore(tmp_path / "nested" / "settings.json")
    store.save(Settings("Cairo", "imperial"))
    assert store.load() == Settings("Cairo", "imperial")


def test_missing_file_gives_defaults(tmp_path):
    assert SettingsStore(tmp_path / "none.json").load() == Settings()


@pytest.mark.parametrize("content", [
    "{not json",
    json.dumps({"location": ""}),
    json.dumps({"location": "X", "units": "si"}),
    json.dumps({"location": 5, "units": "metric"}),
    json.dumps({"location": ["x"], "units": "metric"}),
    json.dumps({"location": "Paris", "units": ["metric"]}),
    json.dumps("London"),
    "[]",
])
def test_broken_file_gives_defaults(tmp_path, caplog, content):
    path = tmp_path / "settings.json"
    path.write_text(content)

    assert SettingsStore(path).load() == Settings()
    assert "Failed to load settings" in caplog.text


def test_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("WEATHERDASH_SETTINGS", str(tmp_path / "env.json"))
    assert SettingsStore().path == tmp_path / "env.json"


def test_with_location_rejects_non_text():
    with pytest.raises(SettingsError):
        Settings().with_location(5)
