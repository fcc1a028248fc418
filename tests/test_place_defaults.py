import pytest

from kala.services import place_defaults
from kala.services.place_defaults import clamp_lat_lon, normalize_place, place_location, resolve_tz


def test_missing_place_uses_env_defaults(monkeypatch):
    monkeypatch.setenv("DEFAULT_PLACE_TZ", "UTC")
    place, flags = normalize_place(None)
    assert place["tz"] == "UTC"
    assert flags["place_defaults_used"] is True
    assert flags["default_reason"] == "missing_place"


def test_missing_tz_is_inferred_from_coordinates():
    place, flags = normalize_place({"lat": 40.71, "lon": -74.0})
    assert place["tz"] == "America/New_York"
    assert flags["tz_inferred"] is True
    assert flags["default_reason"] == "missing_tz"
    assert flags["place_defaults_used"] is False


def test_uninferable_tz_falls_back_to_default(monkeypatch):
    monkeypatch.setattr(place_defaults, "infer_tz", lambda lat, lon: None)
    monkeypatch.setenv("DEFAULT_PLACE_TZ", "Asia/Kolkata")
    place, flags = normalize_place({"lat": 0.0, "lon": -140.0})
    assert place["tz"] == "Asia/Kolkata"
    assert flags["tz_inferred"] is False
    assert flags["default_reason"] == "missing_tz"


def test_explicit_tz_is_kept():
    place, flags = normalize_place({"lat": 40.71, "lon": -74.0, "tz": "UTC", "elevation": 10})
    assert place["tz"] == "UTC"
    assert flags == {"place_defaults_used": False, "tz_inferred": False, "default_reason": None}
    assert place_location(place).elevation == 10.0


def test_missing_latlon_keeps_given_tz():
    place, flags = normalize_place({"tz": "Europe/London"})
    assert place["tz"] == "Europe/London"
    assert flags["default_reason"] == "missing_latlon"


def test_clamp_and_resolve():
    assert clamp_lat_lon(95.0, 190.0) == (89.9, -170.0)
    assert resolve_tz("UTC").key == "UTC"
    with pytest.raises(ValueError):
        resolve_tz("Nowhere/Land")
