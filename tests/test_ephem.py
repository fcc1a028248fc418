from datetime import datetime, timezone

import pytest

from kala.services import ephem
from kala.services.errors import OracleUnavailable
from kala.services.timebase import Instant, Location

GREENWICH = Location(51.4779, 0.0)
NEW_YEAR = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def moshier(monkeypatch):
    # analytic backend, no ephemeris files needed
    monkeypatch.setenv("EPHEMERIS_BACKEND", "moseph")


def test_sidereal_sun_longitude():
    lon = ephem.SwissOracle().longitude(Instant(NEW_YEAR, GREENWICH), "Sun")
    assert 254.0 < lon < 258.0


def test_tropical_differs_by_ayanamsha():
    instant = Instant(NEW_YEAR, GREENWICH)
    sidereal = ephem.SwissOracle().longitude(instant, "Sun")
    tropical = ephem.SwissOracle(sidereal=False).longitude(instant, "Sun")
    assert 23.5 < (tropical - sidereal) % 360.0 < 25.0


def test_ketu_opposes_rahu():
    oracle = ephem.SwissOracle()
    instant = Instant(NEW_YEAR, GREENWICH)
    rahu = oracle.longitude(instant, "Rahu")
    ketu = oracle.longitude(instant, "Ketu")
    assert (ketu - rahu) % 360.0 == pytest.approx(180.0)


def test_unknown_body():
    with pytest.raises(ValueError):
        ephem.SwissOracle().longitude(Instant(NEW_YEAR, GREENWICH), "Pluto")


def test_calc_failure_maps_to_oracle_unavailable(monkeypatch):
    def boom(*_args, **_kwargs):
        raise ephem.swe.Error("no data")

    monkeypatch.setattr(ephem.swe, "calc_ut", boom)
    with pytest.raises(OracleUnavailable):
        ephem.SwissOracle().longitude(Instant(NEW_YEAR, GREENWICH), "Moon")


def test_houses():
    oracle = ephem.SwissOracle(house_system="whole_sign")
    instant = Instant(NEW_YEAR, GREENWICH)
    cusps = oracle.house_cusps(instant)
    assert len(cusps) == 12
    assert all(0.0 <= c < 360.0 for c in cusps)
    assert 0.0 <= oracle.ascendant(instant) < 360.0


def test_sunrise_in_greenwich():
    rise = ephem.SwissOracle().rise_event(Instant(NEW_YEAR, GREENWICH), "Sun")
    assert rise is not None
    assert datetime(2024, 1, 1, 7, 30, tzinfo=timezone.utc) < rise < datetime(2024, 1, 1, 8, 45, tzinfo=timezone.utc)
    sunset = ephem.SwissOracle().set_event(Instant(rise, GREENWICH), "Sun")
    assert rise < sunset


def test_polar_night_has_no_sunrise():
    arctic = Location(80.0, 15.0)
    assert ephem.SwissOracle().rise_event(Instant(NEW_YEAR, arctic), "Sun") is None


def test_backend_flag(monkeypatch):
    assert ephem._backend_flag() == ephem.swe.FLG_MOSEPH
    monkeypatch.setenv("EPHEMERIS_BACKEND", "swieph")
    assert ephem._backend_flag() == ephem.swe.FLG_SWIEPH
