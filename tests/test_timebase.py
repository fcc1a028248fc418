from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from kala.services.errors import BoundaryNotFound, DegenerateDay, KalaError, OracleUnavailable
from kala.services.result import Result, capture
from kala.services.timebase import Instant, Interval, Location, ensure_utc, jd_to_datetime, parse_local

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_instant_normalises_to_utc():
    local = datetime(2024, 1, 1, 5, 30, tzinfo=ZoneInfo("Asia/Kolkata"))
    instant = Instant(local, Location(17.385, 78.4867))
    assert instant.moment == T0
    assert instant.moment.tzinfo == timezone.utc


def test_instant_shift_keeps_location():
    place = Location(17.385, 78.4867)
    shifted = Instant(T0, place).shift(timedelta(hours=2))
    assert shifted.moment == T0 + timedelta(hours=2)
    assert shifted.location is place


def test_julian_day_round_trip():
    instant = Instant(T0)
    assert instant.julian_day == pytest.approx(2460310.5)
    assert abs(jd_to_datetime(instant.julian_day) - T0) < timedelta(milliseconds=1)


def test_interval_operations():
    a = Interval(T0, T0 + timedelta(hours=2))
    b = Interval(T0 + timedelta(hours=2), T0 + timedelta(hours=3))
    assert a.duration == timedelta(hours=2)
    assert a.midpoint == T0 + timedelta(hours=1)
    assert a.contains(T0)
    assert not a.contains(T0 + timedelta(hours=2))
    assert not a.overlaps(b)
    assert a.touches(b)
    assert a.clip(start=T0 + timedelta(minutes=30)).start == T0 + timedelta(minutes=30)


def test_naive_values():
    assert ensure_utc(datetime(2024, 1, 1)) == T0
    assert parse_local("2024-01-01T05:30:00", ZoneInfo("Asia/Kolkata")) == T0
    assert parse_local("2024-01-01T00:00:00+00:00", ZoneInfo("Asia/Kolkata")) == T0


def test_result_capture():
    ok = capture(lambda: 42)
    assert ok.ok and ok.unwrap() == 42

    def fail():
        raise DegenerateDay("no sunrise")

    failed = capture(fail)
    assert not failed.ok
    assert failed.error_code == "DegenerateDay"
    assert failed.value_or(0) == 0
    with pytest.raises(DegenerateDay):
        failed.unwrap()


def test_capture_only_folds_listed_errors():
    def fail():
        raise OracleUnavailable("down")

    with pytest.raises(OracleUnavailable):
        capture(fail, (BoundaryNotFound,))


def test_error_hierarchy():
    assert issubclass(BoundaryNotFound, KalaError)
    assert issubclass(KalaError, RuntimeError)
    assert Result.failure(OracleUnavailable("x")).error_code == "OracleUnavailable"
