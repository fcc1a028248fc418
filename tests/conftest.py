"""Shared fixtures: a deterministic oracle with linear longitudes."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional

import pytest

from kala.services.errors import OracleUnavailable
from kala.services.timebase import Instant, Location

# Monday
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

# degrees at EPOCH
BASES = {
    "Sun": 280.0,
    "Moon": 100.0,
    "Mercury": 265.0,
    "Venus": 240.0,
    "Mars": 255.0,
    "Jupiter": 5.0,
    "Saturn": 310.0,
    "Rahu": 355.0,
}

# degrees per hour
RATES = {
    "Sun": 1.0 / 24.0,
    "Moon": 0.55,
    "Mercury": 1.2 / 24.0,
    "Venus": 1.1 / 24.0,
    "Mars": 0.7 / 24.0,
    "Jupiter": 0.1 / 24.0,
    "Saturn": 0.05 / 24.0,
    "Rahu": -0.05 / 24.0,
}


class FakeOracle:
    """Bodies move linearly from ``EPOCH``; the Sun rises at 06:00 and sets at 18:00 UTC.

    The ascendant sweeps the zodiac once per day starting at 0 degrees at
    midnight UTC, so each sign rises for two hours.
    """

    def __init__(
        self,
        ayanamsha: str = "lahiri",
        bases: Optional[Dict[str, float]] = None,
        rates: Optional[Dict[str, float]] = None,
        polar_days: Iterable[date] = (),
        fail_bodies: Iterable[str] = (),
        sunrise: time = time(6),
        sunset: time = time(18),
    ):
        self.ayanamsha = ayanamsha
        self.bases = {**BASES, **(bases or {})}
        self.rates = {**RATES, **(rates or {})}
        self.polar_days = set(polar_days)
        self.fail_bodies = set(fail_bodies)
        self.sunrise = sunrise
        self.sunset = sunset
        self.calls = 0

    @staticmethod
    def _hours(instant: Instant) -> float:
        return (instant.moment - EPOCH).total_seconds() / 3600.0

    def longitude(self, instant: Instant, body: str) -> float:
        self.calls += 1
        if body in self.fail_bodies:
            raise OracleUnavailable(f"{body} unavailable")
        if body == "Ketu":
            return (self.longitude(instant, "Rahu") + 180.0) % 360.0
        return (self.bases[body] + self.rates[body] * self._hours(instant)) % 360.0

    def ascendant(self, instant: Instant) -> float:
        return (15.0 * self._hours(instant)) % 360.0

    def house_cusps(self, instant: Instant) -> List[float]:
        asc = self.ascendant(instant)
        return [(asc + 30.0 * i) % 360.0 for i in range(12)]

    def _next(self, moment: datetime, at: time) -> Optional[datetime]:
        candidate = datetime.combine(moment.date(), at, tzinfo=timezone.utc)
        if candidate < moment:
            candidate += timedelta(days=1)
        if candidate.date() in self.polar_days:
            return None
        return candidate

    def rise_event(self, instant: Instant, body: str = "Sun") -> Optional[datetime]:
        return self._next(instant.moment, self.sunrise)

    def set_event(self, instant: Instant, body: str = "Sun") -> Optional[datetime]:
        return self._next(instant.moment, self.sunset)


@pytest.fixture
def fake_oracle():
    """The ``FakeOracle`` class, for tests that need a customised sky."""

    return FakeOracle


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def greenwich() -> Location:
    return Location(51.48, 0.0)


@pytest.fixture
def epoch() -> datetime:
    return EPOCH
