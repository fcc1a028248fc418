"""Instant and interval value objects shared by the period engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional


def ensure_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime (naive values are taken as UTC)."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float
    elevation: float = 0.0


@dataclass(frozen=True)
class Instant:
    """An absolute moment plus the place that location-dependent queries use."""

    moment: datetime
    location: Location = field(default_factory=lambda: Location(0.0, 0.0))

    def __post_init__(self) -> None:
        object.__setattr__(self, "moment", ensure_utc(self.moment))

    def shift(self, delta: timedelta) -> "Instant":
        return Instant(self.moment + delta, self.location)

    def at(self, moment: datetime) -> "Instant":
        return Instant(moment, self.location)

    @property
    def julian_day(self) -> float:
        return self.moment.timestamp() / 86400.0 + 2440587.5


@dataclass(frozen=True)
class Interval:
    """Half-open ``[start, end)`` span of aware datetimes."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def midpoint(self) -> datetime:
        return self.start + (self.end - self.start) / 2

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end

    def touches(self, other: "Interval") -> bool:
        return self.end == other.start

    def clip(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> "Interval":
        lo = self.start if start is None else max(self.start, start)
        hi = self.end if end is None else min(self.end, end)
        return Interval(lo, hi)


def jd_to_datetime(jd: float) -> datetime:
    seconds = (jd - 2440587.5) * 86400.0
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def parse_local(value: str, tz: tzinfo) -> datetime:
    """Parse an ISO timestamp; naive values are local to ``tz``. Returns UTC."""

    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    return ensure_utc(moment)


__all__ = ["Instant", "Interval", "Location", "ensure_utc", "jd_to_datetime", "parse_local"]
