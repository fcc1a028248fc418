"""Swiss Ephemeris oracle used by the boundary, dasha and muhurta engines."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Callable, Dict, List, Optional, Protocol

import swisseph as swe

from .errors import OracleUnavailable
from .timebase import Instant, jd_to_datetime


logger = logging.getLogger(__name__)

# Engine version for API responses
ENGINE_VERSION = f"swisseph-{getattr(swe, 'version', '2.10')}"

BODIES: Dict[str, int] = {
    "Sun": swe.SUN,
    "Moon": swe.MOON,
    "Mercury": swe.MERCURY,
    "Venus": swe.VENUS,
    "Mars": swe.MARS,
    "Jupiter": swe.JUPITER,
    "Saturn": swe.SATURN,
    "Rahu": swe.TRUE_NODE,
}

AYANAMSHA_MAP = {
    "lahiri": swe.SIDM_LAHIRI,
    "krishnamurti": swe.SIDM_KRISHNAMURTI,
    "raman": swe.SIDM_RAMAN,
}

HOUSE_CODE_MAP = {
    "placidus": "P",
    "koch": "K",
    "whole_sign": "W",
    "equal": "E",
    "regiomontanus": "R",
    "campanus": "C",
}


class Oracle(Protocol):
    """Black-box source of zodiacal samples for an instant and place."""

    def longitude(self, instant: Instant, body: str) -> float: ...

    def ascendant(self, instant: Instant) -> float: ...

    def house_cusps(self, instant: Instant) -> List[float]: ...

    def rise_event(self, instant: Instant, body: str = "Sun") -> Optional[datetime]: ...

    def set_event(self, instant: Instant, body: str = "Sun") -> Optional[datetime]: ...


def _backend_flag() -> int:
    """Return the Swiss Ephemeris backend flag based on environment configuration."""

    raw_backend = os.getenv("EPHEMERIS_BACKEND")
    backend = raw_backend.strip().lower() if raw_backend else "swieph"
    return swe.FLG_MOSEPH if backend == "moseph" else swe.FLG_SWIEPH


def init_paths(ephe_dir: str | os.PathLike[str] | None = None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    ephe_dir = ephe_dir or os.getenv("EPHE_PATH")
    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


class SwissOracle:
    """``Oracle`` implementation backed by pyswisseph.

    Longitudes are sidereal (``ayanamsha``) unless ``sidereal`` is False.
    """

    def __init__(self, ayanamsha: str = "lahiri", sidereal: bool = True, house_system: str = "placidus"):
        self.ayanamsha = (ayanamsha or "lahiri").lower()
        self.sidereal = sidereal
        self.house_system = house_system

    def _flags(self) -> int:
        flag = _backend_flag() | swe.FLG_SPEED
        if self.sidereal:
            swe.set_sid_mode(AYANAMSHA_MAP.get(self.ayanamsha, swe.SIDM_LAHIRI))
            flag |= swe.FLG_SIDEREAL
        return flag

    def longitude(self, instant: Instant, body: str) -> float:
        name = "Rahu" if body == "Ketu" else body
        if name not in BODIES:
            raise ValueError(f"Unknown body: {body}")
        try:
            values, _ = swe.calc_ut(instant.julian_day, BODIES[name], self._flags())
        except swe.Error as exc:
            logger.warning("oracle_calc_failed", extra={"body": body, "jd": instant.julian_day})
            raise OracleUnavailable(f"position of {body} unavailable: {exc}") from exc
        lon = values[0] % 360.0
        if body == "Ketu":
            lon = (lon + 180.0) % 360.0
        return lon

    def _houses(self, instant: Instant):
        code = HOUSE_CODE_MAP.get(self.house_system.lower(), "P").encode()
        flags = swe.FLG_SIDEREAL if self.sidereal else 0
        if self.sidereal:
            swe.set_sid_mode(AYANAMSHA_MAP.get(self.ayanamsha, swe.SIDM_LAHIRI))
        loc = instant.location
        try:
            return swe.houses_ex(instant.julian_day, loc.lat, loc.lon, code, flags)
        except swe.Error as exc:
            logger.warning("oracle_houses_failed", extra={"lat": loc.lat, "lon": loc.lon})
            raise OracleUnavailable(f"houses unavailable: {exc}") from exc

    def ascendant(self, instant: Instant) -> float:
        _cusps, ascmc = self._houses(instant)
        return ascmc[0] % 360.0

    def house_cusps(self, instant: Instant) -> List[float]:
        cusps, _ascmc = self._houses(instant)
        return [cusps[i] % 360.0 for i in range(12)]

    def _rise_or_set(self, instant: Instant, body: str, rsmi: int) -> Optional[datetime]:
        loc = instant.location
        geopos = (loc.lon, loc.lat, loc.elevation)
        try:
            result, times = swe.rise_trans(
                instant.julian_day, BODIES[body], rsmi | swe.BIT_DISC_CENTER, geopos, 0.0, 0.0, _backend_flag()
            )
        except swe.Error as exc:
            raise OracleUnavailable(f"rise/set of {body} unavailable: {exc}") from exc
        # -2 is circumpolar: the body never crosses the horizon that day
        if result < 0 or not times:
            return None
        return jd_to_datetime(times[0])

    def rise_event(self, instant: Instant, body: str = "Sun") -> Optional[datetime]:
        return self._rise_or_set(instant, body, swe.CALC_RISE)

    def set_event(self, instant: Instant, body: str = "Sun") -> Optional[datetime]:
        return self._rise_or_set(instant, body, swe.CALC_SET)


def oracle_factory() -> Callable[..., Oracle]:
    """FastAPI dependency returning a constructor for per-request oracles."""

    init_paths()
    return SwissOracle


__all__ = ["Oracle", "SwissOracle", "BODIES", "AYANAMSHA_MAP", "ENGINE_VERSION", "init_paths", "oracle_factory"]
