"""Helpers for normalising place inputs."""

import os
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timezonefinder import TimezoneFinder

from .timebase import Location


def _defaults() -> Dict[str, Any]:
    return {
        "lat": float(os.getenv("DEFAULT_PLACE_LAT", "28.6139")),
        "lon": float(os.getenv("DEFAULT_PLACE_LON", "77.2090")),
        "tz": os.getenv("DEFAULT_PLACE_TZ", "Asia/Kolkata"),
        "query": os.getenv("DEFAULT_PLACE_LABEL", "New Delhi, India"),
    }


def clamp_lat_lon(lat: float, lon: float) -> Tuple[float, float]:
    """Clamp latitude/longitude to safe ranges."""

    lat = max(min(lat, 89.9), -89.9)
    lon = ((lon + 180.0) % 360.0) - 180.0  # wrap to [-180, 180)
    return lat, lon


@lru_cache(maxsize=1)
def _finder() -> TimezoneFinder:
    return TimezoneFinder()


def infer_tz(lat: float, lon: float) -> Optional[str]:
    """Infer timezone name for a coordinate pair (None over open water)."""

    return _finder().timezone_at(lng=lon, lat=lat)


def resolve_tz(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"unknown timezone {name!r}") from exc


def normalize_place(place: Optional[Dict[str, Any]]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Normalise place payload and capture metadata flags."""

    flags: Dict[str, Any] = {
        "place_defaults_used": False,
        "tz_inferred": False,
        "default_reason": None,
    }
    defaults = _defaults()

    if not place:
        flags.update({"place_defaults_used": True, "default_reason": "missing_place"})
        return defaults, flags

    lat = place.get("lat")
    lon = place.get("lon")
    tz = place.get("tz")
    lbl = place.get("query") or place.get("label") or None
    elevation = place.get("elevation")

    if lat is None or lon is None:
        flags.update({"place_defaults_used": True, "default_reason": "missing_latlon"})
        eff_place = {
            "lat": defaults["lat"],
            "lon": defaults["lon"],
            "tz": tz or defaults["tz"],
            "query": lbl or defaults["query"],
        }
        if elevation is not None:
            eff_place["elevation"] = elevation
        return eff_place, flags

    lat, lon = clamp_lat_lon(float(lat), float(lon))
    if not tz:
        flags["default_reason"] = "missing_tz"
        tz_guess = infer_tz(lat, lon)
        if tz_guess:
            tz = tz_guess
            flags["tz_inferred"] = True
        else:
            tz = defaults["tz"]

    eff_place = {"lat": lat, "lon": lon, "tz": tz, "query": lbl}
    if elevation is not None:
        eff_place["elevation"] = elevation
    return eff_place, flags


def place_location(place: Dict[str, Any]) -> Location:
    return Location(place["lat"], place["lon"], float(place.get("elevation") or 0.0))


__all__ = ["clamp_lat_lon", "infer_tz", "normalize_place", "place_location", "resolve_tz"]
