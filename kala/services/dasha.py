"""Vimshottari dasha timeline built on the generic period tree."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .classifiers import nakshatra_fraction, nakshatra_index, nakshatra_name
from .ephem import Oracle
from .period_tree import PeriodNode, RulerSequence, build_tree
from .place_defaults import resolve_tz
from .timebase import Instant, Location, ensure_utc

# Vimshottari order and full years per Maha
DASHA_ORDER = ["Ketu", "Venus", "Sun", "Moon", "Mars", "Rahu", "Jupiter", "Saturn", "Mercury"]
YEARS = [7, 20, 6, 10, 7, 18, 16, 19, 17]
TOTAL_YEARS = 120
# passes through the sequence, so the timeline reaches past 120 years after birth
CYCLES = 2

VIMSHOTTARI = RulerSequence.from_pairs(list(zip(DASHA_ORDER, YEARS)), total=TOTAL_YEARS)

LEVEL_NAMES = {
    1: "mahadasha",
    2: "antardasha",
    3: "pratyantardasha",
    4: "sookshma",
    5: "prana",
}
MAX_LEVELS = len(LEVEL_NAMES)


def year_length() -> timedelta:
    return timedelta(days=float(os.getenv("DASHA_YEAR_DAYS", "365.25")))


def lord_for_nakshatra(index: int) -> str:
    """Nakshatra 1..27 to its dasha lord (the nine lords repeat three times)."""

    return DASHA_ORDER[(index - 1) % 9]


def vimshottari_tree(
    moon_lon_sidereal: float,
    birth: datetime,
    levels: int = 2,
    year: Optional[timedelta] = None,
) -> PeriodNode:
    """Root node spanning two 120-year cycles, clipped at birth.

    The birth mahadasha is the lord of the Moon's nakshatra; the share of the
    nakshatra already traversed is the share of that mahadasha already spent.
    """

    if not 1 <= levels <= MAX_LEVELS:
        raise ValueError(f"levels must be between 1 and {MAX_LEVELS}")
    birth = ensure_utc(birth)
    year = year or year_length()
    lord = lord_for_nakshatra(nakshatra_index(moon_lon_sidereal))
    elapsed = year * (VIMSHOTTARI.weight_of(lord) * nakshatra_fraction(moon_lon_sidereal))
    span = year * (TOTAL_YEARS * CYCLES)
    cycle_start = birth - elapsed
    return build_tree(lord, birth, cycle_start + span, levels, VIMSHOTTARI, nominal=span, laps=CYCLES)


def birth_moment(date_str: str, time_str: str, tz: str) -> datetime:
    dt_local = datetime.fromisoformat(f"{date_str}T{time_str}").replace(tzinfo=resolve_tz(tz))
    return dt_local.astimezone(timezone.utc)


def compute_vimshottari(
    chart_input: Dict[str, Any],
    oracle: Oracle,
    levels: int = 2,
) -> Dict[str, Any]:
    """Dasha timeline for a chart input (date, time, place{lat, lon, tz})."""

    place = chart_input["place"]
    birth = birth_moment(chart_input["date"], chart_input["time"], place["tz"])
    location = Location(place["lat"], place["lon"], place.get("elevation") or 0.0)
    moon_lon = oracle.longitude(Instant(birth, location), "Moon")
    root = vimshottari_tree(moon_lon, birth, levels=levels)
    nak = nakshatra_index(moon_lon)
    return {
        "birth_utc": birth.isoformat(),
        "moon_longitude": round(moon_lon, 6),
        "nakshatra": {"number": nak, "name": nakshatra_name(nak)},
        "balance_years": round(root.children[0].duration / year_length(), 4),
        "tree": root,
    }


def flatten_periods(root: PeriodNode) -> List[Dict[str, Any]]:
    """Flat list of periods (all levels) ordered by level, then start."""

    year = year_length()
    periods: List[Dict[str, Any]] = []
    stack = [(child, None) for child in root.children]
    while stack:
        node, parent = stack.pop(0)
        periods.append(
            {
                "level": node.level,
                "lord": node.ruler,
                "start": node.start.isoformat(),
                "end": node.end.isoformat(),
                "parent": parent,
                "duration_years": round(node.duration / year, 6),
            }
        )
        stack.extend((child, node.ruler) for child in node.children)
    periods.sort(key=lambda p: (p["level"], p["start"]))
    return periods


def nested_periods(node: PeriodNode) -> List[Dict[str, Any]]:
    year = year_length()
    return [
        {
            "level": child.level,
            "lord": child.ruler,
            "start": child.start.isoformat(),
            "end": child.end.isoformat(),
            "duration_years": round(child.duration / year, 6),
            "sub_periods": nested_periods(child),
        }
        for child in node.children
    ]


def current_dasha(root: PeriodNode, on: datetime) -> Dict[str, Any]:
    """Active lord at each level for ``on``; empty when outside the cycle."""

    path = root.active_path(ensure_utc(on))[1:]
    return {
        LEVEL_NAMES[node.level]: {
            "lord": node.ruler,
            "start": node.start.isoformat(),
            "end": node.end.isoformat(),
        }
        for node in path
    }


__all__ = [
    "DASHA_ORDER",
    "YEARS",
    "VIMSHOTTARI",
    "LEVEL_NAMES",
    "lord_for_nakshatra",
    "vimshottari_tree",
    "compute_vimshottari",
    "flatten_periods",
    "nested_periods",
    "current_dasha",
]
