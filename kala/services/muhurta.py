"""Rahu Kalam, horas and choghadiya for one local day.

All blocks are derived from the day's sunrise, sunset and the following
sunrise, so they are only as precise as the oracle's rise/set events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Tuple
from zoneinfo import ZoneInfo

from .classifiers import WEEKDAY_NAMES, weekday_index
from .ephem import Oracle
from .errors import DegenerateDay
from .timebase import Instant, Interval, Location, ensure_utc

logger = logging.getLogger(__name__)

WEEKDAY_RULERS = {
    "Sunday": "Sun",
    "Monday": "Moon",
    "Tuesday": "Mars",
    "Wednesday": "Mercury",
    "Thursday": "Jupiter",
    "Friday": "Venus",
    "Saturday": "Saturn",
}

# Rahu, Gulika and Yamaganda segment indices (1-based) per weekday.
RAHU_INDEX = {
    "Sunday": 8,
    "Monday": 2,
    "Tuesday": 7,
    "Wednesday": 5,
    "Thursday": 6,
    "Friday": 4,
    "Saturday": 3,
}

GULIKA_INDEX = {
    "Sunday": 7,
    "Monday": 6,
    "Tuesday": 5,
    "Wednesday": 4,
    "Thursday": 3,
    "Friday": 2,
    "Saturday": 1,
}

YAMAGANDA_INDEX = {
    "Sunday": 5,
    "Monday": 4,
    "Tuesday": 3,
    "Wednesday": 2,
    "Thursday": 1,
    "Friday": 7,
    "Saturday": 6,
}

HORA_LORDS = ["Sun", "Venus", "Mercury", "Moon", "Saturn", "Jupiter", "Mars"]

CHOGHADIYA_NAMES = ["Udveg", "Chal", "Labh", "Amrit", "Kaal", "Shubh", "Rog"]
CHOGHADIYA_NATURE = {
    "Udveg": "Bad",
    "Chal": "Neutral",
    "Labh": "Good",
    "Amrit": "Good",
    "Kaal": "Bad",
    "Shubh": "Good",
    "Rog": "Bad",
}
# first choghadiya of the day / night, as an index into CHOGHADIYA_NAMES
DAY_START_INDEX = {
    "Sunday": 0,
    "Monday": 3,
    "Tuesday": 6,
    "Wednesday": 2,
    "Thursday": 5,
    "Friday": 1,
    "Saturday": 4,
}
NIGHT_START_INDEX = {
    "Sunday": 5,
    "Monday": 1,
    "Tuesday": 4,
    "Wednesday": 0,
    "Thursday": 3,
    "Friday": 6,
    "Saturday": 2,
}


@dataclass(frozen=True)
class SolarDay:
    """Rise/set frame of one local calendar day."""

    day: date
    weekday: str
    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime

    @property
    def daytime(self) -> Interval:
        return Interval(self.sunrise, self.sunset)

    @property
    def nighttime(self) -> Interval:
        return Interval(self.sunset, self.next_sunrise)


def _segment(start: datetime, duration: timedelta, index: int) -> Interval:
    """Return the ``index`` (1-based) segment within a day divided into eight parts."""

    seg = duration / 8
    seg_start = start + (index - 1) * seg
    return Interval(seg_start, seg_start + seg)


def resolve_solar_day(local_day: date, tz: ZoneInfo, oracle: Oracle, location: Location) -> SolarDay:
    """Sunrise, sunset and next sunrise for ``local_day`` in ``tz``.

    Raises ``DegenerateDay`` when any of the three events is missing or they
    do not fall in order (polar day or night).
    """

    midnight = ensure_utc(datetime.combine(local_day, time(0), tzinfo=tz))
    following_midnight = ensure_utc(datetime.combine(local_day + timedelta(days=1), time(0), tzinfo=tz))
    here = Instant(midnight, location)

    sunrise = oracle.rise_event(here, "Sun")
    if sunrise is None or ensure_utc(sunrise) >= following_midnight:
        raise DegenerateDay(f"no sunrise on {local_day.isoformat()}", day=local_day)
    sunrise = ensure_utc(sunrise)

    sunset = oracle.set_event(here.at(sunrise), "Sun")
    next_sunrise = oracle.rise_event(here.at(following_midnight), "Sun")
    if sunset is None or next_sunrise is None:
        raise DegenerateDay(f"no sunset or next sunrise for {local_day.isoformat()}", day=local_day)
    sunset = ensure_utc(sunset)
    next_sunrise = ensure_utc(next_sunrise)
    if not sunrise < sunset < next_sunrise:
        raise DegenerateDay(f"rise/set out of order on {local_day.isoformat()}", day=local_day)

    weekday = WEEKDAY_NAMES[weekday_index(local_day.weekday())]
    return SolarDay(local_day, weekday, sunrise, sunset, next_sunrise)


def compute_muhurta_blocks(sunrise: datetime, sunset: datetime, weekday: str) -> Dict[str, Interval]:
    day_length = sunset - sunrise
    rahu = _segment(sunrise, day_length, RAHU_INDEX[weekday])
    gulika = _segment(sunrise, day_length, GULIKA_INDEX[weekday])
    yamaganda = _segment(sunrise, day_length, YAMAGANDA_INDEX[weekday])

    # Abhijit is centred on apparent noon with width day_length/15
    solar_noon = sunrise + day_length / 2
    width = day_length / 15
    abhijit = Interval(solar_noon - width / 2, solar_noon + width / 2)

    return {
        "rahu_kal": rahu,
        "gulika_kal": gulika,
        "yamaganda": yamaganda,
        "abhijit": abhijit,
    }


def compute_horas(sunrise: datetime, sunset: datetime, next_sunrise: datetime, weekday: str) -> List[Tuple[Interval, str]]:
    """Return the 24 horas from sunrise, twelve by day and twelve by night."""

    day_seg = (sunset - sunrise) / 12
    night_seg = (next_sunrise - sunset) / 12

    ruler = WEEKDAY_RULERS[weekday]
    start_offset = HORA_LORDS.index(ruler)
    order = HORA_LORDS[start_offset:] + HORA_LORDS[:start_offset]

    horas: List[Tuple[Interval, str]] = []
    for idx in range(24):
        if idx < 12:
            span_start = sunrise + day_seg * idx
            span_end = sunset if idx == 11 else span_start + day_seg
        else:
            span_start = sunset + night_seg * (idx - 12)
            span_end = next_sunrise if idx == 23 else span_start + night_seg
        horas.append((Interval(span_start, span_end), order[idx % len(order)]))
    return horas


def compute_choghadiya(start: datetime, end: datetime, weekday: str, is_day: bool) -> List[Tuple[Interval, str, str]]:
    """Eight equal choghadiyas between ``start`` and ``end``: (span, name, nature)."""

    seg = (end - start) / 8
    first = DAY_START_INDEX[weekday] if is_day else NIGHT_START_INDEX[weekday]
    spans: List[Tuple[Interval, str, str]] = []
    for idx in range(8):
        name = CHOGHADIYA_NAMES[(first + idx) % len(CHOGHADIYA_NAMES)]
        span_start = start + seg * idx
        span_end = end if idx == 7 else span_start + seg
        spans.append((Interval(span_start, span_end), name, CHOGHADIYA_NATURE[name]))
    return spans


def _span_dict(span: Interval, tz: ZoneInfo) -> Dict[str, str]:
    return {
        "start_ts": span.start.astimezone(tz).isoformat(),
        "end_ts": span.end.astimezone(tz).isoformat(),
    }


def day_muhurta(local_day: date, tz: ZoneInfo, oracle: Oracle, location: Location) -> Dict[str, Any]:
    """All daily muhurta blocks for ``local_day``, timestamps rendered in ``tz``."""

    solar = resolve_solar_day(local_day, tz, oracle, location)
    blocks = compute_muhurta_blocks(solar.sunrise, solar.sunset, solar.weekday)
    horas = compute_horas(solar.sunrise, solar.sunset, solar.next_sunrise, solar.weekday)
    day_chogs = compute_choghadiya(solar.sunrise, solar.sunset, solar.weekday, is_day=True)
    night_chogs = compute_choghadiya(solar.sunset, solar.next_sunrise, solar.weekday, is_day=False)

    logger.debug("day_muhurta_computed", extra={"day": local_day.isoformat(), "weekday": solar.weekday})
    return {
        "date": local_day.isoformat(),
        "weekday": solar.weekday,
        "sunrise": solar.sunrise.astimezone(tz).isoformat(),
        "sunset": solar.sunset.astimezone(tz).isoformat(),
        "next_sunrise": solar.next_sunrise.astimezone(tz).isoformat(),
        "blocks": {name: _span_dict(span, tz) for name, span in blocks.items()},
        "horas": [{**_span_dict(span, tz), "lord": lord} for span, lord in horas],
        "choghadiya": {
            "day": [{**_span_dict(span, tz), "name": name, "nature": nature} for span, name, nature in day_chogs],
            "night": [{**_span_dict(span, tz), "name": name, "nature": nature} for span, name, nature in night_chogs],
        },
    }


__all__ = [
    "SolarDay",
    "resolve_solar_day",
    "compute_muhurta_blocks",
    "compute_horas",
    "compute_choghadiya",
    "day_muhurta",
]
