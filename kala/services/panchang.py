"""Current panchang elements and their validity intervals.

Each of the five limbs is resolved independently: a failed boundary search or
oracle call for one element is reported in that element's ``Result`` and the
others are still returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from . import classifiers as cls
from .boundary import find_boundary, find_previous_boundary
from .ephem import Oracle
from .errors import BoundaryNotFound, DegenerateDay, OracleUnavailable
from .result import Result, capture
from .timebase import Instant, Location, ensure_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementSpec:
    name: str
    bodies: Tuple[str, ...]
    classify: Callable[..., int]
    label: Callable[[int], str]
    horizon: timedelta


# Horizons sit ~1.4x above the longest observed span of each element.
ELEMENTS: Dict[str, ElementSpec] = {
    "tithi": ElementSpec("tithi", ("Sun", "Moon"), cls.tithi_index, cls.tithi_name, timedelta(hours=36)),
    "nakshatra": ElementSpec("nakshatra", ("Moon",), cls.nakshatra_index, cls.nakshatra_name, timedelta(hours=36)),
    "yoga": ElementSpec("yoga", ("Sun", "Moon"), cls.yoga_index, cls.yoga_name, timedelta(hours=36)),
    "karana": ElementSpec("karana", ("Sun", "Moon"), cls.karana_index, cls.karana_name, timedelta(hours=18)),
}

ELEMENT_ORDER = ["tithi", "nakshatra", "yoga", "karana", "vara"]


@dataclass(frozen=True)
class ElementSpan:
    element: str
    index: int
    name: str
    start: datetime
    end: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": self.element,
            "number": self.index,
            "name": self.name,
            "start_ts": self.start.isoformat(),
            "end_ts": self.end.isoformat(),
        }


def element_sampler(spec: ElementSpec, oracle: Oracle, location: Location) -> Callable[[datetime], int]:
    """Return ``moment -> index`` for one element."""

    def sample(moment: datetime) -> int:
        instant = Instant(moment, location)
        lons = [oracle.longitude(instant, body) for body in spec.bodies]
        return spec.classify(*lons)

    return sample


def element_span(element: str, moment: datetime, oracle: Oracle, location: Location) -> ElementSpan:
    spec = ELEMENTS[element]
    sample = element_sampler(spec, oracle, location)
    moment = ensure_utc(moment)
    index = sample(moment)
    start = find_previous_boundary(moment, index, sample, spec.horizon)
    end = find_boundary(moment, index, sample, spec.horizon)
    return ElementSpan(element, index, spec.label(index), start, end)


def _local_weekday(moment: datetime, location: Location) -> int:
    # Local mean time is enough to pick the calendar day of a sunrise.
    local = moment + timedelta(hours=location.lon / 15.0)
    return cls.weekday_index(local.weekday())


def vara_span(moment: datetime, oracle: Oracle, location: Location) -> ElementSpan:
    """Weekday running from the sunrise at or before ``moment`` to the next sunrise."""

    moment = ensure_utc(moment)
    here = Instant(moment, location)

    def _rise_after(at: datetime) -> datetime:
        rise = oracle.rise_event(here.at(at), "Sun")
        if rise is None:
            raise DegenerateDay(f"no sunrise after {at.isoformat()}", day=at.date())
        return ensure_utc(rise)

    previous = _rise_after(moment - timedelta(days=1))
    if previous > moment:
        previous = _rise_after(moment - timedelta(days=2))
    following = _rise_after(previous + timedelta(minutes=1))
    while following <= moment:
        previous = following
        following = _rise_after(previous + timedelta(minutes=1))

    index = _local_weekday(previous, location) + 1
    return ElementSpan("vara", index, cls.WEEKDAY_NAMES[index - 1], previous, following)


def compute_elements(moment: datetime, oracle: Oracle, location: Location) -> Dict[str, Result[ElementSpan]]:
    """Resolve all five elements at ``moment``; failures stay scoped to one element."""

    results: Dict[str, Result[ElementSpan]] = {}
    for name in ELEMENT_ORDER:
        if name == "vara":
            result = capture(lambda: vara_span(moment, oracle, location))
        else:
            result = capture(
                lambda name=name: element_span(name, moment, oracle, location),
                (BoundaryNotFound, OracleUnavailable),
            )
        if not result.ok:
            logger.warning(
                "panchang_element_failed",
                extra={"element": name, "error": result.error_code, "moment": ensure_utc(moment).isoformat()},
            )
        results[name] = result
    return results


def enumerate_periods(
    element: str,
    start: datetime,
    end: datetime,
    oracle: Oracle,
    location: Location,
    max_periods: int = 500,
) -> List[ElementSpan]:
    """Successive spans of ``element`` covering ``[start, end)``, clipped to the range.

    At most ``max_periods`` spans are returned; a shorter result is logged.
    """

    spec = ELEMENTS[element]
    sample = element_sampler(spec, oracle, location)
    start = ensure_utc(start)
    end = ensure_utc(end)
    if end <= start:
        return []

    periods: List[ElementSpan] = []
    current = start
    while current < end and len(periods) < max_periods:
        index = sample(current)
        boundary = find_boundary(current, index, sample, spec.horizon)
        periods.append(ElementSpan(element, index, spec.label(index), current, min(boundary, end)))
        current = boundary
    if current < end:
        logger.warning(
            "panchang_periods_truncated",
            extra={"element": element, "max_periods": max_periods, "covered_until": current.isoformat()},
        )
    return periods


def elements_payload(results: Dict[str, Result[ElementSpan]]) -> Dict[str, Optional[Dict[str, Any]]]:
    payload: Dict[str, Optional[Dict[str, Any]]] = {}
    for name, result in results.items():
        if result.ok:
            payload[name] = {"status": "ok", **result.value.to_dict()}
        else:
            payload[name] = {"status": "error", "error": result.error_code, "detail": str(result.error)}
    return payload


__all__ = [
    "ELEMENTS",
    "ElementSpan",
    "compute_elements",
    "element_span",
    "element_sampler",
    "enumerate_periods",
    "elements_payload",
    "vara_span",
]
