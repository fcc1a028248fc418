"""Auspicious window search for named undertakings.

Each purpose is a ``MuhurtaRule``: allow-lists over weekday, nakshatra,
tithi and lagna, signs a body must not occupy, and bodies that must not be
combust. ``MuhurtaPredicate`` turns a rule into a scanner predicate; the
day's Rahu Kalam (and optionally Yamaganda / Gulika Kalam) is computed once
per local day and excluded.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, FrozenSet, List, Optional, Tuple
from zoneinfo import ZoneInfo

from . import classifiers as cls
from .ephem import Oracle
from .errors import DegenerateDay
from .muhurta import compute_muhurta_blocks, resolve_solar_day
from .timebase import Instant, Interval, Location, ensure_utc
from .window_scanner import REJECT, Verdict, Window, scan

logger = logging.getLogger(__name__)

# Shukla paksha tithis used by most rules; Krishna tithis are 16..30.
GOOD_SHUKLA_TITHIS = frozenset({2, 3, 5, 7, 10, 11, 13})


@dataclass(frozen=True)
class MuhurtaRule:
    """Conjunction of conditions a moment must meet. Empty allow-lists do not constrain."""

    name: str
    weekdays: FrozenSet[int] = frozenset()
    nakshatras: FrozenSet[int] = frozenset()
    tithis: FrozenSet[int] = frozenset()
    lagnas: FrozenSet[int] = frozenset()
    excellent_lagnas: FrozenSet[int] = frozenset()
    forbidden_signs: Tuple[Tuple[str, FrozenSet[int]], ...] = ()
    combustion: Tuple[Tuple[str, float], ...] = ()
    avoid_yamaganda: bool = False
    avoid_gulika: bool = False
    avoid_vishti: bool = True


RULES: Dict[str, MuhurtaRule] = {
    "vehicle_purchase": MuhurtaRule(
        name="vehicle_purchase",
        weekdays=frozenset({1, 3, 4, 5}),
        nakshatras=cls.nakshatra_indices(
            ["Ashwini", "Rohini", "Mrigashira", "Punarvasu", "Pushya", "Hasta", "Chitra",
             "Swati", "Anuradha", "Shravana", "Dhanishtha", "Shatabhisha", "Revati"]
        ),
        tithis=GOOD_SHUKLA_TITHIS | {17, 18, 20, 22},
        lagnas=cls.sign_indices(["Taurus", "Gemini", "Cancer", "Leo", "Virgo", "Libra", "Sagittarius", "Pisces"]),
        excellent_lagnas=cls.sign_indices(["Taurus", "Libra"]),
        combustion=(("Venus", 10.0),),
    ),
    "marriage": MuhurtaRule(
        name="marriage",
        weekdays=frozenset({1, 3, 4, 5}),
        nakshatras=cls.nakshatra_indices(
            ["Rohini", "Mrigashira", "Magha", "Uttara Phalguni", "Hasta", "Swati",
             "Anuradha", "Mula", "Uttara Ashadha", "Uttara Bhadrapada", "Revati"]
        ),
        tithis=GOOD_SHUKLA_TITHIS | {12, 16, 17, 18, 20, 22},
        lagnas=cls.sign_indices(["Taurus", "Gemini", "Cancer", "Leo", "Virgo", "Libra", "Sagittarius", "Pisces"]),
        excellent_lagnas=cls.sign_indices(["Gemini", "Virgo", "Libra"]),
        combustion=(("Venus", 10.0), ("Jupiter", 11.0)),
        avoid_yamaganda=True,
        avoid_gulika=True,
    ),
    "griha_pravesh": MuhurtaRule(
        name="griha_pravesh",
        weekdays=frozenset({0, 1, 3, 4, 5}),
        nakshatras=frozenset({1, 4, 5, 7, 8, 12, 13, 14, 15, 17, 21, 22, 23, 26, 27}),
        tithis=frozenset({2, 3, 5, 7, 10, 11, 12, 13}),
        lagnas=cls.sign_indices(
            ["Taurus", "Gemini", "Cancer", "Leo", "Virgo", "Libra", "Sagittarius", "Aquarius", "Pisces"]
        ),
        excellent_lagnas=cls.sign_indices(["Cancer", "Taurus", "Leo"]),
        combustion=(("Jupiter", 11.0),),
        avoid_yamaganda=True,
        avoid_gulika=True,
    ),
    "new_business": MuhurtaRule(
        name="new_business",
        weekdays=frozenset({1, 3, 4, 5}),
        nakshatras=cls.nakshatra_indices(
            ["Ashwini", "Rohini", "Punarvasu", "Pushya", "Uttara Phalguni", "Hasta", "Chitra",
             "Anuradha", "Uttara Ashadha", "Shravana", "Dhanishtha", "Uttara Bhadrapada", "Revati"]
        ),
        tithis=GOOD_SHUKLA_TITHIS | {6},
        lagnas=cls.sign_indices(["Taurus", "Gemini", "Leo", "Virgo", "Sagittarius", "Aquarius", "Pisces"]),
        excellent_lagnas=cls.sign_indices(["Taurus", "Leo"]),
        # debilitated Jupiter
        forbidden_signs=(("Jupiter", cls.sign_indices(["Capricorn"])),),
        combustion=(("Jupiter", 11.0),),
    ),
    "namakarana": MuhurtaRule(
        name="namakarana",
        weekdays=frozenset({1, 3, 4, 5}),
        nakshatras=cls.nakshatra_indices(
            ["Ashwini", "Rohini", "Mrigashira", "Punarvasu", "Pushya", "Uttara Phalguni", "Hasta",
             "Chitra", "Swati", "Anuradha", "Uttara Ashadha", "Shravana", "Dhanishtha",
             "Shatabhisha", "Uttara Bhadrapada", "Revati"]
        ),
        tithis=GOOD_SHUKLA_TITHIS,
        lagnas=cls.sign_indices(["Taurus", "Gemini", "Cancer", "Virgo", "Libra", "Sagittarius", "Pisces"]),
        excellent_lagnas=cls.sign_indices(["Taurus", "Cancer"]),
    ),
    "property_purchase": MuhurtaRule(
        name="property_purchase",
        weekdays=frozenset({1, 4, 5, 6}),
        nakshatras=cls.nakshatra_indices(
            ["Rohini", "Mrigashira", "Punarvasu", "Pushya", "Magha", "Uttara Phalguni", "Vishakha",
             "Anuradha", "Mula", "Uttara Ashadha", "Uttara Bhadrapada", "Revati"]
        ),
        tithis=GOOD_SHUKLA_TITHIS | {6, 12},
        lagnas=cls.sign_indices(["Taurus", "Cancer", "Leo", "Scorpio", "Aquarius"]),
        excellent_lagnas=cls.sign_indices(["Taurus", "Leo"]),
        # debilitated Saturn
        forbidden_signs=(("Saturn", cls.sign_indices(["Aries"])),),
        avoid_yamaganda=True,
    ),
}


def step_from_env() -> timedelta:
    return timedelta(minutes=float(os.getenv("MUHURTA_STEP_MINUTES", "30")))


def max_span_from_env() -> timedelta:
    return timedelta(days=float(os.getenv("MUHURTA_MAX_DAYS", "366")))


class MuhurtaPredicate:
    """Scanner predicate for one rule, place and timezone.

    Per-day exclusion intervals are cached on the instance, so one predicate
    should serve a single scan.
    """

    def __init__(self, rule: MuhurtaRule, oracle: Oracle, location: Location, tz: ZoneInfo):
        self.rule = rule
        self.oracle = oracle
        self.location = location
        self.tz = tz
        self._exclusions: Dict[date, Optional[List[Tuple[str, Interval]]]] = {}
        self.skipped_days: List[date] = []

    def day_exclusions(self, local_day: date) -> Optional[List[Tuple[str, Interval]]]:
        """Blocked intervals for ``local_day``; None when the day could not be resolved."""

        if local_day in self._exclusions:
            return self._exclusions[local_day]
        try:
            solar = resolve_solar_day(local_day, self.tz, self.oracle, self.location)
        except DegenerateDay as exc:
            logger.warning(
                "muhurta_day_degenerate",
                extra={"day": local_day.isoformat(), "rule": self.rule.name, "error": str(exc)},
            )
            self.skipped_days.append(local_day)
            self._exclusions[local_day] = None
            return None

        blocks = compute_muhurta_blocks(solar.sunrise, solar.sunset, solar.weekday)
        excluded = [("Rahu Kalam", blocks["rahu_kal"])]
        if self.rule.avoid_yamaganda:
            excluded.append(("Yamaganda", blocks["yamaganda"]))
        if self.rule.avoid_gulika:
            excluded.append(("Gulika Kalam", blocks["gulika_kal"]))
        self._exclusions[local_day] = excluded
        return excluded

    def __call__(self, moment: datetime) -> Verdict:
        rule = self.rule
        moment = ensure_utc(moment)
        local = moment.astimezone(self.tz)

        weekday = cls.weekday_index(local.weekday())
        if rule.weekdays and weekday not in rule.weekdays:
            return REJECT

        excluded = self.day_exclusions(local.date())
        if excluded is None:
            return REJECT
        if any(span.contains(moment) for _label, span in excluded):
            return REJECT

        instant = Instant(moment, self.location)
        sun = self.oracle.longitude(instant, "Sun")
        moon = self.oracle.longitude(instant, "Moon")

        nakshatra = cls.nakshatra_index(moon)
        if rule.nakshatras and nakshatra not in rule.nakshatras:
            return REJECT
        tithi = cls.tithi_index(sun, moon)
        if rule.tithis and tithi not in rule.tithis:
            return REJECT
        if rule.avoid_vishti and cls.is_vishti(cls.karana_index(sun, moon)):
            return REJECT

        lagna = cls.rashi_index(self.oracle.ascendant(instant))
        if rule.lagnas and lagna not in rule.lagnas:
            return REJECT

        for body, signs in rule.forbidden_signs:
            if cls.rashi_index(self.oracle.longitude(instant, body)) in signs:
                return REJECT
        for body, orb in rule.combustion:
            if cls.angular_distance(self.oracle.longitude(instant, body), sun) < orb:
                return REJECT

        quality = "excellent" if lagna in rule.excellent_lagnas else "good"
        factors = (
            f"Weekday {cls.WEEKDAY_NAMES[weekday]}",
            f"Nakshatra {cls.nakshatra_name(nakshatra)}",
            f"Tithi {cls.tithi_name(tithi)}",
            f"Lagna {cls.sign_name(lagna)}",
        )
        return Verdict(True, quality, factors)


@dataclass(frozen=True)
class MuhurtaSearch:
    purpose: str
    windows: Tuple[Window, ...]
    skipped_days: Tuple[date, ...] = field(default=())

    def to_dict(self, tz: Optional[ZoneInfo] = None) -> Dict[str, Any]:
        return {
            "purpose": self.purpose,
            "windows": [w.to_dict(tz) for w in self.windows],
            "skipped_days": [d.isoformat() for d in self.skipped_days],
        }


def search_muhurta(
    purpose: str,
    start: datetime,
    end: datetime,
    oracle: Oracle,
    location: Location,
    tz: ZoneInfo,
    step: Optional[timedelta] = None,
) -> MuhurtaSearch:
    """Windows in ``[start, end)`` satisfying the rule registered for ``purpose``.

    Naive ``start``/``end`` are read as local times in ``tz``. Ranges longer
    than ``MUHURTA_MAX_DAYS`` are rejected with ``ValueError``.
    """

    rule = RULES.get(purpose)
    if rule is None:
        raise ValueError(f"unknown muhurta purpose {purpose!r}; expected one of {sorted(RULES)}")
    if start.tzinfo is None:
        start = start.replace(tzinfo=tz)
    if end.tzinfo is None:
        end = end.replace(tzinfo=tz)
    if end <= start:
        raise ValueError("end must be after start")
    limit = max_span_from_env()
    if end - start > limit:
        raise ValueError(f"search range exceeds {limit.days} days")

    predicate = MuhurtaPredicate(rule, oracle, location, tz)
    windows = scan(start, end, step or step_from_env(), predicate)
    logger.info(
        "muhurta_search_done",
        extra={"purpose": purpose, "windows": len(windows), "skipped_days": len(predicate.skipped_days)},
    )
    return MuhurtaSearch(purpose, windows, tuple(predicate.skipped_days))


__all__ = ["MuhurtaRule", "RULES", "MuhurtaPredicate", "MuhurtaSearch", "search_muhurta"]
