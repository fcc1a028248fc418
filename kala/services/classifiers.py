"""Degree to 1-based ordinal classifiers for the lunar calendar quantities.

Every function takes sidereal longitudes in degrees and returns a 1-based
index within a fixed modulus. Name tables are English display labels only.
"""

from __future__ import annotations

from typing import List

TITHI_SPAN = 12.0
NAKSHATRA_SPAN = 360.0 / 27.0
PADA_SPAN = NAKSHATRA_SPAN / 4.0
YOGA_SPAN = 360.0 / 27.0
KARANA_SPAN = 6.0
RASHI_SPAN = 30.0

TITHI_COUNT = 30
NAKSHATRA_COUNT = 27
YOGA_COUNT = 27
KARANA_COUNT = 60
RASHI_COUNT = 12

TITHI_NAMES = [
    "Shukla Pratipada",
    "Shukla Dwitiya",
    "Shukla Tritiya",
    "Shukla Chaturthi",
    "Shukla Panchami",
    "Shukla Shashthi",
    "Shukla Saptami",
    "Shukla Ashtami",
    "Shukla Navami",
    "Shukla Dashami",
    "Shukla Ekadashi",
    "Shukla Dwadashi",
    "Shukla Trayodashi",
    "Shukla Chaturdashi",
    "Purnima",
    "Krishna Pratipada",
    "Krishna Dwitiya",
    "Krishna Tritiya",
    "Krishna Chaturthi",
    "Krishna Panchami",
    "Krishna Shashthi",
    "Krishna Saptami",
    "Krishna Ashtami",
    "Krishna Navami",
    "Krishna Dashami",
    "Krishna Ekadashi",
    "Krishna Dwadashi",
    "Krishna Trayodashi",
    "Krishna Chaturdashi",
    "Amavasya",
]

NAKSHATRA_NAMES = [
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra",
    "Punarvasu", "Pushya", "Ashlesha", "Magha", "Purva Phalguni",
    "Uttara Phalguni", "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha",
    "Jyeshtha", "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana",
    "Dhanishtha", "Shatabhisha", "Purva Bhadrapada", "Uttara Bhadrapada",
    "Revati",
]

YOGA_NAMES = [
    "Vishkambha", "Priti", "Ayushman", "Saubhagya", "Shobhana", "Atiganda",
    "Sukarma", "Dhriti", "Shoola", "Ganda", "Vriddhi", "Dhruva", "Vyaghata",
    "Harshana", "Vajra", "Siddhi", "Vyatipata", "Variyan", "Parigha", "Shiva",
    "Siddha", "Sadhya", "Shubha", "Shukla", "Brahma", "Indra", "Vaidhriti",
]

MOBILE_KARANAS = [
    "Bava",
    "Balava",
    "Kaulava",
    "Taitila",
    "Garaja",
    "Vanija",
    "Vishti (Bhadra)",
]

FIXED_KARANAS = [
    "Shakuni",
    "Chatushpada",
    "Naga",
    "Kimstughna",
]

SIGN_NAMES = [
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _ordinal(value: float, span: float, modulus: int) -> int:
    return int((value % 360.0) // span) % modulus + 1


def elongation(sun_lon: float, moon_lon: float) -> float:
    """Moon minus Sun, folded into [0, 360)."""

    return (moon_lon - sun_lon) % 360.0


def tithi_index(sun_lon: float, moon_lon: float) -> int:
    return _ordinal(elongation(sun_lon, moon_lon), TITHI_SPAN, TITHI_COUNT)


def nakshatra_index(moon_lon: float) -> int:
    return _ordinal(moon_lon, NAKSHATRA_SPAN, NAKSHATRA_COUNT)


def nakshatra_fraction(moon_lon: float) -> float:
    """Fraction (0..1) of the current nakshatra already traversed."""

    return ((moon_lon % 360.0) % NAKSHATRA_SPAN) / NAKSHATRA_SPAN


def pada_index(moon_lon: float) -> int:
    return int(((moon_lon % 360.0) % NAKSHATRA_SPAN) // PADA_SPAN) % 4 + 1


def yoga_index(sun_lon: float, moon_lon: float) -> int:
    return _ordinal(sun_lon + moon_lon, YOGA_SPAN, YOGA_COUNT)


def karana_index(sun_lon: float, moon_lon: float) -> int:
    """Half-tithi ordinal 1..60 within the synodic month."""

    return _ordinal(elongation(sun_lon, moon_lon), KARANA_SPAN, KARANA_COUNT)


def rashi_index(lon: float) -> int:
    return _ordinal(lon, RASHI_SPAN, RASHI_COUNT)


def angular_distance(a: float, b: float) -> float:
    """Smallest separation between two longitudes, 0..180 degrees."""

    diff = abs((a - b) % 360.0)
    return 360.0 - diff if diff > 180.0 else diff


def tithi_name(index: int) -> str:
    return TITHI_NAMES[(index - 1) % TITHI_COUNT]


def paksha(index: int) -> str:
    return "shukla" if index <= 15 else "krishna"


def nakshatra_name(index: int) -> str:
    return NAKSHATRA_NAMES[(index - 1) % NAKSHATRA_COUNT]


def yoga_name(index: int) -> str:
    return YOGA_NAMES[(index - 1) % YOGA_COUNT]


def karana_name(index: int) -> str:
    """Display name for a 1..60 karana ordinal (fixed karanas sit at the month edges)."""

    half = (index - 1) % KARANA_COUNT
    if half == 0:
        return "Kimstughna"
    if half >= 57:
        return FIXED_KARANAS[half - 57]
    return MOBILE_KARANAS[(half - 1) % len(MOBILE_KARANAS)]


def is_vishti(index: int) -> bool:
    return karana_name(index) == MOBILE_KARANAS[6]


def sign_name(index: int) -> str:
    return SIGN_NAMES[(index - 1) % RASHI_COUNT]


def sign_indices(names: List[str]) -> frozenset:
    return frozenset(SIGN_NAMES.index(n) + 1 for n in names)


def nakshatra_indices(names: List[str]) -> frozenset:
    return frozenset(NAKSHATRA_NAMES.index(n) + 1 for n in names)


def weekday_index(python_weekday: int) -> int:
    """Map ``datetime.weekday()`` (Monday=0) to the Sunday=0 convention."""

    return (python_weekday + 1) % 7
