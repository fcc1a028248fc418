import pytest

from kala.services import classifiers as cls


def test_tithi_index_edges():
    assert cls.tithi_index(0.0, 0.0) == 1
    assert cls.tithi_index(0.0, 12.0) == 2
    assert cls.tithi_index(100.0, 99.9) == 30
    assert cls.tithi_index(350.0, 10.0) == 2  # elongation wraps to 20


def test_tithi_names_and_paksha():
    assert cls.tithi_name(15) == "Purnima"
    assert cls.tithi_name(30) == "Amavasya"
    assert cls.paksha(15) == "shukla"
    assert cls.paksha(16) == "krishna"


def test_nakshatra_and_pada():
    assert cls.nakshatra_index(0.0) == 1
    assert cls.nakshatra_index(359.99) == 27
    assert cls.nakshatra_index(360.0) == 1
    assert cls.nakshatra_name(8) == "Pushya"
    assert cls.pada_index(0.0) == 1
    assert cls.pada_index(cls.NAKSHATRA_SPAN - 0.01) == 4


def test_nakshatra_fraction():
    assert cls.nakshatra_fraction(cls.NAKSHATRA_SPAN * 0.25) == pytest.approx(0.25)
    assert cls.nakshatra_fraction(cls.NAKSHATRA_SPAN * 3.5) == pytest.approx(0.5)


def test_yoga_uses_sum_of_longitudes():
    assert cls.yoga_index(200.0, 170.0) == 1  # 370 -> 10 degrees
    assert cls.yoga_name(27) == "Vaidhriti"


def test_karana_names():
    assert cls.karana_index(0.0, 0.0) == 1
    assert cls.karana_name(1) == "Kimstughna"
    assert cls.karana_name(2) == "Bava"
    assert cls.karana_name(8) == "Vishti (Bhadra)"
    assert cls.is_vishti(8)
    assert cls.karana_name(58) == "Shakuni"
    assert cls.karana_name(60) == "Naga"


def test_rashi_and_signs():
    assert cls.rashi_index(0.0) == 1
    assert cls.rashi_index(30.0) == 2
    assert cls.sign_name(12) == "Pisces"
    assert cls.sign_indices(["Aries", "Leo"]) == frozenset({1, 5})


def test_angular_distance_wraps():
    assert cls.angular_distance(350.0, 10.0) == pytest.approx(20.0)
    assert cls.angular_distance(10.0, 350.0) == pytest.approx(20.0)
    assert cls.angular_distance(0.0, 180.0) == pytest.approx(180.0)


def test_weekday_index_starts_on_sunday():
    assert cls.weekday_index(6) == 0  # Python Sunday
    assert cls.weekday_index(0) == 1  # Python Monday
    assert cls.WEEKDAY_NAMES[cls.weekday_index(5)] == "Saturday"
