from datetime import datetime, timedelta, timezone

import pytest

from kala.services.classifiers import NAKSHATRA_SPAN
from kala.services.dasha import (
    DASHA_ORDER,
    compute_vimshottari,
    current_dasha,
    flatten_periods,
    lord_for_nakshatra,
    nested_periods,
    vimshottari_tree,
)

YEAR = timedelta(days=365.25)
BIRTH = datetime(1990, 8, 18, 9, 2, tzinfo=timezone.utc)


def test_lord_for_nakshatra_cycles_three_times():
    assert lord_for_nakshatra(1) == "Ketu"
    assert lord_for_nakshatra(10) == "Ketu"
    assert lord_for_nakshatra(19) == "Ketu"
    assert lord_for_nakshatra(8) == "Saturn"
    assert lord_for_nakshatra(27) == "Mercury"


def test_birth_quarter_into_ketu():
    root = vimshottari_tree(NAKSHATRA_SPAN * 0.25, BIRTH, levels=2)
    mahas = root.children
    assert [m.ruler for m in mahas] == DASHA_ORDER * 2
    assert mahas[0].start == BIRTH
    assert mahas[0].duration == YEAR * 5.25
    assert mahas[1].duration == YEAR * 20
    assert root.end == BIRTH + YEAR * (240 - 1.75)
    assert mahas[9].duration == YEAR * 7
    assert not mahas[9].is_partial
    assert sum((c.duration for c in mahas[0].children), timedelta(0)) == mahas[0].duration


def test_birth_at_nakshatra_start_has_no_clipping():
    root = vimshottari_tree(0.0, BIRTH, levels=1)
    assert root.children[0].ruler == "Ketu"
    assert root.children[0].duration == YEAR * 7
    assert not root.children[0].is_partial
    assert root.duration == YEAR * 240


def test_current_dasha_chain():
    root = vimshottari_tree(NAKSHATRA_SPAN * 0.25, BIRTH, levels=3)
    chain = current_dasha(root, BIRTH + timedelta(days=1))
    assert list(chain) == ["mahadasha", "antardasha", "pratyantardasha"]
    assert chain["mahadasha"]["lord"] == "Ketu"
    assert chain["antardasha"]["lord"] == "Sun"
    assert current_dasha(root, BIRTH - timedelta(days=1)) == {}


def test_late_nakshatra_birth_still_has_a_dasha_at_110():
    # 90% through Bharani: only two Venus years remain at birth
    root = vimshottari_tree(NAKSHATRA_SPAN * 1.9, BIRTH, levels=2)
    assert root.children[0].ruler == "Venus"
    assert root.end >= BIRTH + YEAR * 120
    chain = current_dasha(root, BIRTH + YEAR * 110)
    assert chain["mahadasha"]["lord"] == "Venus"
    assert chain["mahadasha"]["start"] > (BIRTH + YEAR * 100).isoformat()
    assert "antardasha" in chain


def test_year_length_from_env(monkeypatch):
    monkeypatch.setenv("DASHA_YEAR_DAYS", "360")
    root = vimshottari_tree(NAKSHATRA_SPAN * 0.25, BIRTH, levels=1)
    assert root.children[1].duration == timedelta(days=360 * 20)


def test_levels_out_of_range():
    with pytest.raises(ValueError):
        vimshottari_tree(10.0, BIRTH, levels=0)
    with pytest.raises(ValueError):
        vimshottari_tree(10.0, BIRTH, levels=6)


def test_flatten_and_nest():
    root = vimshottari_tree(NAKSHATRA_SPAN * 0.25, BIRTH, levels=2)
    periods = flatten_periods(root)
    maha = [p for p in periods if p["level"] == 1]
    antar = [p for p in periods if p["level"] == 2]
    assert len(maha) == 18
    assert maha[0]["parent"] is None
    assert {p["parent"] for p in antar} == set(DASHA_ORDER)
    starts = [p["start"] for p in maha]
    assert starts == sorted(starts)

    nested = nested_periods(root)
    assert nested[0]["lord"] == "Ketu"
    assert nested[0]["sub_periods"][0]["lord"] == "Sun"
    assert nested[0]["sub_periods"][0]["sub_periods"] == []


def test_compute_vimshottari_uses_oracle_moon(oracle):
    chart = {"date": "2024-01-01", "time": "00:00:00", "place": {"lat": 51.48, "lon": 0.0, "tz": "UTC"}}
    result = compute_vimshottari(chart, oracle, levels=1)
    # fake Moon sits half way through Pushya (Saturn) at midnight UTC
    assert result["nakshatra"] == {"number": 8, "name": "Pushya"}
    assert result["tree"].children[0].ruler == "Saturn"
    assert result["balance_years"] == pytest.approx(9.5)
    assert result["birth_utc"] == "2024-01-01T00:00:00+00:00"


def test_compute_vimshottari_rejects_unknown_timezone(oracle):
    chart = {"date": "2024-01-01", "time": "00:00:00", "place": {"lat": 0.0, "lon": 0.0, "tz": "Mars/Olympus"}}
    with pytest.raises(ValueError):
        compute_vimshottari(chart, oracle)
