"""
Divisional (varga) charts.
"""

import pytest

from vedic_engine.core.astro_time import J2000
from vedic_engine.core.divisional_charts import (
    DIVISIONAL_FUNCTIONS, assemble_primary_chart, compute_varga_chart, d1, d2, d3, d9, d10,
    d12, d60, divisional_position,
)
from vedic_engine.core.ephemeris import build_planet_positions
from vedic_engine.core.errors import InputValidationError
from vedic_engine.core.houses import ascendant_from_longitude, occupied_house
from vedic_engine.core.zodiac import SIGNS


def sign_name(result):
    return SIGNS[result[0]]


@pytest.mark.parametrize("fn, lon, expected", [
    (d1,  45.0,  "Taurus"),
    (d2,  5.0,   "Leo"),          # odd sign, first half
    (d2,  20.0,  "Cancer"),
    (d2,  35.0,  "Cancer"),       # even sign, first half
    (d3,  25.0,  "Sagittarius"),  # third drekkana → 9th from Aries
    (d9,  1.0,   "Aries"),
    (d9,  5.0,   "Taurus"),
    (d9,  35.0,  "Aquarius"),     # earth sign starts from Capricorn
    (d9,  91.0,  "Cancer"),       # water sign starts from Cancer
    (d10, 5.0,   "Taurus"),
    (d10, 35.0,  "Aquarius"),     # even sign starts from the 9th
    (d12, 5.0,   "Gemini"),
    (d60, 0.25,  "Aries"),
    (d60, 5.75,  "Pisces"),       # 12th half-degree part
])
def test_varga_signs(fn, lon, expected):
    assert sign_name(fn(lon)) == expected


def test_varga_degree_is_rescaled():
    sign_idx, degree = d9(5.0)
    assert degree == pytest.approx((5.0 - 30.0 / 9) * 9)
    assert 0.0 <= degree < 30.0


def test_every_registered_varga_stays_in_range():
    for fn in DIVISIONAL_FUNCTIONS.values():
        for tenth in range(0, 3600, 7):
            sign_idx, degree = fn(tenth / 10.0)
            assert 0 <= sign_idx < 12
            assert 0.0 <= degree <= 30.0


def test_unknown_division():
    with pytest.raises(InputValidationError) as exc:
        divisional_position("Sun", 10.0, "D7")
    assert exc.value.field == "division"


def test_varga_chart_counts_houses_from_varga_lagna(static_provider):
    planets = build_planet_positions(static_provider.snapshot(J2000))
    lagna = ascendant_from_longitude(35.0)          # D9 lagna in Aquarius
    chart = compute_varga_chart(planets, lagna, "D9")

    assert chart.ascendant.sign == "Aquarius"
    positions = {p.name: p for p in chart.positions}
    assert set(positions) == {p.name for p in planets}
    # Moon at 45° → Taurus 15° → navamsa part 4 from Capricorn = Taurus
    assert positions["Moon"].sign == "Taurus"
    assert positions["Moon"].house == 4

    data = chart.to_dict()
    assert data["division"] == "D9"
    assert data["lagna"]["sign"] == "Aquarius"
    assert data["planets"]["Moon"]["house"] == 4


def test_primary_chart(static_provider):
    planets = build_planet_positions(static_provider.snapshot(J2000))
    chart = assemble_primary_chart(planets, ascendant_from_longitude(130.0))

    assert chart.house_system == "whole_sign"
    assert chart.houses[0].sign == "Leo"
    assert occupied_house(chart.houses, "Sun") == 11     # Gemini from Leo
    assert occupied_house(chart.houses, "Ketu") == 2     # Virgo
    assert any(a.type == "trine" for a in chart.aspects)
    with pytest.raises(KeyError):
        occupied_house(chart.houses, "Pluto")
