"""
Sign / nakshatra / pada classification.

Run with: python -m pytest vedic_engine/ -v
"""

import pytest

from vedic_engine.core.zodiac import (
    NAKSHATRAS, NAKSHATRA_SPAN, PADA_SPAN, SIGNS,
    classify_longitude, format_dms, nakshatra_of, normalize_longitude, pada_index, sign_of,
)


@pytest.mark.parametrize("lon, expected", [
    (0.0, "Aries"),
    (29.999999, "Aries"),
    (30.0, "Taurus"),
    (359.9999, "Pisces"),
    (360.0, "Aries"),
    (-30.0, "Pisces"),
    (725.0, "Aries"),
])
def test_sign_of(lon, expected):
    assert sign_of(lon) == expected


def test_every_sign_edge_belongs_to_next_sign():
    for i in range(12):
        assert sign_of(i * 30.0) == SIGNS[i]


def test_every_nakshatra_edge_belongs_to_next_nakshatra():
    for k in range(27):
        name, pada = nakshatra_of(k * NAKSHATRA_SPAN)
        assert name == NAKSHATRAS[k]
        assert pada == 1


def test_every_pada_edge_belongs_to_next_pada():
    for q in range(108):
        assert pada_index(q * PADA_SPAN) == q


def test_nakshatra_examples():
    assert nakshatra_of(0.0) == ("Ashwini", 1)
    assert nakshatra_of(13.34) == ("Bharani", 1)
    assert nakshatra_of(45.0) == ("Rohini", 2)
    assert nakshatra_of(NAKSHATRA_SPAN * 26 + 1.0) == ("Revati", 1)
    assert nakshatra_of(359.99) == ("Revati", 4)


def test_normalize_longitude_range():
    assert normalize_longitude(360.0) == 0.0
    assert normalize_longitude(-1e-12) == 0.0
    assert normalize_longitude(-90.0) == 270.0
    assert 0.0 <= normalize_longitude(-1e-6) < 360.0


def test_classify_longitude_fields():
    place = classify_longitude(45.0)
    assert place.sign == "Taurus"
    assert place.sign_index == 1
    assert place.degree_in_sign == pytest.approx(15.0)
    assert place.nakshatra == "Rohini"
    assert place.nakshatra_index == 3
    assert place.nakshatra_pada == 2
    assert place.degrees_in_nakshatra == pytest.approx(5.0)


def test_classify_on_edge_has_zero_offsets():
    place = classify_longitude(3 * NAKSHATRA_SPAN)
    assert place.nakshatra == "Rohini"
    assert place.degrees_in_nakshatra >= 0.0
    assert place.degrees_in_nakshatra == pytest.approx(0.0, abs=1e-9)


def test_format_dms():
    assert format_dms(15.5) == "15°30'0.0\""
    assert format_dms(0.0) == "0°0'0.0\""
