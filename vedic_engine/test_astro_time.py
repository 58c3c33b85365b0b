"""
Julian Day, sidereal time and obliquity.
"""

from datetime import datetime, timedelta, timezone

import pytest

from vedic_engine.core.astro_time import (
    J2000, datetime_to_jd, greenwich_sidereal_time, gregorian_to_jd,
    julian_centuries, local_sidereal_time, mean_obliquity,
)
from vedic_engine.core.errors import InputValidationError

JD_TOLERANCE = 1e-6

JD_VECTORS = [
    (2000, 1, 1, 12.0, 2451545.0),   # J2000.0 definition
    (1900, 1, 1, 0.0,  2415020.5),   # Historical
    (2023, 6, 21, 0.0, 2460116.5),   # Recent solstice
    (1957, 10, 4, 19.44, 2436116.31),  # Meeus example 7.a
]


@pytest.mark.parametrize("year, month, day, hour, expected", JD_VECTORS)
def test_gregorian_to_jd(year, month, day, hour, expected):
    assert gregorian_to_jd(year, month, day, hour) == pytest.approx(expected, abs=1e-3)


@pytest.mark.parametrize("month, day", [(0, 1), (13, 1), (2, 30), (4, 31), (1, 0)])
def test_gregorian_to_jd_rejects_invalid_dates(month, day):
    with pytest.raises(InputValidationError):
        gregorian_to_jd(2001, month, day)


def test_leap_day_is_accepted():
    assert gregorian_to_jd(2000, 2, 29) == pytest.approx(2451603.5, abs=JD_TOLERANCE)


def test_datetime_to_jd_naive_is_utc():
    naive = datetime(2000, 1, 1, 12, 0, 0)
    aware = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert datetime_to_jd(naive) == datetime_to_jd(aware) == pytest.approx(J2000)


def test_datetime_to_jd_converts_offsets():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert datetime_to_jd(datetime(2000, 1, 1, 17, 30, tzinfo=ist)) == pytest.approx(J2000)


def test_julian_centuries():
    assert julian_centuries(J2000) == 0.0
    assert julian_centuries(J2000 + 36525.0) == pytest.approx(1.0)


def test_sidereal_time_at_j2000():
    assert greenwich_sidereal_time(J2000) == pytest.approx(280.46061837, abs=1e-6)
    assert local_sidereal_time(J2000, 90.0) == pytest.approx(10.46061837, abs=1e-6)
    assert local_sidereal_time(J2000, -180.0) == pytest.approx(100.46061837, abs=1e-6)


def test_sidereal_time_is_in_range():
    for offset in range(0, 400, 37):
        lst = local_sidereal_time(J2000 + offset * 0.37, -75.0)
        assert 0.0 <= lst < 360.0


def test_mean_obliquity():
    assert mean_obliquity(J2000) == pytest.approx(23.4392911)
    # decreases by about 47" per century
    assert mean_obliquity(J2000 + 36525.0) == pytest.approx(23.4262867, abs=1e-6)
