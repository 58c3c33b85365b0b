"""
astro_time.py
=============
Civil time → Julian Day, sidereal time and obliquity of the ecliptic.

Source: Jean Meeus, "Astronomical Algorithms" 2nd ed., Ch. 7 (Julian Day),
Ch. 12 (sidereal time) and Ch. 22 (obliquity, low-order form).
"""

import calendar
from datetime import datetime, timezone

from .errors import InputValidationError

# ── Constants ──────────────────────────────────────────────────
J2000              = 2451545.0
DAYS_PER_CENTURY   = 36525.0


def gregorian_to_jd(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """Meeus Ch. 7. `hour` is the UT fraction of the day in hours."""
    if not 1 <= month <= 12:
        raise InputValidationError("month", f"{month} outside 1..12")
    if not 1 <= day <= calendar.monthrange(year, month)[1]:
        raise InputValidationError("day", f"{day} is not a day of {year}-{month:02d}")
    if month <= 2:
        year -= 1; month += 12
    A = int(year / 100)
    B = 2 - A + int(A / 4)
    return int(365.25*(year+4716)) + int(30.6001*(month+1)) + day + B - 1524.5 + hour/24.0


def datetime_to_jd(moment: datetime) -> float:
    """Julian Day of an instant. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    hour = (utc.hour
            + utc.minute / 60.0
            + utc.second / 3600.0
            + utc.microsecond / 3_600_000_000.0)
    return gregorian_to_jd(utc.year, utc.month, utc.day, hour)


def julian_centuries(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""
    return (jd - J2000) / DAYS_PER_CENTURY


# ── Sidereal time (Meeus Ch. 12) ───────────────────────────────

def greenwich_sidereal_time(jd: float) -> float:
    """
    Greenwich Mean Sidereal Time in degrees, Meeus Eq. 12.4.
    """
    T = julian_centuries(jd)
    theta = (280.46061837
             + 360.98564736629 * (jd - J2000)
             + 0.000387933 * T * T
             - T * T * T / 38710000.0)
    return theta % 360.0


def local_sidereal_time(jd: float, longitude_deg: float) -> float:
    """Local Sidereal Time in degrees. longitude_deg: positive East."""
    return (greenwich_sidereal_time(jd) + longitude_deg) % 360.0


# ── Obliquity ──────────────────────────────────────────────────

def mean_obliquity(jd: float) -> float:
    """Mean obliquity of the ecliptic in degrees (low-order polynomial)."""
    T = julian_centuries(jd)
    return 23.4392911 - 0.0130042 * T - 0.00000016 * T * T
