"""
birth.py
========
The birth event: civil date/time, place and timezone label.

A BirthEvent validates itself on construction, so every downstream step can
assume a real calendar date, a time of day inside 00:00:00–23:59:59, and
coordinates inside the usual geographic ranges.

Timezone labels:
  "Asia/Kolkata", "America/New_York"   IANA names (zoneinfo)
  "UTC", "Z", "GMT"                    UTC
  "+05:30", "UTC-5", "GMT+0530"        fixed offsets, -12:00 .. +14:00
"""

import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InputValidationError

_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?\s*([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)
_UTC_LABELS = {"UTC", "Z", "GMT"}

# Gregorian calendar onwards; the upper bound keeps the dasha window inside
# the range the Moshier ephemeris covers.
MIN_YEAR = 1583
MAX_YEAR = 2999


def resolve_timezone(label: str) -> tzinfo:
    """Turn a timezone label into a tzinfo, or raise InputValidationError."""
    if not isinstance(label, str) or not label.strip():
        raise InputValidationError("timezone", "timezone label is required")
    text = label.strip()
    if text.upper() in _UTC_LABELS:
        return timezone.utc

    match = _OFFSET_RE.match(text)
    if match:
        sign, hours, minutes = match.groups()
        hours, minutes = int(hours), int(minutes or 0)
        if minutes >= 60:
            raise InputValidationError("timezone", f"invalid offset minutes in {label!r}")
        offset = timedelta(hours=hours, minutes=minutes)
        if sign == "-":
            offset = -offset
        if not timedelta(hours=-12) <= offset <= timedelta(hours=14):
            raise InputValidationError("timezone", f"offset {label!r} outside -12:00..+14:00")
        return timezone(offset)

    try:
        return ZoneInfo(text)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InputValidationError("timezone", f"unknown timezone {label!r}") from exc


def _check_int_range(field: str, value, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputValidationError(field, f"expected an integer, got {value!r}")
    if not low <= value <= high:
        raise InputValidationError(field, f"{value} outside {low}..{high}")


def _check_float_range(field: str, value, low: float, high: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InputValidationError(field, f"expected a number, got {value!r}")
    if value != value or not low <= value <= high:
        raise InputValidationError(field, f"{value} outside {low}..{high}")


@dataclass(frozen=True)
class BirthEvent:
    year:      int
    month:     int
    day:       int
    hour:      int = 0
    minute:    int = 0
    second:    int = 0
    latitude:  float = 0.0     # positive = North
    longitude: float = 0.0     # positive = East
    timezone:  str = "UTC"

    def __post_init__(self):
        _check_int_range("year", self.year, MIN_YEAR, MAX_YEAR)
        _check_int_range("month", self.month, 1, 12)
        _check_int_range("day", self.day, 1, calendar.monthrange(self.year, self.month)[1])
        _check_int_range("hour", self.hour, 0, 23)
        _check_int_range("minute", self.minute, 0, 59)
        _check_int_range("second", self.second, 0, 59)
        _check_float_range("latitude", self.latitude, -90.0, 90.0)
        _check_float_range("longitude", self.longitude, -180.0, 180.0)
        resolve_timezone(self.timezone)

    @property
    def tzinfo(self) -> tzinfo:
        return resolve_timezone(self.timezone)

    def local_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day,
                        self.hour, self.minute, self.second, tzinfo=self.tzinfo)

    def utc_datetime(self) -> datetime:
        """The birth instant in UTC."""
        return self.local_datetime().astimezone(timezone.utc)

    def to_dict(self) -> dict:
        return {
            "date": f"{self.year:04d}-{self.month:02d}-{self.day:02d}",
            "time": f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}",
            "timezone": self.timezone,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "utc": self.utc_datetime().isoformat(),
        }
