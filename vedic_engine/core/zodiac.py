"""
zodiac.py
=========
Classification tables: longitude → Rashi (sign), Nakshatra and Pada.

  Sign       12 × 30°
  Nakshatra  27 × 13°20'
  Pada        4 × 3°20' per nakshatra (108 in the circle)

Every slice is half-open [start, end): a longitude sitting exactly on an edge
belongs to the next slice. Longitudes are normalized into [0, 360) first.
"""

import math
from dataclasses import dataclass, asdict
from typing import Tuple

SIGNS = ["Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
         "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces"]

NAKSHATRAS = [
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra",
    "Punarvasu", "Pushya", "Ashlesha", "Magha", "Purva Phalguni", "Uttara Phalguni",
    "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha", "Jyeshtha",
    "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana", "Dhanishtha",
    "Shatabhisha", "Purva Bhadrapada", "Uttara Bhadrapada", "Revati"
]

SIGN_SPAN      = 30.0
NAKSHATRA_SPAN = 360.0 / 27.0       # 13°20'
PADA_SPAN      = NAKSHATRA_SPAN / 4  # 3°20'

# Float results this close to a slice edge (in slice units) are snapped onto
# the edge, so 3 * (360/27) lands in Rohini and not in Krittika.
_EDGE_EPSILON = 1e-9


def normalize_longitude(lon: float) -> float:
    """Normalize an angle to [0, 360)."""
    x = lon % 360.0
    if 360.0 - x < _EDGE_EPSILON:
        return 0.0
    return x


def _slice_index(lon: float, span: float) -> int:
    x = lon / span
    nearest = round(x)
    if abs(x - nearest) < _EDGE_EPSILON:
        return int(nearest)
    return int(math.floor(x))


def sign_index(lon: float) -> int:
    return _slice_index(normalize_longitude(lon), SIGN_SPAN) % 12


def sign_of(lon: float) -> str:
    return SIGNS[sign_index(lon)]


def pada_index(lon: float) -> int:
    """Absolute pada index 0..107 counted from 0° Aries."""
    return _slice_index(normalize_longitude(lon), PADA_SPAN) % 108


def nakshatra_of(lon: float) -> Tuple[str, int]:
    """Returns (nakshatra name, pada 1..4)."""
    q = pada_index(lon)
    return NAKSHATRAS[q // 4], q % 4 + 1


@dataclass(frozen=True)
class ZodiacPlacement:
    longitude:            float
    sign_index:           int
    sign:                 str
    degree_in_sign:       float
    nakshatra_index:      int
    nakshatra:            str
    nakshatra_pada:       int
    degrees_in_nakshatra: float

    def to_dict(self) -> dict:
        return asdict(self)


def classify_longitude(lon: float) -> ZodiacPlacement:
    lon = normalize_longitude(lon)
    s_idx = sign_index(lon)
    q = pada_index(lon)
    n_idx = q // 4
    return ZodiacPlacement(
        longitude=lon,
        sign_index=s_idx,
        sign=SIGNS[s_idx],
        degree_in_sign=max(0.0, lon - s_idx * SIGN_SPAN),
        nakshatra_index=n_idx,
        nakshatra=NAKSHATRAS[n_idx],
        nakshatra_pada=q % 4 + 1,
        degrees_in_nakshatra=max(0.0, lon - n_idx * NAKSHATRA_SPAN),
    )


def format_dms(degrees: float) -> str:
    """Format decimal degrees as D°M'S\" string."""
    d = int(degrees)
    m_float = (degrees - d) * 60
    m = int(m_float)
    s = round((m_float - m) * 60, 1)
    return f"{d}°{m}'{s}\""
