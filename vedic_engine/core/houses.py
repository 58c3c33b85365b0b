"""
houses.py
=========
Ascendant (Lagna) and whole-sign house (Bhava) assignment.

Whole Sign is the only implemented house system: house 1 is the sign holding
the Ascendant, house 2 the next sign, and so on. Cusp longitudes are therefore
always sign boundaries. Other systems (Placidus, Koch, Equal) are an extension
point; asking for one is rejected instead of quietly answering in whole signs.

Source: Meeus Ch. 14; Holden, J.H. (1994). "A History of Horoscopic Astrology"
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Tuple

from .astro_time import local_sidereal_time, mean_obliquity
from .errors import InputValidationError
from .ephemeris import PlanetPosition
from .zodiac import SIGNS, SIGN_SPAN, classify_longitude, format_dms, normalize_longitude

logger = logging.getLogger(__name__)

DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi

HOUSE_SYSTEMS = ("whole_sign",)


# ---------------------------------------------------------------------------
# Ascendant (Lagna) calculation
# ---------------------------------------------------------------------------

def compute_ascendant(lst: float, latitude_deg: float, obliquity: float) -> float:
    """
    Tropical Ascendant in degrees.

        asc = atan2(-cos(LST), sin(e)·tan(lat) + cos(e)·sin(LST)) + 180°

    The +180° rotation picks the eastern intersection of ecliptic and horizon
    (atan2 alone returns the Descendant). Closed form, no iteration.

    This differs from the frequently quoted
    atan2(-cos(LST), tan(e)·sin(lat) + cos(lat)·sin(LST)), which has the
    obliquity and latitude terms transposed and no rotation, so Ascendants
    computed with that form will not match these. At LST 0 on the equator
    this one gives 90° (0° Cancer).

    Near the poles (|lat| >= 90° - e) the ecliptic can lie along the horizon
    and the Ascendant jumps discontinuously; the value is still returned.
    """
    if abs(latitude_deg) >= 90.0 - obliquity:
        logger.warning("Ascendant at latitude %.4f is inside the polar circle "
                       "and may be ill-defined", latitude_deg)

    e = obliquity * DEG_TO_RAD
    phi = latitude_deg * DEG_TO_RAD
    ramc = lst * DEG_TO_RAD

    y = -math.cos(ramc)
    x = math.sin(e) * math.tan(phi) + math.cos(e) * math.sin(ramc)
    return normalize_longitude(math.atan2(y, x) * RAD_TO_DEG + 180.0)


@dataclass(frozen=True)
class AscendantPosition:
    longitude:            float     # sidereal when an ayanamsa is in use
    tropical_longitude:   float
    sign_index:           int
    sign:                 str
    degree_in_sign:       float
    nakshatra_index:      int
    nakshatra:            str
    nakshatra_pada:       int
    degrees_in_nakshatra: float

    def to_dict(self) -> dict:
        return {
            "longitude": round(self.longitude, 6),
            "tropical_longitude": round(self.tropical_longitude, 6),
            "sign": self.sign,
            "degree_in_sign": round(self.degree_in_sign, 6),
            "degree_formatted": format_dms(self.degree_in_sign),
            "nakshatra": self.nakshatra,
            "nakshatra_pada": self.nakshatra_pada,
            "degrees_in_nakshatra": round(self.degrees_in_nakshatra, 6),
        }


def ascendant_from_longitude(tropical: float, ayanamsa: float = 0.0) -> AscendantPosition:
    place = classify_longitude(tropical - ayanamsa)
    return AscendantPosition(
        longitude=place.longitude,
        tropical_longitude=normalize_longitude(tropical),
        sign_index=place.sign_index,
        sign=place.sign,
        degree_in_sign=place.degree_in_sign,
        nakshatra_index=place.nakshatra_index,
        nakshatra=place.nakshatra,
        nakshatra_pada=place.nakshatra_pada,
        degrees_in_nakshatra=place.degrees_in_nakshatra,
    )


def ascendant_position(jd: float, latitude: float, longitude: float,
                       ayanamsa: float = 0.0) -> AscendantPosition:
    """Lagna for a Julian Day (UT) and place; longitude positive East."""
    lst = local_sidereal_time(jd, longitude)
    tropical = compute_ascendant(lst, latitude, mean_obliquity(jd))
    return ascendant_from_longitude(tropical, ayanamsa)


# ---------------------------------------------------------------------------
# Whole-sign houses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class House:
    number:         int             # 1..12
    cusp_longitude: float           # start of the house sign
    sign_index:     int
    sign:           str
    planets:        Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "house": self.number,
            "cusp_longitude": self.cusp_longitude,
            "sign": self.sign,
            "planets": list(self.planets),
        }


def check_house_system(system: str) -> str:
    if system not in HOUSE_SYSTEMS:
        raise InputValidationError(
            "house_system",
            f"{system!r} is not supported; available: {', '.join(HOUSE_SYSTEMS)}")
    return system


def house_number(planet_sign_idx: int, lagna_sign_idx: int) -> int:
    """Whole sign: (planet_sign - lagna_sign) % 12 + 1."""
    return (planet_sign_idx - lagna_sign_idx) % 12 + 1


def whole_sign_houses(lagna_sign_idx: int,
                      planets: Iterable[PlanetPosition]) -> Tuple[House, ...]:
    occupants = {n: [] for n in range(1, 13)}
    for planet in planets:
        occupants[house_number(planet.sign_index, lagna_sign_idx)].append(planet.name)

    houses = []
    for i in range(12):
        s_idx = (lagna_sign_idx + i) % 12
        houses.append(House(
            number=i + 1,
            cusp_longitude=s_idx * SIGN_SPAN,
            sign_index=s_idx,
            sign=SIGNS[s_idx],
            planets=tuple(occupants[i + 1]),
        ))
    return tuple(houses)


def occupied_house(houses: Iterable[House], planet: str) -> int:
    """Number of the house holding ``planet``; KeyError when no house does."""
    for house in houses:
        if planet in house.planets:
            return house.number
    raise KeyError(planet)


def get_houses(system: str, ascendant: AscendantPosition,
               planets: Iterable[PlanetPosition]) -> Tuple[House, ...]:
    """Houses for the requested system (only 'whole_sign' is implemented)."""
    check_house_system(system)
    return whole_sign_houses(ascendant.sign_index, planets)
