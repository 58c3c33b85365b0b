"""
aspects.py
==========
Pairwise angular aspects between the nine grahas.

Every unordered pair is measured on the shorter arc (0–180°) and matched
against the canonical angles below, first match wins, with an inclusive
±8° orb. Pairs that match nothing produce no record.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .ephemeris import PlanetPosition

# Checked in this order.
ASPECT_ANGLES = (
    ("conjunction",   0.0),
    ("opposition",  180.0),
    ("trine",       120.0),
    ("square",       90.0),
    ("sextile",      60.0),
)

ASPECT_ORB = 8.0


@dataclass(frozen=True)
class Aspect:
    planet_a:   str
    planet_b:   str
    separation: float
    type:       str
    orb:        float

    def to_dict(self) -> dict:
        return {
            "from_planet": self.planet_a,
            "to_planet": self.planet_b,
            "angle": round(self.separation, 4),
            "type": self.type,
            "orb": round(self.orb, 4),
        }


def angular_separation(lon_a: float, lon_b: float) -> float:
    """Smaller arc between two longitudes, in [0, 180]."""
    diff = abs(lon_a - lon_b) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def classify_separation(separation: float, orb: float = ASPECT_ORB) -> Optional[str]:
    for name, exact in ASPECT_ANGLES:
        if abs(separation - exact) <= orb:
            return name
    return None


def find_aspects(planets: Sequence[PlanetPosition],
                 orb: float = ASPECT_ORB) -> Tuple[Aspect, ...]:
    found = []
    for i in range(len(planets)):
        for j in range(i + 1, len(planets)):
            a, b = planets[i], planets[j]
            sep = angular_separation(a.longitude, b.longitude)
            kind = classify_separation(sep, orb)
            if kind is None:
                continue
            exact = dict(ASPECT_ANGLES)[kind]
            found.append(Aspect(a.name, b.name, sep, kind, abs(sep - exact)))
    return tuple(found)
