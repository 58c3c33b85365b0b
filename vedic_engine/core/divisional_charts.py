"""
divisional_charts.py
====================
Rasi (D1) chart assembly and the harmonic divisional (Varga) charts.

assemble_primary_chart() composes planets, Lagna, whole-sign houses and
aspects into the D1 chart. A Varga divides every sign into N equal parts
and maps each part onto a sign; the varga Lagna anchors its own whole-sign
houses.

Charts implemented:
  D1  — Rasi (natal chart, identity)
  D2  — Hora (wealth)
  D3  — Drekkana (siblings, courage)
  D9  — Navamsa (spouse, dharma; the key divisional)
  D10 — Dasamsa (career)
  D12 — Dvadasamsa (parents)
  D60 — Shastiamsa (past life karma, finest division)

Source: Parashara BPHS; Sanjay Rath (2002) "Crux of Vedic Astrology"
"""

from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple

from .aspects import Aspect, find_aspects
from .ephemeris import PlanetPosition
from .errors import InputValidationError
from .houses import AscendantPosition, House, get_houses, house_number
from .zodiac import SIGNS, SIGN_SPAN, normalize_longitude, sign_index

# Sign indices 0, 2, 4 ... (Aries, Gemini, Leo ...) are the odd signs.
ODD_SIGNS = {0, 2, 4, 6, 8, 10}

# Navamsa starts by element: fire → Aries, earth → Capricorn,
# air → Libra, water → Cancer.
NAVAMSA_START = (0, 9, 6, 3) * 3


def _split(longitude: float) -> Tuple[int, float]:
    lon = normalize_longitude(longitude)
    sign_idx = sign_index(lon)
    return sign_idx, max(0.0, lon - sign_idx * SIGN_SPAN)


def _part(degree: float, parts: int) -> Tuple[int, float]:
    """(part index, degree inside the varga sign rescaled to 0–30)."""
    width = SIGN_SPAN / parts
    idx = min(int(degree / width), parts - 1)
    return idx, (degree - idx * width) * parts


def d1(longitude: float) -> Tuple[int, float]:
    return _split(longitude)


def d2(longitude: float) -> Tuple[int, float]:
    """Hora. Odd signs: Leo then Cancer; even signs: Cancer then Leo."""
    sign_idx, deg = _split(longitude)
    part, vdeg = _part(deg, 2)
    leo_first = sign_idx in ODD_SIGNS
    return (4 if (part == 0) == leo_first else 3), vdeg


def d3(longitude: float) -> Tuple[int, float]:
    """Drekkana. Same sign, 5th, 9th."""
    sign_idx, deg = _split(longitude)
    part, vdeg = _part(deg, 3)
    return (sign_idx + 4 * part) % 12, vdeg


def d9(longitude: float) -> Tuple[int, float]:
    sign_idx, deg = _split(longitude)
    part, vdeg = _part(deg, 9)
    return (NAVAMSA_START[sign_idx] + part) % 12, vdeg


def d10(longitude: float) -> Tuple[int, float]:
    """Dasamsa. Odd signs count from the sign itself, even signs from the 9th."""
    sign_idx, deg = _split(longitude)
    part, vdeg = _part(deg, 10)
    start = sign_idx if sign_idx in ODD_SIGNS else sign_idx + 8
    return (start + part) % 12, vdeg


def d12(longitude: float) -> Tuple[int, float]:
    sign_idx, deg = _split(longitude)
    part, vdeg = _part(deg, 12)
    return (sign_idx + part) % 12, vdeg


def d60(longitude: float) -> Tuple[int, float]:
    """Shastiamsa. Half-degree parts counted continuously from Aries."""
    sign_idx, deg = _split(longitude)
    part, vdeg = _part(deg, 60)
    return (sign_idx * 60 + part) % 12, vdeg


DIVISIONAL_FUNCTIONS: Dict[str, Callable[[float], Tuple[int, float]]] = {
    "D1":  d1,
    "D2":  d2,
    "D3":  d3,
    "D9":  d9,
    "D10": d10,
    "D12": d12,
    "D60": d60,
}


# ---------------------------------------------------------------------------
# Chart structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DivisionalPosition:
    name:           str             # planet name or "Lagna"
    division:       str
    sign_index:     int
    sign:           str
    degree_in_sign: float
    house:          int = 1

    def to_dict(self) -> dict:
        return {
            "sign": self.sign,
            "degree": round(self.degree_in_sign, 4),
            "house": self.house,
        }


@dataclass(frozen=True)
class VargaChart:
    division:  str
    ascendant: DivisionalPosition
    positions: Tuple[DivisionalPosition, ...]

    def to_dict(self) -> dict:
        return {
            "division": self.division,
            "lagna": self.ascendant.to_dict(),
            "planets": {p.name: p.to_dict() for p in self.positions},
        }


@dataclass(frozen=True)
class RasiChart:
    planets:      Tuple[PlanetPosition, ...]
    ascendant:    AscendantPosition
    houses:       Tuple[House, ...]
    aspects:      Tuple[Aspect, ...]
    house_system: str = "whole_sign"


def divisional_position(name: str, longitude: float, division: str) -> DivisionalPosition:
    try:
        fn = DIVISIONAL_FUNCTIONS[division]
    except KeyError:
        raise InputValidationError(
            "division", f"unknown divisional chart {division!r}; "
                        f"supported: {list(DIVISIONAL_FUNCTIONS)}") from None
    sign_idx, deg = fn(longitude)
    return DivisionalPosition(name, division, sign_idx, SIGNS[sign_idx], deg)


def compute_varga_chart(planets: Sequence[PlanetPosition], ascendant: AscendantPosition,
                        division: str) -> VargaChart:
    """Varga chart with houses counted from the varga Lagna."""
    lagna = divisional_position("Lagna", ascendant.longitude, division)
    positions = []
    for planet in planets:
        pos = divisional_position(planet.name, planet.longitude, division)
        positions.append(DivisionalPosition(
            pos.name, division, pos.sign_index, pos.sign, pos.degree_in_sign,
            house=house_number(pos.sign_index, lagna.sign_index)))
    return VargaChart(division, lagna, tuple(positions))


def assemble_primary_chart(planets: Sequence[PlanetPosition], ascendant: AscendantPosition,
                           house_system: str = "whole_sign") -> RasiChart:
    planets = tuple(planets)
    return RasiChart(
        planets=planets,
        ascendant=ascendant,
        houses=get_houses(house_system, ascendant, planets),
        aspects=find_aspects(planets),
        house_system=house_system,
    )
