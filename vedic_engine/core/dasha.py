"""
dasha.py
========
Vimshottari Dasha calculation system.

Vimshottari ("120 years") is the most widely used dasha system in Vedic astrology.
The dasha ruler and starting point are determined by the Moon's nakshatra at birth.

Dasha sequence: Ketu (7) → Venus (20) → Sun (6) → Moon (10) → Mars (7)
                → Rahu (18) → Jupiter (16) → Saturn (19) → Mercury (17)
Total = 120 years

Three levels are modelled:

    Mahadasha        18 periods, two full 120-year cycles from the birth lord
      Antardasha       9 per Mahadasha, starting from the Mahadasha lord
        Pratyantardasha  9 per Antardasha, starting from the Antardasha lord

A child of lord X inside a parent of length L lasts (years[X] / 120) × L.
Child boundaries are placed at cumulative fractions of the parent's span, so
the nine children tile their parent exactly: the first starts at the parent's
start and the last ends at the parent's end.

Source: Parashara, B.V. "Brihat Parashara Hora Shastra" (classical text)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from .errors import InputValidationError
from .zodiac import NAKSHATRAS, NAKSHATRA_SPAN

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DASHA_LORDS = ("Ketu", "Venus", "Sun", "Moon", "Mars",
               "Rahu", "Jupiter", "Saturn", "Mercury")

DASHA_YEARS = {
    "Ketu":    7,
    "Venus":   20,
    "Sun":     6,
    "Moon":    10,
    "Mars":    7,
    "Rahu":    18,
    "Jupiter": 16,
    "Saturn":  19,
    "Mercury": 17,
}

TOTAL_YEARS = 120.0  # sum of all dasha periods

# Nakshatra → dasha lord mapping (27 nakshatras, cycle of 9 lords × 3)
NAKSHATRA_LORDS = (
    "Ketu",    # 0  Ashwini
    "Venus",   # 1  Bharani
    "Sun",     # 2  Krittika
    "Moon",    # 3  Rohini
    "Mars",    # 4  Mrigashira
    "Rahu",    # 5  Ardra
    "Jupiter", # 6  Punarvasu
    "Saturn",  # 7  Pushya
    "Mercury", # 8  Ashlesha
    "Ketu",    # 9  Magha
    "Venus",   # 10 Purva Phalguni
    "Sun",     # 11 Uttara Phalguni
    "Moon",    # 12 Hasta
    "Mars",    # 13 Chitra
    "Rahu",    # 14 Swati
    "Jupiter", # 15 Vishakha
    "Saturn",  # 16 Anuradha
    "Mercury", # 17 Jyeshtha
    "Ketu",    # 18 Mula
    "Venus",   # 19 Purva Ashadha
    "Sun",     # 20 Uttara Ashadha
    "Moon",    # 21 Shravana
    "Mars",    # 22 Dhanishtha
    "Rahu",    # 23 Shatabhisha
    "Jupiter", # 24 Purva Bhadrapada
    "Saturn",  # 25 Uttara Bhadrapada
    "Mercury", # 26 Revati
)

DASHA_LEVELS = ("mahadasha", "antardasha", "pratyantardasha")
DASHA_DEPTH = len(DASHA_LEVELS)

MAHADASHA_CYCLES = 2        # 240 years of Mahadashas

DAYS_PER_YEAR = 365.25

BALANCE_MODES = ("pada", "longitude")


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DashaPeriod:
    planet:        str
    start:         datetime
    end:           datetime
    years:         float
    level:         str
    parent_planet: Optional[str] = None
    sub_periods:   Tuple["DashaPeriod", ...] = ()

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def to_dict(self, depth: Optional[int] = None) -> dict:
        """Plain dict; depth limits how many levels of sub_periods are included."""
        data = {
            "planet": self.planet,
            "level": self.level,
            "parent_planet": self.parent_planet,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "years": round(self.years, 6),
        }
        if depth is None or depth > 1:
            next_depth = None if depth is None else depth - 1
            data["sub_periods"] = [p.to_dict(next_depth) for p in self.sub_periods]
        return data


@dataclass(frozen=True)
class DashaAnchor:
    nakshatra:            str
    pada:                 int
    starting_planet:      str
    elapsed_fraction:     float
    elapsed_years:        float
    balance_years:        float     # remainder of the first Mahadasha at birth
    birth:                datetime
    first_mahadasha_start: datetime

    def to_dict(self) -> dict:
        return {
            "nakshatra": self.nakshatra,
            "pada": self.pada,
            "starting_planet": self.starting_planet,
            "elapsed_fraction": round(self.elapsed_fraction, 6),
            "elapsed_years": round(self.elapsed_years, 6),
            "balance_years": round(self.balance_years, 6),
            "birth": self.birth.isoformat(),
            "first_mahadasha_start": self.first_mahadasha_start.isoformat(),
        }


@dataclass(frozen=True)
class CurrentDasha:
    on_date:         datetime
    mahadasha:       DashaPeriod
    antardasha:      DashaPeriod
    pratyantardasha: DashaPeriod
    fallback:        bool = False   # True when no period contained on_date

    def to_dict(self) -> dict:
        return {
            "on_date": self.on_date.isoformat(),
            "fallback": self.fallback,
            **{
                level: {
                    "planet": period.planet,
                    "start": period.start.isoformat(),
                    "end": period.end.isoformat(),
                }
                for level, period in zip(DASHA_LEVELS,
                                         (self.mahadasha, self.antardasha, self.pratyantardasha))
            },
        }


@dataclass(frozen=True)
class VimshottariDasha:
    anchor:  DashaAnchor
    periods: Tuple[DashaPeriod, ...]
    current: Optional[CurrentDasha] = None

    def current_at(self, moment: datetime) -> CurrentDasha:
        return find_current_dasha(self.periods, moment)

    def to_dict(self, depth: Optional[int] = None) -> dict:
        return {
            "system": "Vimshottari",
            "anchor": self.anchor.to_dict(),
            "current": self.current.to_dict() if self.current else None,
            "periods": [p.to_dict(depth) for p in self.periods],
        }


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def years_to_timedelta(years: float) -> timedelta:
    return timedelta(days=years * DAYS_PER_YEAR)


def dasha_sequence_from(lord: str) -> Tuple[str, ...]:
    """Return dasha sequence starting from given lord."""
    if lord not in DASHA_YEARS:
        raise InputValidationError("planet", f"{lord!r} is not a Vimshottari lord")
    idx = DASHA_LORDS.index(lord)
    return DASHA_LORDS[idx:] + DASHA_LORDS[:idx]


def nakshatra_index(nakshatra: Union[int, str]) -> int:
    """Validate a nakshatra given by index 0..26 or by name."""
    if isinstance(nakshatra, str):
        try:
            return NAKSHATRAS.index(nakshatra)
        except ValueError:
            raise InputValidationError("nakshatra", f"unknown nakshatra {nakshatra!r}") from None
    if isinstance(nakshatra, bool) or not isinstance(nakshatra, int) or not 0 <= nakshatra < 27:
        raise InputValidationError("nakshatra", f"index {nakshatra!r} outside 0..26")
    return nakshatra


def dasha_lord_for_nakshatra(nakshatra: Union[int, str]) -> str:
    return NAKSHATRA_LORDS[nakshatra_index(nakshatra)]


def elapsed_fraction_for_pada(pada: int) -> float:
    """Share of the birth Mahadasha already run: (pada - 1) / 4."""
    if isinstance(pada, bool) or not isinstance(pada, int) or not 1 <= pada <= 4:
        raise InputValidationError("pada", f"{pada!r} outside 1..4")
    return (pada - 1) / 4.0


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Core Vimshottari calculation
# ---------------------------------------------------------------------------

def dasha_anchor(nakshatra: Union[int, str], pada: int, birth: datetime,
                 elapsed_fraction: Optional[float] = None) -> DashaAnchor:
    """
    Starting lord and first Mahadasha start for a Moon nakshatra/pada.

    elapsed_fraction overrides the pada-based (pada - 1) / 4, e.g. with the
    exact share of the nakshatra the Moon has already crossed.
    """
    n_idx = nakshatra_index(nakshatra)
    pada_fraction = elapsed_fraction_for_pada(pada)
    if elapsed_fraction is None:
        elapsed_fraction = pada_fraction
    elif not 0.0 <= elapsed_fraction < 1.0:
        raise InputValidationError("elapsed_fraction", f"{elapsed_fraction!r} outside [0, 1)")

    lord = NAKSHATRA_LORDS[n_idx]
    lord_years = DASHA_YEARS[lord]
    elapsed_years = elapsed_fraction * lord_years
    birth = _as_utc(birth)

    return DashaAnchor(
        nakshatra=NAKSHATRAS[n_idx],
        pada=pada,
        starting_planet=lord,
        elapsed_fraction=elapsed_fraction,
        elapsed_years=elapsed_years,
        balance_years=lord_years - elapsed_years,
        birth=birth,
        first_mahadasha_start=birth - years_to_timedelta(elapsed_years),
    )


def build_period(planet: str, start: datetime, end: datetime, years: float,
                 level: int = 0, depth: int = DASHA_DEPTH,
                 parent: Optional[str] = None) -> DashaPeriod:
    """
    One period and its descendants down to `depth` levels in total
    (level 0 = Mahadasha). depth is capped at len(DASHA_LEVELS).
    """
    if not 1 <= depth <= DASHA_DEPTH:
        raise InputValidationError("depth", f"{depth!r} outside 1..{DASHA_DEPTH}")

    children: Tuple[DashaPeriod, ...] = ()
    if level + 1 < depth:
        children = tuple(
            build_period(sub, sub_start, sub_end, sub_years, level + 1, depth, planet)
            for sub, sub_start, sub_end, sub_years in _subdivide(planet, start, end, years)
        )
    return DashaPeriod(planet, start, end, years, DASHA_LEVELS[level], parent, children)


def _subdivide(owner: str, start: datetime, end: datetime,
               years: float) -> List[Tuple[str, datetime, datetime, float]]:
    span = end - start
    parts = []
    done = 0
    sub_start = start
    for sub in dasha_sequence_from(owner):
        done += DASHA_YEARS[sub]
        sub_end = end if done == TOTAL_YEARS else start + span * (done / TOTAL_YEARS)
        parts.append((sub, sub_start, sub_end, years * DASHA_YEARS[sub] / TOTAL_YEARS))
        sub_start = sub_end
    return parts


def build_mahadashas(anchor: DashaAnchor, depth: int = DASHA_DEPTH,
                     cycles: int = MAHADASHA_CYCLES) -> Tuple[DashaPeriod, ...]:
    """Consecutive Mahadashas from the anchor, `cycles` × 120 years in total."""
    periods = []
    elapsed = 0
    start = anchor.first_mahadasha_start
    for _ in range(cycles):
        for lord in dasha_sequence_from(anchor.starting_planet):
            elapsed += DASHA_YEARS[lord]
            end = anchor.first_mahadasha_start + years_to_timedelta(elapsed)
            periods.append(build_period(lord, start, end, float(DASHA_YEARS[lord]), 0, depth))
            start = end
    return tuple(periods)


def _first_containing(periods: Sequence[DashaPeriod],
                      moment: datetime) -> Optional[DashaPeriod]:
    for period in periods:
        if period.contains(moment):
            return period
    return None


def find_current_dasha(periods: Sequence[DashaPeriod], on_date: datetime) -> CurrentDasha:
    """
    Mahadasha / Antardasha / Pratyantardasha active on a date.

    When a level has no period containing on_date (the date is outside the
    generated window) the first period of that level is used instead and the
    result is flagged with fallback=True.
    """
    if not periods:
        raise InputValidationError("periods", "no dasha periods to search")
    on_date = _as_utc(on_date)

    chain = []
    fallback = False
    level_periods = periods
    for level in DASHA_LEVELS:
        if not level_periods:
            break
        found = _first_containing(level_periods, on_date)
        if found is None:
            logger.warning("No %s contains %s; falling back to %s starting %s",
                           level, on_date.isoformat(), level_periods[0].planet,
                           level_periods[0].start.isoformat())
            found = level_periods[0]
            fallback = True
        chain.append(found)
        level_periods = found.sub_periods

    if len(chain) < DASHA_DEPTH:
        raise InputValidationError(
            "periods", f"dasha tree has {len(chain)} levels, {DASHA_DEPTH} required")
    return CurrentDasha(on_date, chain[0], chain[1], chain[2], fallback)


def iter_periods(periods: Sequence[DashaPeriod]) -> Iterator[DashaPeriod]:
    """Depth-first walk over every period in the tree."""
    for period in periods:
        yield period
        yield from iter_periods(period.sub_periods)


def compute_vimshottari_dasha(nakshatra: Union[int, str], pada: int, birth: datetime,
                              on_date: Optional[datetime] = None,
                              elapsed_fraction: Optional[float] = None) -> VimshottariDasha:
    """
    Full three-level Vimshottari timetable.

    Args:
        nakshatra: Moon's nakshatra at birth (name or index 0..26)
        pada: Moon's pada 1..4
        birth: Birth instant (timezone-aware, or naive UTC assumed)
        on_date: Reference instant for the current period (omitted: no
                 current period is looked up)
        elapsed_fraction: Optional exact elapsed share of the birth nakshatra
    """
    anchor = dasha_anchor(nakshatra, pada, birth, elapsed_fraction)
    periods = build_mahadashas(anchor)
    current = find_current_dasha(periods, on_date) if on_date is not None else None
    return VimshottariDasha(anchor, periods, current)


def moon_elapsed_fraction(degrees_in_nakshatra: float) -> float:
    """Exact share of the nakshatra already crossed, clamped to [0, 1)."""
    fraction = degrees_in_nakshatra / NAKSHATRA_SPAN
    return min(max(fraction, 0.0), 1.0 - 1e-12)
