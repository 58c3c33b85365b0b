"""
kundali.py
==========
Main Kundali (birth chart) generator.

Orchestrates time conversion, ephemeris, Lagna, houses, aspects, divisional
charts and Vimshottari dasha into one immutable Chart.

Usage:
    from vedic_engine import BirthEvent, EphemerisConfig, SwissEphemerisProvider
    from vedic_engine.tools.kundali import generate_chart

    provider = SwissEphemerisProvider(EphemerisConfig(backend="moseph"))
    chart = generate_chart(
        BirthEvent(year=1990, month=6, day=15, hour=10, minute=30,
                   latitude=28.6139, longitude=77.2090,   # Delhi
                   timezone="Asia/Kolkata"),
        provider,
    )
    chart.to_dict()   # JSON-ready

Any validation or provider failure aborts the whole computation; a partial
chart is never returned.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..core.astro_time import datetime_to_jd, local_sidereal_time, mean_obliquity
from ..core.aspects import Aspect
from ..core.birth import BirthEvent
from ..core.dasha import (
    BALANCE_MODES, CurrentDasha, VimshottariDasha, compute_vimshottari_dasha, moon_elapsed_fraction
)
from ..core.divisional_charts import (
    DIVISIONAL_FUNCTIONS, VargaChart, assemble_primary_chart, compute_varga_chart
)
from ..core.ephemeris import EphemerisSnapshot, PlanetPosition, PositionProvider, build_planet_positions
from ..core.errors import InputValidationError
from ..core.houses import AscendantPosition, House, ascendant_position, check_house_system, occupied_house

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartOptions:
    house_system:  str = "whole_sign"
    divisions:     Tuple[str, ...] = ("D9", "D10")
    dasha_balance: str = "pada"         # or "longitude"

    def __post_init__(self):
        check_house_system(self.house_system)
        for division in self.divisions:
            if division not in DIVISIONAL_FUNCTIONS:
                raise InputValidationError(
                    "divisions", f"unknown divisional chart {division!r}; "
                                 f"supported: {list(DIVISIONAL_FUNCTIONS)}")
        if self.dasha_balance not in BALANCE_MODES:
            raise InputValidationError("dasha_balance",
                                       f"{self.dasha_balance!r} not in {BALANCE_MODES}")


@dataclass(frozen=True)
class Chart:
    birth:              BirthEvent
    julian_day:         float
    local_sidereal_time: float
    obliquity:          float
    ayanamsa:           float
    approximate:        bool
    ephemeris_source:   str
    house_system:       str
    planets:            Tuple[PlanetPosition, ...]
    ascendant:          AscendantPosition
    houses:             Tuple[House, ...]
    aspects:            Tuple[Aspect, ...]
    dasha:              VimshottariDasha
    divisional_charts:  Tuple[VargaChart, ...] = ()

    def planet(self, name: str) -> PlanetPosition:
        for p in self.planets:
            if p.name == name:
                return p
        raise KeyError(name)

    def house_of(self, name: str) -> int:
        return occupied_house(self.houses, name)

    def current_dasha(self, moment: datetime) -> CurrentDasha:
        """Running Mahadasha/Antardasha/Pratyantardasha at ``moment``."""
        return self.dasha.current_at(moment)

    def to_dict(self, dasha_depth: Optional[int] = None) -> dict:
        planets = {}
        for p in self.planets:
            data = p.to_dict()
            data["house"] = self.house_of(p.name)
            planets[p.name] = data

        moon = self.planet("Moon")
        return {
            "meta": {
                "input": self.birth.to_dict(),
                "julian_day": round(self.julian_day, 6),
                "lst_degrees": round(self.local_sidereal_time, 6),
                "obliquity": round(self.obliquity, 6),
                "ayanamsa": round(self.ayanamsa, 6),
                "approximate": self.approximate,
                "ephemeris": self.ephemeris_source,
                "house_system": self.house_system,
            },
            "lagna": self.ascendant.to_dict(),
            "moon_sign": moon.sign,
            "moon_nakshatra": moon.nakshatra,
            "moon_nakshatra_pada": moon.nakshatra_pada,
            "planets": planets,
            "houses": [h.to_dict() for h in self.houses],
            "aspects": [a.to_dict() for a in self.aspects],
            "dasha": self.dasha.to_dict(dasha_depth),
            "divisional_charts": {v.division: v.to_dict() for v in self.divisional_charts},
        }


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------

def _assemble(birth: BirthEvent, jd: float, snapshot: EphemerisSnapshot,
              now: Optional[datetime], options: ChartOptions) -> Chart:
    planets = build_planet_positions(snapshot)
    lagna = ascendant_position(jd, birth.latitude, birth.longitude, snapshot.ayanamsa)
    rasi = assemble_primary_chart(planets, lagna, options.house_system)

    moon = next(p for p in rasi.planets if p.name == "Moon")
    elapsed = None
    if options.dasha_balance == "longitude":
        elapsed = moon_elapsed_fraction(moon.degrees_in_nakshatra)
    dasha = compute_vimshottari_dasha(
        moon.nakshatra_index, moon.nakshatra_pada, birth.utc_datetime(),
        on_date=now,
        elapsed_fraction=elapsed,
    )

    vargas = tuple(compute_varga_chart(planets, lagna, d) for d in options.divisions)

    logger.debug("Chart assembled: jd=%.6f lagna=%s moon=%s/%d first dasha=%s",
                 jd, lagna.sign, moon.nakshatra, moon.nakshatra_pada,
                 dasha.periods[0].planet)

    return Chart(
        birth=birth,
        julian_day=jd,
        local_sidereal_time=local_sidereal_time(jd, birth.longitude),
        obliquity=mean_obliquity(jd),
        ayanamsa=snapshot.ayanamsa,
        approximate=snapshot.approximate,
        ephemeris_source=snapshot.source,
        house_system=options.house_system,
        planets=rasi.planets,
        ascendant=lagna,
        houses=rasi.houses,
        aspects=rasi.aspects,
        dasha=dasha,
        divisional_charts=vargas,
    )


def generate_chart(birth: BirthEvent, provider: PositionProvider,
                   now: Optional[datetime] = None,
                   options: Optional[ChartOptions] = None) -> Chart:
    """
    Generate a complete Kundali (birth chart).

    Args:
        birth: Validated birth event
        provider: Source of raw planetary positions
        now: Reference instant for the current dasha (omitted: none is set;
             see Chart.current_dasha)
        options: House system, divisional charts, dasha balance mode

    Returns:
        Immutable Chart
    """
    options = options or ChartOptions()
    jd = datetime_to_jd(birth.utc_datetime())
    return _assemble(birth, jd, provider.snapshot(jd), now, options)


async def generate_chart_async(birth: BirthEvent, provider: PositionProvider,
                               now: Optional[datetime] = None,
                               options: Optional[ChartOptions] = None) -> Chart:
    """generate_chart with the ephemeris lookup moved off the event loop."""
    options = options or ChartOptions()
    jd = datetime_to_jd(birth.utc_datetime())
    snapshot = await asyncio.to_thread(provider.snapshot, jd)
    return _assemble(birth, jd, snapshot, now, options)
