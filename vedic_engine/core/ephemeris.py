"""
ephemeris.py  —  Planetary positions
====================================
The engine does not compute planetary orbits itself. A *position provider*
turns a Julian Day into raw tropical ecliptic coordinates for the eight
physical points it knows about:

    Sun, Moon, Mars, Mercury, Jupiter, Venus, Saturn, Rahu

Ketu is never asked of a provider. build_planet_positions() always derives it
as Rahu + 180°, carrying Rahu's latitude, distance and speed.

Providers:
  SwissEphemerisProvider  — pyswisseph, configured by an EphemerisConfig
  StaticPositionProvider  — a fixed table (fixtures, tests, replays)
  CachedPositionProvider  — LRU cache in front of any provider

Retrograde is defined as speed < 0, nothing more.
"""

import logging
import os
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol, Tuple, Union

from .errors import EphemerisUnavailableError, InputValidationError
from .zodiac import classify_longitude, format_dms, normalize_longitude

logger = logging.getLogger(__name__)

PLANETS = ["Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu", "Ketu"]
PROVIDED_BODIES = PLANETS[:-1]

AYANAMSA_SYSTEMS = ("lahiri", "raman", "krishnamurti", "fagan_bradley")
BACKENDS = ("swieph", "moseph")
NODE_TYPES = ("true", "mean")


# ── Provider data types ────────────────────────────────────────

@dataclass(frozen=True)
class RawPosition:
    longitude: float            # tropical, degrees
    latitude:  float = 0.0      # degrees
    distance:  float = 0.0      # AU
    speed:     float = 0.0      # degrees/day in longitude


@dataclass(frozen=True)
class EphemerisSnapshot:
    julian_day:  float
    bodies:      Mapping[str, RawPosition]
    ayanamsa:    float = 0.0    # degrees to subtract for sidereal longitudes
    approximate: bool = False
    source:      str = "unknown"


class PositionProvider(Protocol):
    def snapshot(self, jd: float) -> EphemerisSnapshot:
        ...


# ── Configuration ──────────────────────────────────────────────

@dataclass(frozen=True)
class EphemerisConfig:
    """
    Explicit configuration for SwissEphemerisProvider.

    ephe_path       directory with Swiss Ephemeris .se1 files (None = library default)
    backend         "swieph" (data files) or "moseph" (built-in Moshier model)
    ayanamsa        sidereal mode, or None for tropical longitudes
    node            "true" or "mean" lunar node for Rahu
    allow_fallback  accept Moshier results when swieph files are missing and tag
                    the result approximate; otherwise that is an error
    """
    ephe_path:      Optional[str] = None
    backend:        str = "swieph"
    ayanamsa:       Optional[str] = "lahiri"
    node:           str = "true"
    allow_fallback: bool = False

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise InputValidationError("backend", f"{self.backend!r} not in {BACKENDS}")
        if self.ayanamsa is not None and self.ayanamsa not in AYANAMSA_SYSTEMS:
            raise InputValidationError("ayanamsa", f"{self.ayanamsa!r} not in {AYANAMSA_SYSTEMS}")
        if self.node not in NODE_TYPES:
            raise InputValidationError("node", f"{self.node!r} not in {NODE_TYPES}")

    @classmethod
    def from_env(cls) -> "EphemerisConfig":
        """Build a config from EPHE_PATH, EPHEMERIS_BACKEND, AYANAMSA, LUNAR_NODE
        and EPHEMERIS_ALLOW_FALLBACK."""
        ayanamsa = os.getenv("AYANAMSA", "lahiri").strip().lower()
        return cls(
            ephe_path=os.getenv("EPHE_PATH") or None,
            backend=os.getenv("EPHEMERIS_BACKEND", "swieph").strip().lower(),
            ayanamsa=None if ayanamsa in ("", "tropical", "none") else ayanamsa,
            node=os.getenv("LUNAR_NODE", "true").strip().lower(),
            allow_fallback=os.getenv("EPHEMERIS_ALLOW_FALLBACK", "").strip().lower()
                           in ("1", "true", "yes"),
        )


# ── Swiss Ephemeris ────────────────────────────────────────────

# Swiss Ephemeris keeps its search path and sidereal mode in process-global
# state; each provider re-applies its own settings under this lock.
_SWE_LOCK = threading.Lock()


class SwissEphemerisProvider:
    """Positions from the Swiss Ephemeris (pyswisseph)."""

    def __init__(self, config: Optional[EphemerisConfig] = None):
        import swisseph as swe

        self._swe = swe
        self.config = config or EphemerisConfig()
        if self.config.ephe_path and not os.path.isdir(self.config.ephe_path):
            raise EphemerisUnavailableError(
                f"ephemeris path {self.config.ephe_path!r} is not a directory")

        self._codes = {
            "Sun": swe.SUN, "Moon": swe.MOON, "Mars": swe.MARS,
            "Mercury": swe.MERCURY, "Jupiter": swe.JUPITER, "Venus": swe.VENUS,
            "Saturn": swe.SATURN,
            "Rahu": swe.TRUE_NODE if self.config.node == "true" else swe.MEAN_NODE,
        }
        self._sid_modes = {
            "lahiri": swe.SIDM_LAHIRI,
            "raman": swe.SIDM_RAMAN,
            "krishnamurti": swe.SIDM_KRISHNAMURTI,
            "fagan_bradley": swe.SIDM_FAGAN_BRADLEY,
        }
        backend_flag = swe.FLG_MOSEPH if self.config.backend == "moseph" else swe.FLG_SWIEPH
        self._flags = backend_flag | swe.FLG_SPEED

    @property
    def source(self) -> str:
        return f"swisseph-{getattr(self._swe, 'version', 'unknown')}/{self.config.backend}"

    def snapshot(self, jd: float) -> EphemerisSnapshot:
        swe = self._swe
        bodies: Dict[str, RawPosition] = {}
        approximate = False

        with _SWE_LOCK:
            swe.set_ephe_path(self.config.ephe_path)
            for name in PROVIDED_BODIES:
                try:
                    values, retflag = swe.calc_ut(jd, self._codes[name], self._flags)
                except swe.Error as exc:
                    raise EphemerisUnavailableError(f"{name}: {exc}") from exc
                if self.config.backend == "swieph" and not retflag & swe.FLG_SWIEPH:
                    approximate = True
                lon, lat, dist, lon_speed = values[0], values[1], values[2], values[3]
                bodies[name] = RawPosition(
                    longitude=lon % 360.0, latitude=lat, distance=dist, speed=lon_speed)

            ayanamsa = 0.0
            if self.config.ayanamsa:
                swe.set_sid_mode(self._sid_modes[self.config.ayanamsa], 0, 0)
                ayanamsa = swe.get_ayanamsa_ut(jd)

        if approximate:
            if not self.config.allow_fallback:
                raise EphemerisUnavailableError(
                    "Swiss Ephemeris data files not found "
                    f"(ephe_path={self.config.ephe_path!r}); "
                    "set backend='moseph' or allow_fallback=True")
            logger.warning("Swiss Ephemeris files missing at jd=%.5f, using Moshier model", jd)

        return EphemerisSnapshot(
            julian_day=jd,
            bodies=bodies,
            ayanamsa=ayanamsa,
            approximate=approximate,
            source=self.source,
        )


# ── Table-backed provider ──────────────────────────────────────

class StaticPositionProvider:
    """
    Serves the same positions for every Julian Day.

    bodies: {name: RawPosition or plain tropical longitude} for all of
            Sun, Moon, Mars, Mercury, Jupiter, Venus, Saturn, Rahu.
    """

    def __init__(self, bodies: Mapping[str, Union[RawPosition, float]],
                 ayanamsa: float = 0.0, approximate: bool = False):
        if "Ketu" in bodies:
            raise InputValidationError("bodies", "Ketu is always derived from Rahu")
        missing = [name for name in PROVIDED_BODIES if name not in bodies]
        if missing:
            raise InputValidationError("bodies", f"missing positions for {missing}")
        unknown = sorted(set(bodies) - set(PROVIDED_BODIES))
        if unknown:
            raise InputValidationError("bodies", f"unknown bodies {unknown}")

        self._bodies = {
            name: value if isinstance(value, RawPosition) else RawPosition(longitude=float(value))
            for name, value in bodies.items()
        }
        self._ayanamsa = ayanamsa
        self._approximate = approximate

    def snapshot(self, jd: float) -> EphemerisSnapshot:
        return EphemerisSnapshot(
            julian_day=jd,
            bodies=dict(self._bodies),
            ayanamsa=self._ayanamsa,
            approximate=self._approximate,
            source="static",
        )


class CachedPositionProvider:
    """LRU cache of snapshots keyed by Julian Day."""

    def __init__(self, provider: PositionProvider, maxsize: int = 256):
        self._provider = provider
        self._maxsize = maxsize
        self._cache: "OrderedDict[float, EphemerisSnapshot]" = OrderedDict()
        self._lock = threading.Lock()

    def snapshot(self, jd: float) -> EphemerisSnapshot:
        with self._lock:
            if jd in self._cache:
                self._cache.move_to_end(jd)
                return self._cache[jd]
        snap = self._provider.snapshot(jd)
        with self._lock:
            self._cache[jd] = snap
            while len(self._cache) > self._maxsize:
                self._cache.popitem(last=False)
        return snap


# ── Planet positions ───────────────────────────────────────────

@dataclass(frozen=True)
class PlanetPosition:
    name:                 str
    longitude:            float     # sidereal when an ayanamsa is in use
    latitude:             float
    distance:             float
    speed:                float
    is_retrograde:        bool
    sign_index:           int
    sign:                 str
    degree_in_sign:       float
    nakshatra_index:      int
    nakshatra:            str
    nakshatra_pada:       int
    degrees_in_nakshatra: float
    tropical_longitude:   float = field(default=0.0)

    def degree_formatted(self) -> str:
        return format_dms(self.degree_in_sign)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "longitude": round(self.longitude, 6),
            "tropical_longitude": round(self.tropical_longitude, 6),
            "latitude": round(self.latitude, 6),
            "distance": round(self.distance, 8),
            "speed": round(self.speed, 6),
            "is_retrograde": self.is_retrograde,
            "sign": self.sign,
            "degree_in_sign": round(self.degree_in_sign, 6),
            "degree_formatted": self.degree_formatted(),
            "nakshatra": self.nakshatra,
            "nakshatra_pada": self.nakshatra_pada,
            "degrees_in_nakshatra": round(self.degrees_in_nakshatra, 6),
        }


def ketu_from_rahu(rahu: RawPosition) -> RawPosition:
    return RawPosition(
        longitude=normalize_longitude(rahu.longitude + 180.0),
        latitude=rahu.latitude,
        distance=rahu.distance,
        speed=rahu.speed,
    )


def _planet_position(name: str, raw: RawPosition, ayanamsa: float) -> PlanetPosition:
    tropical = normalize_longitude(raw.longitude)
    place = classify_longitude(tropical - ayanamsa)
    return PlanetPosition(
        name=name,
        longitude=place.longitude,
        latitude=raw.latitude,
        distance=raw.distance,
        speed=raw.speed,
        is_retrograde=raw.speed < 0,
        sign_index=place.sign_index,
        sign=place.sign,
        degree_in_sign=place.degree_in_sign,
        nakshatra_index=place.nakshatra_index,
        nakshatra=place.nakshatra,
        nakshatra_pada=place.nakshatra_pada,
        degrees_in_nakshatra=place.degrees_in_nakshatra,
        tropical_longitude=tropical,
    )


def build_planet_positions(snapshot: EphemerisSnapshot) -> Tuple[PlanetPosition, ...]:
    """All nine grahas in PLANETS order, Ketu derived from Rahu."""
    missing = [name for name in PROVIDED_BODIES if name not in snapshot.bodies]
    if missing:
        raise EphemerisUnavailableError(f"provider returned no position for {missing}")

    raw = {name: snapshot.bodies[name] for name in PROVIDED_BODIES}
    raw["Ketu"] = ketu_from_rahu(raw["Rahu"])
    return tuple(_planet_position(name, raw[name], snapshot.ayanamsa) for name in PLANETS)
