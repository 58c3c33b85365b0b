# Vedic Engine - Core modules
from .astro_time import gregorian_to_jd, datetime_to_jd, local_sidereal_time, mean_obliquity
from .birth import BirthEvent
from .errors import KundaliError, InputValidationError, EphemerisUnavailableError
from .zodiac import classify_longitude, sign_of, nakshatra_of
from .ephemeris import (
    EphemerisConfig, SwissEphemerisProvider, StaticPositionProvider,
    CachedPositionProvider, RawPosition, build_planet_positions,
)
from .houses import ascendant_position, whole_sign_houses
from .aspects import find_aspects
from .dasha import compute_vimshottari_dasha, find_current_dasha
from .divisional_charts import assemble_primary_chart, compute_varga_chart

__all__ = [
    "gregorian_to_jd", "datetime_to_jd", "local_sidereal_time", "mean_obliquity",
    "BirthEvent",
    "KundaliError", "InputValidationError", "EphemerisUnavailableError",
    "classify_longitude", "sign_of", "nakshatra_of",
    "EphemerisConfig", "SwissEphemerisProvider", "StaticPositionProvider",
    "CachedPositionProvider", "RawPosition", "build_planet_positions",
    "ascendant_position", "whole_sign_houses",
    "find_aspects",
    "compute_vimshottari_dasha", "find_current_dasha",
    "assemble_primary_chart", "compute_varga_chart",
]
