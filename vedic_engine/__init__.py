"""
Vedic Engine
============
Vedic birth-chart and Vimshottari Dasha computation engine.

Quick start:
    from vedic_engine import BirthEvent, EphemerisConfig, SwissEphemerisProvider, generate_chart

    chart = generate_chart(
        BirthEvent(year=1990, month=6, day=15, hour=10, minute=30, second=0,
                   latitude=28.6139, longitude=77.2090, timezone="Asia/Kolkata"),
        SwissEphemerisProvider(EphemerisConfig(backend="moseph")),
    )
"""

from .core.birth import BirthEvent
from .core.errors import KundaliError, InputValidationError, EphemerisUnavailableError
from .core.ephemeris import (
    EphemerisConfig, SwissEphemerisProvider, StaticPositionProvider,
    CachedPositionProvider, RawPosition,
)
from .tools.kundali import Chart, ChartOptions, generate_chart, generate_chart_async

__version__ = "1.0.0"
__all__ = [
    "BirthEvent",
    "KundaliError", "InputValidationError", "EphemerisUnavailableError",
    "EphemerisConfig", "SwissEphemerisProvider", "StaticPositionProvider",
    "CachedPositionProvider", "RawPosition",
    "Chart", "ChartOptions", "generate_chart", "generate_chart_async",
]
