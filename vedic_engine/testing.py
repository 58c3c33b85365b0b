"""
A fixed set of tropical positions for StaticPositionProvider, so charts can
be built without ephemeris files.

With ayanamsa 0 the sidereal positions equal the table below:

  Sun      70°   Gemini
  Moon     45°   Taurus, Rohini pada 2
  Mars    190°   Libra        (trine to the Sun)
  Mercury  76°   Gemini, retrograde
  Jupiter 250°   Sagittarius
  Venus   100°   Cancer
  Saturn  300°   Aquarius
  Rahu    330°   Pisces       (Ketu 150° Virgo)
"""

from datetime import datetime, timezone

from .core.ephemeris import RawPosition

STATIC_BODIES = {
    "Sun":     RawPosition(longitude=70.0,  speed=0.95),
    "Moon":    RawPosition(longitude=45.0,  speed=13.2),
    "Mars":    RawPosition(longitude=190.0, speed=0.52),
    "Mercury": RawPosition(longitude=76.0,  speed=-0.31),
    "Jupiter": RawPosition(longitude=250.0, speed=0.08),
    "Venus":   RawPosition(longitude=100.0, speed=1.2),
    "Saturn":  RawPosition(longitude=300.0, speed=0.03),
    "Rahu":    RawPosition(longitude=330.0, speed=-0.05),
}

REFERENCE_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
