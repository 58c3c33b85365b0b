"""
Shared fixtures. Chart tests run on the fixed positions in
vedic_engine/testing.py and do not depend on ephemeris files.
"""

import pytest

from vedic_engine.core.birth import BirthEvent
from vedic_engine.core.ephemeris import StaticPositionProvider
from vedic_engine.testing import STATIC_BODIES


@pytest.fixture
def static_provider():
    return StaticPositionProvider(STATIC_BODIES)


@pytest.fixture
def delhi_birth():
    return BirthEvent(year=1990, month=6, day=15, hour=10, minute=30,
                      latitude=28.6139, longitude=77.2090, timezone="Asia/Kolkata")
