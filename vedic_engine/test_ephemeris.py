"""
Position providers and sidereal planet positions.

Swiss Ephemeris tests use the built-in Moshier model (no data files) and are
skipped when pyswisseph is not installed.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from vedic_engine.testing import STATIC_BODIES
from vedic_engine.core.astro_time import J2000
from vedic_engine.core.ephemeris import (
    PLANETS, CachedPositionProvider, EphemerisConfig, EphemerisSnapshot, RawPosition,
    StaticPositionProvider, SwissEphemerisProvider, build_planet_positions, ketu_from_rahu,
)
from vedic_engine.core.errors import EphemerisUnavailableError, InputValidationError

PLANET_TOLERANCE_DEG = 0.1
AYANAMSA_TOLERANCE = 0.05


# ---------------------------------------------------------------------------
# Static provider and derived positions
# ---------------------------------------------------------------------------

def test_nine_grahas_in_order(static_provider):
    planets = build_planet_positions(static_provider.snapshot(J2000))
    assert [p.name for p in planets] == PLANETS


@pytest.mark.parametrize("rahu, ketu", [(330.0, 150.0), (100.0, 280.0), (180.0, 0.0)])
def test_ketu_opposes_rahu(rahu, ketu):
    assert ketu_from_rahu(RawPosition(longitude=rahu)).longitude == pytest.approx(ketu)


def test_ketu_shares_rahu_motion(static_provider):
    planets = {p.name: p for p in build_planet_positions(static_provider.snapshot(J2000))}
    assert planets["Ketu"].longitude == pytest.approx(150.0)
    assert planets["Ketu"].sign == "Virgo"
    assert planets["Ketu"].speed == planets["Rahu"].speed
    assert planets["Rahu"].is_retrograde and planets["Ketu"].is_retrograde


def test_retrograde_flag(static_provider):
    planets = {p.name: p for p in build_planet_positions(static_provider.snapshot(J2000))}
    assert planets["Mercury"].is_retrograde
    assert not planets["Sun"].is_retrograde


def test_ayanamsa_is_subtracted():
    provider = StaticPositionProvider({**STATIC_BODIES, "Sun": 10.0}, ayanamsa=24.0)
    sun = build_planet_positions(provider.snapshot(J2000))[0]
    assert sun.longitude == pytest.approx(346.0)
    assert sun.tropical_longitude == pytest.approx(10.0)
    assert sun.sign == "Pisces"


def test_planet_to_dict_has_formatted_degree(static_provider):
    moon = build_planet_positions(static_provider.snapshot(J2000))[1]
    data = moon.to_dict()
    assert data["sign"] == "Taurus"
    assert data["nakshatra"] == "Rohini"
    assert data["nakshatra_pada"] == 2
    assert data["degree_formatted"] == "15°0'0.0\""


def test_static_provider_rejects_ketu():
    with pytest.raises(InputValidationError):
        StaticPositionProvider({**STATIC_BODIES, "Ketu": 150.0})


def test_static_provider_rejects_missing_and_unknown():
    partial = dict(STATIC_BODIES)
    del partial["Saturn"]
    with pytest.raises(InputValidationError):
        StaticPositionProvider(partial)
    with pytest.raises(InputValidationError):
        StaticPositionProvider({**STATIC_BODIES, "Pluto": 10.0})


def test_missing_body_in_snapshot_is_an_error():
    snapshot = EphemerisSnapshot(julian_day=J2000, bodies={"Sun": RawPosition(10.0)})
    with pytest.raises(EphemerisUnavailableError):
        build_planet_positions(snapshot)


class CountingProvider:
    def __init__(self, inner):
        self.inner = inner
        self.calls = 0
        self.lock = threading.Lock()

    def snapshot(self, jd):
        with self.lock:
            self.calls += 1
        return self.inner.snapshot(jd)


def test_cache_reuses_snapshots(static_provider):
    counting = CountingProvider(static_provider)
    cached = CachedPositionProvider(counting, maxsize=2)
    first = cached.snapshot(J2000)
    assert cached.snapshot(J2000) is first
    assert counting.calls == 1

    cached.snapshot(J2000 + 1)
    cached.snapshot(J2000 + 2)      # evicts J2000
    cached.snapshot(J2000)
    assert counting.calls == 4


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_config_validation():
    with pytest.raises(InputValidationError):
        EphemerisConfig(backend="jpl")
    with pytest.raises(InputValidationError):
        EphemerisConfig(ayanamsa="yukteshwar_typo")
    with pytest.raises(InputValidationError):
        EphemerisConfig(node="osculating")


def test_config_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("EPHE_PATH", str(tmp_path))
    monkeypatch.setenv("EPHEMERIS_BACKEND", "MOSEPH")
    monkeypatch.setenv("AYANAMSA", "tropical")
    monkeypatch.setenv("LUNAR_NODE", "mean")
    monkeypatch.setenv("EPHEMERIS_ALLOW_FALLBACK", "yes")
    config = EphemerisConfig.from_env()
    assert config == EphemerisConfig(ephe_path=str(tmp_path), backend="moseph",
                                     ayanamsa=None, node="mean", allow_fallback=True)


def test_config_from_env_defaults(monkeypatch):
    for name in ("EPHE_PATH", "EPHEMERIS_BACKEND", "AYANAMSA", "LUNAR_NODE",
                 "EPHEMERIS_ALLOW_FALLBACK"):
        monkeypatch.delenv(name, raising=False)
    assert EphemerisConfig.from_env() == EphemerisConfig()


# ---------------------------------------------------------------------------
# Swiss Ephemeris
# ---------------------------------------------------------------------------

def test_swisseph_moshier_positions():
    pytest.importorskip("swisseph")
    provider = SwissEphemerisProvider(EphemerisConfig(backend="moseph", ayanamsa="lahiri"))
    snap = provider.snapshot(J2000)

    assert not snap.approximate
    assert set(snap.bodies) == set(PLANETS[:-1])
    assert snap.bodies["Sun"].longitude == pytest.approx(280.37, abs=PLANET_TOLERANCE_DEG)
    assert snap.ayanamsa == pytest.approx(23.853, abs=AYANAMSA_TOLERANCE)

    sun = build_planet_positions(snap)[0]
    assert sun.sign == "Sagittarius"


def test_swisseph_tropical_has_no_ayanamsa():
    pytest.importorskip("swisseph")
    provider = SwissEphemerisProvider(EphemerisConfig(backend="moseph", ayanamsa=None))
    snap = provider.snapshot(J2000)
    assert snap.ayanamsa == 0.0
    assert build_planet_positions(snap)[0].sign == "Capricorn"


def test_swisseph_bad_path_is_rejected(tmp_path):
    pytest.importorskip("swisseph")
    with pytest.raises(EphemerisUnavailableError):
        SwissEphemerisProvider(EphemerisConfig(ephe_path=str(tmp_path / "missing")))


def test_swisseph_missing_files(tmp_path):
    pytest.importorskip("swisseph")
    strict = SwissEphemerisProvider(EphemerisConfig(ephe_path=str(tmp_path)))
    with pytest.raises(EphemerisUnavailableError):
        strict.snapshot(J2000)

    lenient = SwissEphemerisProvider(EphemerisConfig(ephe_path=str(tmp_path), allow_fallback=True))
    snap = lenient.snapshot(J2000)
    assert snap.approximate
    assert snap.bodies["Sun"].longitude == pytest.approx(280.37, abs=PLANET_TOLERANCE_DEG)


def test_swisseph_settings_do_not_leak_between_threads():
    pytest.importorskip("swisseph")
    lahiri = SwissEphemerisProvider(EphemerisConfig(backend="moseph", ayanamsa="lahiri"))
    raman = SwissEphemerisProvider(EphemerisConfig(backend="moseph", ayanamsa="raman"))
    expected = {id(p): p.snapshot(J2000).ayanamsa for p in (lahiri, raman)}
    assert expected[id(lahiri)] != expected[id(raman)]

    providers = [lahiri, raman] * 20
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda p: (id(p), p.snapshot(J2000).ayanamsa), providers))
    for key, ayanamsa in results:
        assert ayanamsa == expected[key]
