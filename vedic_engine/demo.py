"""
demo.py
=======
Demonstration of the Vedic Engine.
Run: python -m vedic_engine.demo

Generates a full birth chart for a sample birth with the built-in Moshier
ephemeris (no data files needed) and prints a formatted report.
"""

import logging
from datetime import datetime, timezone

from vedic_engine import (
    BirthEvent, ChartOptions, EphemerisConfig, SwissEphemerisProvider, generate_chart
)


def print_section(title: str):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def format_planet_table(planets: dict) -> str:
    lines = [f"{'Planet':<12} {'Sign':<14} {'Degree':<12} {'Nakshatra':<22} {'Pada':<5} {'House':<6}"]
    lines.append("─" * 75)
    for name, p in planets.items():
        retro = " ℞" if p.get("is_retrograde") else "  "
        lines.append(
            f"{name:<12} {p['sign']:<14} {p['degree_formatted']:<12} "
            f"{p['nakshatra']:<22} {p['nakshatra_pada']:<5} H{p['house']}"
            f"{retro}"
        )
    return "\n".join(lines)


def run_demo():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("   VEDIC ENGINE — SAMPLE BIRTH CHART")
    print("=" * 60)

    birth = BirthEvent(
        year=1990, month=6, day=15, hour=10, minute=30, second=0,
        latitude=28.6139, longitude=77.2090,     # Delhi
        timezone="Asia/Kolkata",
    )
    provider = SwissEphemerisProvider(EphemerisConfig(backend="moseph", ayanamsa="lahiri"))

    print(f"\n  Birth Date  : {birth.year}-{birth.month:02d}-{birth.day:02d}")
    print(f"  Birth Time  : {birth.hour:02d}:{birth.minute:02d} ({birth.timezone})")
    print(f"  Location    : Delhi, India ({birth.latitude}°N, {birth.longitude}°E)")
    print(f"  UTC         : {birth.utc_datetime().isoformat()}")

    chart = generate_chart(
        birth, provider,
        now=datetime.now(timezone.utc),
        options=ChartOptions(divisions=("D9", "D10", "D60")),
    ).to_dict(dasha_depth=2)
    meta = chart["meta"]

    print_section("EPHEMERIS")
    print(f"  Source      : {meta['ephemeris']}")
    print(f"  Julian Day  : {meta['julian_day']}")
    print(f"  Ayanamsa    : {meta['ayanamsa']:.4f}°")
    print(f"  Obliquity   : {meta['obliquity']:.4f}°")

    print_section("LAGNA (ASCENDANT)")
    lagna = chart["lagna"]
    print(f"  Sign        : {lagna['sign']}")
    print(f"  Degree      : {lagna['degree_formatted']}")
    print(f"  Nakshatra   : {lagna['nakshatra']} (Pada {lagna['nakshatra_pada']})")

    print_section("RASI CHART — PLANET POSITIONS")
    print(format_planet_table(chart["planets"]))

    print_section("MOON SIGN & NAKSHATRA")
    print(f"  Rasi (Sign)   : {chart['moon_sign']}")
    print(f"  Nakshatra     : {chart['moon_nakshatra']} (Pada {chart['moon_nakshatra_pada']})")

    print_section("HOUSES (WHOLE SIGN)")
    for h in chart["houses"]:
        occupants = ", ".join(h["planets"]) or "—"
        print(f"  H{h['house']:<3} {h['sign']:<14} {occupants}")

    print_section("ASPECTS")
    for a in chart["aspects"]:
        print(f"  {a['from_planet']:<9} {a['type']:<12} {a['to_planet']:<9} "
              f"{a['angle']:>8.2f}°  (orb {a['orb']:.2f}°)")

    print_section("VIMSHOTTARI DASHA")
    dasha = chart["dasha"]
    anchor = dasha["anchor"]
    print(f"  Birth lord    : {anchor['starting_planet']} "
          f"(balance {anchor['balance_years']:.2f} years)")
    current = dasha["current"]
    print(f"  Current       : {current['mahadasha']['planet']} / "
          f"{current['antardasha']['planet']} / {current['pratyantardasha']['planet']}")
    print()
    for md in dasha["periods"][:9]:
        print(f"  {md['planet']:<9} {md['start'][:10]} → {md['end'][:10]}  ({md['years']:g} yrs)")

    for division, varga in chart["divisional_charts"].items():
        print_section(f"{division} CHART")
        print(f"  Lagna       : {varga['lagna']['sign']}")
        for name, p in varga["planets"].items():
            print(f"  {name:<9} {p['sign']:<14} H{p['house']}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    run_demo()
