"""
Vedic Chart API — FastAPI Backend
=================================
Endpoints:
  POST /api/kundali  — Birth chart + Vimshottari dasha
  POST /api/dasha    — Vimshottari dasha timetable only
  GET  /api/health   — Health check

Ephemeris settings come from the environment (see EphemerisConfig.from_env):
  EPHE_PATH, EPHEMERIS_BACKEND, AYANAMSA, LUNAR_NODE, EPHEMERIS_ALLOW_FALLBACK
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from vedic_engine import (
    BirthEvent, ChartOptions, EphemerisConfig, CachedPositionProvider,
    SwissEphemerisProvider, generate_chart_async,
)
from vedic_engine.core.birth import MAX_YEAR, MIN_YEAR
from vedic_engine.core.ephemeris import PositionProvider
from vedic_engine.core.errors import EphemerisUnavailableError, InputValidationError

VERSION = "1.0.0"


# ── Request Models ─────────────────────────────────────────────

class BirthData(BaseModel):
    year:            int   = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    month:           int   = Field(..., ge=1,    le=12)
    day:             int   = Field(..., ge=1,    le=31)
    hour:            int   = Field(12,  ge=0,    le=23)
    minute:          int   = Field(0,   ge=0,    le=59)
    second:          int   = Field(0,   ge=0,    le=59)
    timezone:        str   = Field("UTC", description="IANA name or offset such as +05:30")
    latitude:        float = Field(..., ge=-90,  le=90)
    longitude:       float = Field(..., ge=-180, le=180)
    house_system:    str   = Field("whole_sign", pattern="^whole_sign$")
    dasha_balance:   str   = Field("pada", pattern="^(pada|longitude)$")
    divisions:       List[str] = Field(default_factory=lambda: ["D9", "D10"])
    on_date:         Optional[str] = Field(None,
                          description="Reference date YYYY-MM-DD for the current dasha; "
                                      "without it no current dasha is reported")

    def to_birth_event(self) -> BirthEvent:
        return BirthEvent(
            year=self.year, month=self.month, day=self.day,
            hour=self.hour, minute=self.minute, second=self.second,
            latitude=self.latitude, longitude=self.longitude,
            timezone=self.timezone,
        )

    def to_options(self) -> ChartOptions:
        return ChartOptions(
            house_system=self.house_system,
            divisions=tuple(self.divisions),
            dasha_balance=self.dasha_balance,
        )


class DashaRequest(BirthData):
    depth: int = Field(3, ge=1, le=3, description="Levels of sub-periods to return")


# ── Utilities ──────────────────────────────────────────────────

def _parse_date(date_str: Optional[str]) -> Optional[datetime]:
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        raise InputValidationError("on_date", f"{date_str!r} is not YYYY-MM-DD") from None


@lru_cache(maxsize=1)
def default_provider() -> PositionProvider:
    return CachedPositionProvider(SwissEphemerisProvider(EphemerisConfig.from_env()))


def _validation_detail(exc: InputValidationError) -> dict:
    return {"field": exc.field, "message": exc.message}


# ── App ────────────────────────────────────────────────────────

def create_app(provider: Optional[PositionProvider] = None) -> FastAPI:
    app = FastAPI(
        title="Vedic Chart API",
        version=VERSION,
        description="Vedic birth chart and Vimshottari dasha engine",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def _chart(data: BirthData):
        try:
            return await generate_chart_async(
                data.to_birth_event(), provider or default_provider(),
                now=_parse_date(data.on_date),
                options=data.to_options(),
            )
        except InputValidationError as e:
            raise HTTPException(status_code=422, detail=_validation_detail(e))
        except EphemerisUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))

    @app.get("/api/health")
    def health():
        return {
            "status": "ok",
            "service": "Vedic Chart API",
            "version": VERSION,
            "endpoints": [
                "POST /api/kundali",
                "POST /api/dasha",
            ],
        }

    @app.post("/api/kundali")
    async def kundali_endpoint(data: BirthData):
        chart = await _chart(data)
        return {"success": True, "chart": chart.to_dict()}

    @app.post("/api/dasha")
    async def dasha_endpoint(data: DashaRequest):
        chart = await _chart(data)
        moon = chart.planet("Moon")
        return {
            "success": True,
            "moon": {"nakshatra": moon.nakshatra, "pada": moon.nakshatra_pada},
            "dasha": chart.dasha.to_dict(depth=data.depth),
        }

    return app


app = create_app()
