"""Pydantic models mirroring the custom worker feeds.

Only the fields the pipeline consumes are modelled; unknown keys are
ignored on validation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .forecast import ScoreHistoryEntry


class CelestialTimes(BaseModel):
    rise: Optional[int] = None  # epoch ms
    set: Optional[int] = None  # epoch ms
    illumination: Optional[float] = None


class MagneticFieldInputs(BaseModel):
    bt: Optional[float] = None
    bz: Optional[float] = None


class ForecastInputs(BaseModel):
    magneticField: Optional[MagneticFieldInputs] = None
    hemisphericPower: Optional[float] = None


class CurrentForecast(BaseModel):
    spotTheAuroraForecast: Optional[float] = None
    lastUpdated: Optional[int] = None
    moon: Optional[CelestialTimes] = None
    sun: Optional[CelestialTimes] = None
    inputs: Optional[ForecastInputs] = None


class HemisphericPowerEntry(BaseModel):
    timestamp: int
    hemisphericPower: float


class ForecastComposite(BaseModel):
    """The composite aurora-forecast worker response."""

    currentForecast: CurrentForecast
    historicalData: List[ScoreHistoryEntry] = []
    rawHistory: List[HemisphericPowerEntry] = []


class Instrument(BaseModel):
    displayName: str


class InterplanetaryShock(BaseModel):
    """A shock event from the DONKI-derived IPS list."""

    activityID: Optional[str] = None
    eventTime: datetime
    instruments: List[Instrument] = []
    location: Optional[str] = None
    link: Optional[str] = None

    @field_validator("eventTime")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ShockReport(BaseModel):
    shocks: List[InterplanetaryShock]
    activeAlert: bool
    latest: Optional[InterplanetaryShock] = None


SIGHTING_STATUSES = ("eye", "phone", "dslr", "cloudy", "nothing")


class Sighting(BaseModel):
    """A crowd-sourced aurora report."""

    lat: float
    lng: float
    status: str  # one of SIGHTING_STATUSES
    name: str
    timestamp: int  # epoch ms


class SightingSubmission(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    status: str
    name: str = Field(..., min_length=1, max_length=80)

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in SIGHTING_STATUSES:
            raise ValueError(f"status must be one of {', '.join(SIGHTING_STATUSES)}")
        return value
