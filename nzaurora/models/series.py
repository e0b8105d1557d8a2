"""Pydantic models for time-stamped samples parsed from upstream feeds.

All timestamps are integer milliseconds since the Unix epoch, UTC.
Series are ordered by ``t`` ascending and may contain gaps.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class TimeSample(BaseModel):
    """A single immutable ``(t, v)`` observation."""

    model_config = ConfigDict(frozen=True)

    t: int
    v: float


class StationSeries(BaseModel):
    """North-component field samples for one ground magnetometer station."""

    code: str
    seriesKey: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    samples: List[TimeSample]


class PlasmaSample(BaseModel):
    """One row of the NOAA plasma feed."""

    t: int
    speed: Optional[float] = None  # km/s
    density: Optional[float] = None  # p/cm^3


class MagSample(BaseModel):
    """One row of the NOAA interplanetary magnetic field feed (GSM)."""

    t: int
    bt: Optional[float] = None  # nT
    bz: Optional[float] = None  # nT
    by: Optional[float] = None  # nT


class SolarWindSample(BaseModel):
    """Plasma and magnetic-field readings merged on equal timestamps."""

    t: int
    by: Optional[float] = None
    bz: Optional[float] = None
    bt: Optional[float] = None
    speed: Optional[float] = None
    density: Optional[float] = None
