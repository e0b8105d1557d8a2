"""Pydantic models for the aurora score and substorm forecast."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel


class SubstormStatus(str, Enum):
    """Discrete substorm phase, from calm to underway."""

    QUIET = "QUIET"
    WATCH = "WATCH"
    LIKELY_60 = "LIKELY_60"
    IMMINENT_30 = "IMMINENT_30"
    ONSET = "ONSET"


class L1Conditions(BaseModel):
    """Coupling and IMF statistics derived from the recent solar wind."""

    dPhiSeries: List[float]
    bzSeries: List[float]
    dPhiNow: float
    dPhiMean15: float
    dPhiMean60: float
    bzMean15: float
    sustained: bool
    bzLockedIn: bool


class SubstormProbabilities(BaseModel):
    p30: float
    p60: float


class SubstormForecast(BaseModel):
    """Classifier output for the current refresh."""

    status: SubstormStatus = SubstormStatus.QUIET
    likelihood: int = 0
    windowLabel: str = "No forecast window"
    action: str = "Conditions are calm. Low chance of substorm activity for now."
    p30: float = 0.0
    p60: float = 0.0
    windowStart: Optional[int] = None  # epoch ms
    windowEnd: Optional[int] = None  # epoch ms


class AuroraScore(BaseModel):
    """Server-supplied score adjusted for the viewer's latitude.

    ``final`` is ``None`` until the server score has been loaded; callers
    must treat that as "no forecast yet", not zero.
    """

    base: Optional[float] = None
    locationAdjustment: float = 0.0
    final: Optional[float] = None
    blurb: Optional[str] = None


class ScoreHistoryEntry(BaseModel):
    timestamp: int
    baseScore: float
    finalScore: float


class SubstormEvent(BaseModel):
    """A run of strongly southward Bz lasting at least fifteen minutes."""

    start: int
    end: int


class ActivitySummary(BaseModel):
    highestScore: Optional[ScoreHistoryEntry] = None
    substormEvents: List[SubstormEvent]


class GaugeReading(BaseModel):
    """Colour band and fill level for one dashboard gauge."""

    value: Optional[float] = None
    color: str  # "gray", "yellow", "orange", "red", "purple", "pink"
    percentage: float


class GaugePanel(BaseModel):
    gauges: Dict[str, GaugeReading]
