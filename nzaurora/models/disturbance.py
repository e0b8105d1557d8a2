"""Pydantic models for the ground disturbance index and town visibility."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel

from .series import TimeSample

VisibilityTier = Literal["red", "yellow", "green"]


class Town(BaseModel):
    """A reference location, optionally enriched with visibility tiers.

    ``cam``/``phone``/``eye`` are ``None`` when the town is beyond reach
    for that observation mode. ``red`` is marginal, ``green`` comfortable.
    """

    name: str
    lat: float
    lon: float
    cam: Optional[VisibilityTier] = None
    phone: Optional[VisibilityTier] = None
    eye: Optional[VisibilityTier] = None


class DisturbanceState(BaseModel):
    """Combined ground disturbance, recomputed from scratch every poll."""

    strength: float  # display units, negative = disturbed
    slope: float  # display units per minute
    points: List[TimeSample]
    lastUpdated: int
    stationCount: int = 0


class ReachLatitudes(BaseModel):
    """Northernmost latitude reached per observation mode."""

    strength: float
    camera: float
    phone: float
    eye: float


class GroundReport(BaseModel):
    """Disturbance state with per-town tiers and a one-line outlook."""

    state: DisturbanceState
    towns: List[Town]
    reach: ReachLatitudes
    outlook: str
