"""Pydantic models for the CME transit estimator."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class CMEParameters(BaseModel):
    """Launch conditions of a coronal mass ejection."""

    launchTime: datetime
    initialSpeed: float = Field(gt=0)  # km/s
    acceleration: float = 0.0  # km/s^2, negative for drag deceleration
    density: float = Field(default=5.0, ge=0)  # p/cm^3
    angularWidth: float = Field(default=60.0, ge=0, le=360)  # degrees


class CMEMilestone(BaseModel):
    label: str
    timeHours: float
    distanceAU: float
    speed: float  # km/s


class CMEForecast(BaseModel):
    arrival: datetime
    transitHours: float
    finalSpeed: float
    kpEstimate: int
    milestones: List[CMEMilestone]
