"""Model exports."""

from .cme import CMEForecast, CMEMilestone, CMEParameters
from .disturbance import DisturbanceState, GroundReport, ReachLatitudes, Town
from .feeds import (
    ForecastComposite,
    InterplanetaryShock,
    ShockReport,
    Sighting,
    SightingSubmission,
)
from .forecast import (
    ActivitySummary,
    AuroraScore,
    GaugePanel,
    GaugeReading,
    L1Conditions,
    ScoreHistoryEntry,
    SubstormEvent,
    SubstormForecast,
    SubstormProbabilities,
    SubstormStatus,
)
from .series import MagSample, PlasmaSample, SolarWindSample, StationSeries, TimeSample

__all__ = [
    "TimeSample",
    "StationSeries",
    "PlasmaSample",
    "MagSample",
    "SolarWindSample",
    "Town",
    "DisturbanceState",
    "ReachLatitudes",
    "GroundReport",
    "SubstormStatus",
    "L1Conditions",
    "SubstormProbabilities",
    "SubstormForecast",
    "AuroraScore",
    "ScoreHistoryEntry",
    "SubstormEvent",
    "ActivitySummary",
    "GaugeReading",
    "GaugePanel",
    "CMEParameters",
    "CMEMilestone",
    "CMEForecast",
    "ForecastComposite",
    "InterplanetaryShock",
    "ShockReport",
    "Sighting",
    "SightingSubmission",
]
