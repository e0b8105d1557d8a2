"""Adapter exports."""

from .noaa import NoaaAdapter
from .tilde import StationRef, TildeAdapter
from .workers import ForecastWorkerAdapter, SightingsAdapter

__all__ = [
    "NoaaAdapter",
    "TildeAdapter",
    "StationRef",
    "ForecastWorkerAdapter",
    "SightingsAdapter",
]
