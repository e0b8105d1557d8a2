"""Forecast-derivation pipeline: pure functions from samples to forecasts."""

from .activity import activity_summary, gauge_reading, outlook_text
from .baseline import project_baseline
from .cme import predict_arrival
from .coupling import (
    l1_conditions,
    merge_solar_wind,
    newell_coupling,
    propagation_delay_ms,
    substorm_probabilities,
    sustained_south,
)
from .disturbance import StationPolicy, aggregate_disturbance
from .reach import NZ_TOWNS, ViewMode, classify_towns, reach_latitude, reach_latitudes
from .score import compose_score, location_adjustment
from .substorm import classify_status, forecast_substorm, goes_onset

__all__ = [
    "project_baseline",
    "StationPolicy",
    "aggregate_disturbance",
    "NZ_TOWNS",
    "ViewMode",
    "reach_latitude",
    "reach_latitudes",
    "classify_towns",
    "newell_coupling",
    "propagation_delay_ms",
    "sustained_south",
    "substorm_probabilities",
    "merge_solar_wind",
    "l1_conditions",
    "goes_onset",
    "classify_status",
    "forecast_substorm",
    "compose_score",
    "location_adjustment",
    "predict_arrival",
    "activity_summary",
    "gauge_reading",
    "outlook_text",
]
