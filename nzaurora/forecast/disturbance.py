"""Combine baseline-subtracted magnetometer deviations into one index.

Each station sample is compared with its projected quiet baseline, scaled,
passed through an asymmetric dead zone that damps small positive
readings, clamped, and dropped into a five-minute bucket. Buckets are
combined across stations with a :class:`StationPolicy`; the default
``MIN`` lets the most disturbed station win, so one noisy station can
dominate the index.
"""

from __future__ import annotations

import math
from collections import defaultdict
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from nzaurora.models.disturbance import DisturbanceState
from nzaurora.models.series import StationSeries, TimeSample

from .baseline import BASELINE_WINDOW_MINUTES, MINUTE_MS, project_baseline

SCALE_FACTOR = 100
DISPLAY_DIVISOR = 10
AGGREGATION_MINUTES = 5
CHART_LOOKBACK_HOURS = 24
SLOPE_WINDOW_MINUTES = 20

DEAD_ZONE_LIMIT = 1500.0
DEAD_ZONE_FACTOR = 0.1
DEVIATION_CLAMP = 250_000.0

MIN_STATION_SAMPLES = 10
MIN_BUCKETS = 10

GREYMOUTH = (-42.45, 171.2)


class StationPolicy(str, Enum):
    """How simultaneous readings from several stations are combined."""

    MIN = "min"
    MEAN = "mean"
    WEIGHTED = "weighted"


def compress_deviation(deviation: float) -> float:
    """Apply the positive dead zone, then clamp to the index range."""
    if 0 < deviation < DEAD_ZONE_LIMIT:
        deviation *= DEAD_ZONE_FACTOR
    return max(-DEVIATION_CLAMP, min(DEVIATION_CLAMP, deviation))


def bucket_time(t: int, bucket_minutes: int = AGGREGATION_MINUTES) -> int:
    """Round ``t`` to the nearest bucket boundary (half rounds up)."""
    bucket_ms = bucket_minutes * MINUTE_MS
    return int(math.floor(t / bucket_ms + 0.5)) * bucket_ms


def station_deviations(
    station: StationSeries,
    now: int,
    scale_factor: float = SCALE_FACTOR,
    lookback_hours: int = CHART_LOOKBACK_HOURS,
) -> Optional[List[Tuple[int, float]]]:
    """Return ``(t, compressed deviation)`` pairs for one station.

    Returns ``None`` if the station has fewer than ten samples. Samples
    whose baseline cannot be projected are skipped.
    """
    samples = sorted(station.samples, key=lambda s: s.t)
    if len(samples) < MIN_STATION_SAMPLES:
        return None
    chart_cutoff = now - lookback_hours * 3600 * 1000
    earliest = chart_cutoff - BASELINE_WINDOW_MINUTES * MINUTE_MS
    out = []
    for sample in samples:
        if sample.t < earliest:
            continue
        base = project_baseline(samples, sample.t, presorted=True)
        if base is None:
            continue
        out.append((sample.t, compress_deviation((sample.v - base) * scale_factor)))
    return out


def _distance_km(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    )
    return 2 * 6371.0 * math.asin(math.sqrt(h))


def station_weight(station: StationSeries, reference: Tuple[float, float]) -> float:
    """Inverse-distance weight of a station; 1.0 without coordinates."""
    if station.lat is None or station.lon is None:
        return 1.0
    return 1.0 / max(_distance_km((station.lat, station.lon), reference), 10.0)


def combine_bucket(
    values: Sequence[Tuple[float, float]], policy: StationPolicy
) -> float:
    """Combine ``(value, weight)`` pairs falling in one bucket."""
    if policy == StationPolicy.MEAN:
        return sum(v for v, _ in values) / len(values)
    if policy == StationPolicy.WEIGHTED:
        total = sum(w for _, w in values)
        return sum(v * w for v, w in values) / total
    return min(v for v, _ in values)


def index_slope(points: Sequence[TimeSample], window_minutes: int = SLOPE_WINDOW_MINUTES) -> float:
    """Change per minute between the latest point and the first point of
    the trailing window. Zero when fewer than two points fall in it."""
    if not points:
        return 0.0
    current = points[-1]
    window = [p for p in points if p.t >= current.t - window_minutes * MINUTE_MS]
    if len(window) < 2:
        return 0.0
    first = window[0]
    dt = (current.t - first.t) / MINUTE_MS
    if dt <= 0:
        return 0.0
    return (current.v - first.v) / dt


def aggregate_disturbance(
    stations: Sequence[StationSeries],
    now: int,
    policy: StationPolicy = StationPolicy.MIN,
    reference: Tuple[float, float] = GREYMOUTH,
    scale_factor: float = SCALE_FACTOR,
    display_divisor: float = DISPLAY_DIVISOR,
    bucket_minutes: int = AGGREGATION_MINUTES,
    lookback_hours: int = CHART_LOOKBACK_HOURS,
) -> Optional[DisturbanceState]:
    """Reduce station series to a :class:`DisturbanceState`.

    Returns ``None`` when fewer than ten buckets survive, which the
    caller reports as the ground feed being offline.
    """
    chart_cutoff = now - lookback_hours * 3600 * 1000
    buckets: Dict[int, List[Tuple[float, float]]] = defaultdict(list)
    station_count = 0

    for station in stations:
        deviations = station_deviations(station, now, scale_factor, lookback_hours)
        if deviations is None:
            continue
        station_count += 1
        weight = station_weight(station, reference)
        for t, value in deviations:
            bucket = bucket_time(t, bucket_minutes)
            if bucket < chart_cutoff:
                continue
            buckets[bucket].append((value, weight))

    if len(buckets) < MIN_BUCKETS:
        return None

    points = [
        TimeSample(t=t, v=combine_bucket(values, policy) / display_divisor)
        for t, values in sorted(buckets.items())
    ]
    current = points[-1]
    return DisturbanceState(
        strength=current.v,
        slope=index_slope(points),
        points=points,
        lastUpdated=current.t,
        stationCount=station_count,
    )
