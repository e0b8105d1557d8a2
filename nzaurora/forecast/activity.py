"""Dashboard-level summaries: activity recap, gauges and outlook text."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from nzaurora.models.forecast import (
    ActivitySummary,
    GaugeReading,
    ScoreHistoryEntry,
    SubstormEvent,
)
from nzaurora.models.series import MagSample

from .baseline import MINUTE_MS
from .coupling import L1_DISTANCE_KM

EVENT_BZ = -5.0
EVENT_MIN_MINUTES = 15

COLOR_ORDER = ("pink", "purple", "red", "orange", "yellow")

GAUGE_THRESHOLDS: Dict[str, Dict[str, float]] = {
    "speed": {"yellow": 350, "orange": 500, "red": 650, "purple": 800, "pink": float("inf"), "max": 1000},
    "density": {"yellow": 10, "orange": 15, "red": 20, "purple": 50, "pink": float("inf"), "max": 70},
    "power": {"yellow": 40, "orange": 70, "red": 150, "purple": 200, "pink": float("inf"), "max": 250},
    "bt": {"yellow": 10, "orange": 15, "red": 20, "purple": 50, "pink": float("inf"), "max": 60},
    "bz": {"yellow": -10, "orange": -15, "red": -20, "purple": -50, "pink": -50, "max": 60},
}


def substorm_events(mag: Sequence[MagSample], min_minutes: int = EVENT_MIN_MINUTES) -> List[SubstormEvent]:
    """Runs of consecutive ``Bz <= -5`` samples lasting ``min_minutes`` or more."""
    events = []
    start: Optional[int] = None
    end: Optional[int] = None
    for sample in mag:
        south = sample.bz is not None and sample.bz <= EVENT_BZ
        if south:
            if start is None:
                start = sample.t
            end = sample.t
        elif start is not None:
            if end - start >= min_minutes * MINUTE_MS:
                events.append(SubstormEvent(start=start, end=end))
            start = end = None
    if start is not None and end - start >= min_minutes * MINUTE_MS:
        events.append(SubstormEvent(start=start, end=end))
    return events


def activity_summary(
    history: Sequence[ScoreHistoryEntry], mag: Sequence[MagSample]
) -> Optional[ActivitySummary]:
    """Highest score of the period and the strong-Bz events; ``None``
    without both a score history and magnetic data."""
    if not history or not mag:
        return None
    highest = max(history, key=lambda e: e.finalScore)
    return ActivitySummary(highestScore=highest, substormEvents=substorm_events(mag))


def gauge_reading(value: Optional[float], kind: str) -> GaugeReading:
    """Colour band and fill percentage for one gauge.

    Bz thresholds are negative and compared with ``<=``; the rest use
    ``>=``. Missing values read as gray and empty.
    """
    if value is None:
        return GaugeReading(value=None, color="gray", percentage=0.0)
    thresholds = GAUGE_THRESHOLDS[kind]
    color = "gray"
    for key in COLOR_ORDER:
        limit = thresholds[key]
        hit = value <= limit if kind == "bz" else value >= limit
        if hit:
            color = key
            break
    percentage = max(0.0, min(100.0, abs(value) / thresholds["max"] * 100))
    return GaugeReading(value=value, color=color, percentage=percentage)


def outlook_text(bz: float, speed: float, strength: float) -> str:
    """One-line outlook from the latest L1 wind and the ground index."""
    delay = round(L1_DISTANCE_KM / speed / 60) if speed > 0 else 60
    if bz < -15 and speed > 500:
        return f"WARNING: Severe shock (Bz {bz:g}, {speed:g}km/s). Major impact in {delay} mins."
    if bz < -10:
        return f"Incoming: Strong negative field (Bz {bz:g}). Intensification in {delay} mins."
    if bz < -5:
        return f"Watch: Favorable wind (Bz {bz:g}). Substorm building, arrival ~{delay} mins."
    if strength < -20:
        return "Ground: Active conditions detected."
    return "Quiet: Currently quiet."
