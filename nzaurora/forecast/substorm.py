"""Substorm phase classification.

The classifier is stateless: every refresh re-evaluates the rules from
the current inputs, in priority order, and the first match wins. The
only trailing-window input is the GOES onset detector.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from nzaurora.models.forecast import (
    L1Conditions,
    SubstormForecast,
    SubstormProbabilities,
    SubstormStatus,
)
from nzaurora.models.series import TimeSample

from .baseline import MINUTE_MS
from .coupling import substorm_probabilities

ONSET_LOOKBACK_MINUTES = 15
ONSET_SLOPE_MINUTES = 2
ONSET_SLOPE_NT_PER_MIN = 8.0

P30_ALERT = 0.60
P60_ALERT = 0.60

# status -> (start offset, end offset) in minutes from now, and label
WINDOWS = {
    SubstormStatus.ONSET: (0, 10, "next 10 minutes"),
    SubstormStatus.IMMINENT_30: (0, 30, "next 30 minutes"),
    SubstormStatus.LIKELY_60: (10, 60, "10–60 minutes from now"),
    SubstormStatus.WATCH: (20, 90, "20–90 minutes from now"),
}

ACTIONS = {
    SubstormStatus.ONSET: "Look now, activity is underway.",
    SubstormStatus.IMMINENT_30: "Head outside or to a darker spot now.",
    SubstormStatus.LIKELY_60: "Prepare to go; check the sky within the next hour.",
    SubstormStatus.WATCH: (
        "Energy is building in Earth's magnetic field. "
        "An alert may be issued if conditions escalate."
    ),
    SubstormStatus.QUIET: "Conditions are calm. Low chance of substorm activity for now.",
}
LOCKED_IN_ACTION = (
    "Bz is strongly negative! A substorm is highly likely very soon. Head outside now."
)


def slope_per_minute(series: Sequence[TimeSample], minutes: float = ONSET_SLOPE_MINUTES) -> Optional[float]:
    """Rate of change between the last sample and the latest earlier sample
    at least ``minutes - 0.5`` minutes before it."""
    if len(series) < 2:
        return None
    end = series[-1]
    for sample in reversed(series[:-1]):
        dt = (end.t - sample.t) / MINUTE_MS
        if dt >= minutes - 0.5:
            return (end.v - sample.v) / dt
    return None


def goes_onset(
    satellites: Sequence[Sequence[TimeSample]],
    now: int,
    threshold: float = ONSET_SLOPE_NT_PER_MIN,
) -> bool:
    """True if any satellite's recent Hp slope reaches ``threshold`` nT/min."""
    cutoff = now - ONSET_LOOKBACK_MINUTES * MINUTE_MS
    for series in satellites:
        recent = [s for s in series if s.t >= cutoff and s.v]
        slope = slope_per_minute(recent)
        if slope is not None and slope >= threshold:
            return True
    return False


def classify_status(
    onset: bool,
    locked_in: bool,
    sustained: bool,
    p30: float,
    p60: float,
    aurora_score: Optional[float],
    dphi_now: float = 0.0,
    dphi_mean60: float = 0.0,
) -> SubstormStatus:
    """Pure priority-ordered rule set mapping inputs to a status."""
    score = aurora_score or 0.0
    if onset:
        return SubstormStatus.ONSET
    if locked_in and score >= 25:
        return SubstormStatus.IMMINENT_30
    if sustained and p30 >= P30_ALERT and score >= 25:
        return SubstormStatus.IMMINENT_30
    if sustained and p60 >= P60_ALERT and score >= 20:
        return SubstormStatus.LIKELY_60
    if sustained and dphi_now >= dphi_mean60 and score >= 15:
        return SubstormStatus.WATCH
    return SubstormStatus.QUIET


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def likelihood_percent(probs: SubstormProbabilities) -> int:
    p30 = max(0.0, min(1.0, probs.p30))
    p60 = max(0.0, min(1.0, probs.p60))
    return _round_half_up((0.4 * p30 + 0.6 * p60) * 100)


def action_text(status: SubstormStatus, likelihood: int, locked_in: bool) -> str:
    if status == SubstormStatus.ONSET:
        return ACTIONS[status]
    if status == SubstormStatus.IMMINENT_30:
        return LOCKED_IN_ACTION if locked_in else ACTIONS[status]
    if likelihood >= 65:
        return ACTIONS[SubstormStatus.IMMINENT_30]
    if status == SubstormStatus.LIKELY_60 or likelihood >= 50:
        return ACTIONS[SubstormStatus.LIKELY_60]
    return ACTIONS[status]


def forecast_substorm(
    l1: Optional[L1Conditions],
    onset: bool,
    aurora_score: Optional[float],
    now: int,
) -> SubstormForecast:
    """Build the :class:`SubstormForecast` for this refresh.

    Without L1 data no probabilities can be computed; the result is
    ``QUIET`` with zero likelihood unless GOES shows an onset, which is an
    observation and is reported regardless.
    """
    if l1 is None:
        probs = SubstormProbabilities(p30=0.0, p60=0.0)
        status = SubstormStatus.ONSET if onset else SubstormStatus.QUIET
        likelihood = 0
        locked_in = False
    else:
        probs = substorm_probabilities(l1.dPhiNow, l1.dPhiMean15, l1.bzMean15)
        locked_in = l1.bzLockedIn
        status = classify_status(
            onset,
            locked_in,
            l1.sustained,
            probs.p30,
            probs.p60,
            aurora_score,
            l1.dPhiNow,
            l1.dPhiMean60,
        )
        likelihood = likelihood_percent(probs)

    forecast = SubstormForecast(
        status=status,
        likelihood=likelihood,
        action=action_text(status, likelihood, locked_in),
        p30=probs.p30,
        p60=probs.p60,
    )
    window = WINDOWS.get(status)
    if window is not None:
        start, end, label = window
        forecast.windowLabel = label
        forecast.windowStart = now + start * MINUTE_MS
        forecast.windowEnd = now + end * MINUTE_MS
    return forecast
