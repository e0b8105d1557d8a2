"""Quiet-baseline projection for ground magnetometer series.

The baseline at time ``T`` is an ordinary least-squares line fitted to the
samples in a trailing window that ends five minutes before ``T``, then
evaluated at ``T``. The fit is the closed-form OLS with no outlier
rejection, so a spike inside the window biases the baseline.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import List, Optional, Sequence, Tuple

from nzaurora.models.series import TimeSample

MINUTE_MS = 60_000

BASELINE_WINDOW_MINUTES = 180
BASELINE_GAP_MINUTES = 5
MIN_BASELINE_POINTS = 10


def fit_line(points: Sequence[Tuple[float, float]]) -> Optional[Tuple[float, float]]:
    """Return ``(slope, intercept)`` of the OLS line through ``points``.

    Returns ``None`` when the denominator ``n*Sxx - Sx^2`` is zero, i.e.
    every x is identical.
    """
    n = len(points)
    if n < 2:
        return None
    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for x, y in points:
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_xx += x * x
    denom = n * sum_xx - sum_x * sum_x
    if abs(denom) < 1e-12:
        return None
    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def window_samples(
    samples: Sequence[TimeSample],
    target_time: int,
    window_minutes: int = BASELINE_WINDOW_MINUTES,
    gap_minutes: int = BASELINE_GAP_MINUTES,
    presorted: bool = False,
) -> List[TimeSample]:
    """Samples with ``T - gap - window <= t <= T - gap``, in ascending order.

    Pass ``presorted=True`` when ``samples`` is already ascending by time
    to skip the sort; the window is then located by bisection.
    """
    if not presorted:
        samples = sorted(samples, key=lambda s: s.t)
    start = target_time - (window_minutes + gap_minutes) * MINUTE_MS
    end = target_time - gap_minutes * MINUTE_MS
    lo = bisect_left(samples, start, key=lambda s: s.t)
    hi = bisect_right(samples, end, key=lambda s: s.t)
    return list(samples[lo:hi])


def project_baseline(
    samples: Sequence[TimeSample],
    target_time: int,
    window_minutes: int = BASELINE_WINDOW_MINUTES,
    gap_minutes: int = BASELINE_GAP_MINUTES,
    min_points: int = MIN_BASELINE_POINTS,
    presorted: bool = False,
) -> Optional[float]:
    """Predict the quiet baseline value at ``target_time``.

    ``x`` is measured in minutes from the window start (``T - gap - window``).
    Returns ``None`` with fewer than ``min_points`` samples in the window
    or a degenerate fit.
    """
    window = window_samples(samples, target_time, window_minutes, gap_minutes, presorted)
    if len(window) < min_points:
        return None
    start = target_time - (window_minutes + gap_minutes) * MINUTE_MS
    fit = fit_line([((s.t - start) / MINUTE_MS, s.v) for s in window])
    if fit is None:
        return None
    slope, intercept = fit
    target_x = (target_time - start) / MINUTE_MS
    return slope * target_x + intercept
