"""Tests for the quiet-baseline projector."""

import pytest

from nzaurora.forecast.baseline import (
    MINUTE_MS,
    fit_line,
    project_baseline,
    window_samples,
)
from nzaurora.models import TimeSample


def linear_series(end: int, count: int, step_minutes: int, slope: float, intercept: float):
    """``count`` samples ending at ``end`` on the line ``intercept + slope * minute``."""
    start = end - (count - 1) * step_minutes * MINUTE_MS
    return [
        TimeSample(t=start + i * step_minutes * MINUTE_MS, v=intercept + slope * i * step_minutes)
        for i in range(count)
    ]


class TestFitLine:
    """Tests for the closed-form least-squares fit."""

    def test_recovers_exact_line(self) -> None:
        points = [(x, 3.0 * x - 2.0) for x in range(10)]
        slope, intercept = fit_line(points)
        assert slope == pytest.approx(3.0)
        assert intercept == pytest.approx(-2.0)

    def test_degenerate_x_returns_none(self) -> None:
        """All samples at the same x give a zero denominator."""
        assert fit_line([(5.0, float(v)) for v in range(10)]) is None

    def test_single_point_returns_none(self) -> None:
        assert fit_line([(1.0, 1.0)]) is None


class TestProjectBaseline:
    """Tests for project_baseline."""

    def test_window_excludes_last_five_minutes(self, now_ms) -> None:
        samples = [TimeSample(t=now_ms - m * MINUTE_MS, v=0.0) for m in range(0, 200)]
        window = window_samples(samples, now_ms)
        times = [s.t for s in window]
        assert max(times) == now_ms - 5 * MINUTE_MS
        assert min(times) == now_ms - 185 * MINUTE_MS

    def test_collinear_samples_extrapolate_to_target(self, now_ms) -> None:
        """A perfectly linear trend is continued across the five-minute gap."""
        end = now_ms - 5 * MINUTE_MS
        samples = linear_series(end, count=36, step_minutes=5, slope=0.5, intercept=100.0)
        baseline = project_baseline(samples, now_ms)
        # 5 minutes past the last sample on a 0.5/min trend
        assert baseline == pytest.approx(samples[-1].v + 2.5)

    def test_flat_series_projects_constant(self, now_ms) -> None:
        samples = [TimeSample(t=now_ms - m * MINUTE_MS, v=52000.0) for m in range(5, 60)]
        assert project_baseline(samples, now_ms) == pytest.approx(52000.0)

    def test_nine_points_is_insufficient(self, now_ms) -> None:
        end = now_ms - 10 * MINUTE_MS
        samples = linear_series(end, count=9, step_minutes=5, slope=1.0, intercept=0.0)
        assert project_baseline(samples, now_ms) is None

    def test_ten_points_is_sufficient(self, now_ms) -> None:
        end = now_ms - 10 * MINUTE_MS
        samples = linear_series(end, count=10, step_minutes=5, slope=1.0, intercept=0.0)
        assert project_baseline(samples, now_ms) is not None

    def test_presorted_window_matches_unsorted(self, now_ms) -> None:
        samples = [TimeSample(t=now_ms - m * MINUTE_MS, v=float(m)) for m in range(0, 300)]
        ascending = sorted(samples, key=lambda s: s.t)
        assert window_samples(ascending, now_ms, presorted=True) == window_samples(samples, now_ms)
        assert project_baseline(ascending, now_ms, presorted=True) == pytest.approx(
            project_baseline(samples, now_ms)
        )

    def test_samples_outside_window_are_ignored(self, now_ms) -> None:
        """Samples inside the gap or older than the window do not count."""
        recent = [TimeSample(t=now_ms - m * MINUTE_MS, v=1.0) for m in range(0, 5)]
        old = [TimeSample(t=now_ms - m * MINUTE_MS, v=1.0) for m in range(190, 200)]
        assert project_baseline(recent + old, now_ms) is None
