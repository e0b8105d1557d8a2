"""Tests for the CME transit estimator."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from nzaurora.forecast.cme import AU_KM, kp_estimate, predict_arrival, transit_seconds
from nzaurora.models import CMEParameters

LAUNCH = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


class TestTransitSeconds:
    def test_constant_velocity(self) -> None:
        assert transit_seconds(1000.0, 0.0) == pytest.approx(AU_KM / 1000.0)

    def test_acceleration_shortens_transit(self) -> None:
        assert transit_seconds(800.0, 0.002) < transit_seconds(800.0, 0.0)

    def test_deceleration_lengthens_transit(self) -> None:
        assert transit_seconds(800.0, -0.001) > transit_seconds(800.0, 0.0)

    def test_stalling_cme_falls_back_to_constant_velocity(self) -> None:
        """A negative discriminant never produces a negative or NaN time."""
        seconds = transit_seconds(500.0, -0.001)
        assert seconds == pytest.approx(AU_KM / 500.0)
        assert seconds > 0


class TestPredictArrival:
    """Tests for predict_arrival."""

    def test_arrival_time(self) -> None:
        forecast = predict_arrival(CMEParameters(launchTime=LAUNCH, initialSpeed=1000.0))
        assert forecast.transitHours == pytest.approx(AU_KM / 1000.0 / 3600)
        assert forecast.arrival == LAUNCH + timedelta(seconds=AU_KM / 1000.0)
        assert forecast.finalSpeed == pytest.approx(1000.0)

    def test_milestones(self) -> None:
        forecast = predict_arrival(
            CMEParameters(launchTime=LAUNCH, initialSpeed=900.0, acceleration=-0.0005)
        )
        labels = [m.label for m in forecast.milestones]
        assert labels == ["0% distance", "25% distance", "50% distance", "75% distance", "Arrival"]
        assert forecast.milestones[-1].timeHours == pytest.approx(forecast.transitHours)
        speeds = [m.speed for m in forecast.milestones]
        assert speeds == sorted(speeds, reverse=True)

    def test_milestones_sit_at_their_distance(self) -> None:
        """Under deceleration each milestone time matches its share of 1 AU."""
        v0, a = 500.0, -0.0008
        forecast = predict_arrival(CMEParameters(launchTime=LAUNCH, initialSpeed=v0, acceleration=a))
        for milestone in forecast.milestones:
            t = milestone.timeHours * 3600
            travelled = v0 * t + 0.5 * a * t * t
            assert travelled / AU_KM == pytest.approx(milestone.distanceAU, abs=1e-6)
            assert milestone.speed == pytest.approx(v0 + a * t)

    def test_stalled_cme_keeps_launch_speed(self) -> None:
        forecast = predict_arrival(
            CMEParameters(launchTime=LAUNCH, initialSpeed=500.0, acceleration=-0.001)
        )
        assert forecast.finalSpeed == pytest.approx(500.0)
        assert forecast.transitHours > 0

    def test_kp_estimate_bounds(self) -> None:
        slow = CMEParameters(launchTime=LAUNCH, initialSpeed=100.0, density=0.0, angularWidth=0.0, acceleration=0.01)
        fast = CMEParameters(launchTime=LAUNCH, initialSpeed=3000.0, density=50.0, angularWidth=360.0)
        assert kp_estimate(slow) == 1
        assert kp_estimate(fast) == 9
        assert kp_estimate(CMEParameters(launchTime=LAUNCH, initialSpeed=1000.0)) == 6

    def test_speed_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            CMEParameters(launchTime=LAUNCH, initialSpeed=0.0)
