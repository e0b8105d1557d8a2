"""Tests for the geographic reach model and town classification."""

import pytest

from nzaurora.forecast.reach import (
    AUCKLAND_LAT,
    CURVES,
    NO_REACH_LAT,
    NORTH_LIMIT,
    NZ_TOWNS,
    OBAN_LAT,
    SOUTH_LIMIT,
    ViewMode,
    classify_towns,
    reach_latitude,
    reach_latitudes,
    town_tier,
)


class TestReachLatitude:
    """Tests for reach_latitude."""

    @pytest.mark.parametrize("strength", [0.0, 10.0, 500.0])
    def test_no_disturbance_is_far_south(self, strength) -> None:
        for mode in ViewMode:
            assert reach_latitude(strength, mode) == NO_REACH_LAT

    def test_anchors(self) -> None:
        assert reach_latitude(-300.0, ViewMode.CAMERA) == pytest.approx(OBAN_LAT)
        assert reach_latitude(-1000.0, ViewMode.CAMERA) == pytest.approx(AUCKLAND_LAT)
        assert reach_latitude(-1500.0, ViewMode.EYE) == pytest.approx(AUCKLAND_LAT)

    def test_clamped_to_mainland_band(self) -> None:
        assert reach_latitude(-1.0, ViewMode.EYE) == SOUTH_LIMIT
        assert reach_latitude(-100000.0, ViewMode.CAMERA) == NORTH_LIMIT

    def test_stronger_disturbance_reaches_further_north(self) -> None:
        strengths = [-200.0, -400.0, -600.0, -900.0, -1200.0, -1600.0]
        for mode in ViewMode:
            lats = [reach_latitude(s, mode) for s in strengths]
            assert lats == sorted(lats)

    def test_camera_reaches_at_least_as_far_as_eye(self) -> None:
        for strength in range(-2000, 0, 50):
            reach = reach_latitudes(float(strength))
            assert reach.camera >= reach.phone >= reach.eye


class TestTownTier:
    """Tests for per-town visibility tiers."""

    def test_green_with_comfortable_excess(self) -> None:
        # eye requires about -932 at -45 degrees
        assert town_tier(-45.0, -1200.0, ViewMode.EYE) == "green"

    def test_red_when_marginal(self) -> None:
        assert town_tier(-45.0, -960.0, ViewMode.EYE) == "red"

    def test_yellow_margin_depends_on_mode(self) -> None:
        # excess of about 108 is green for eye but yellow for camera
        assert town_tier(-45.0, -1040.0, ViewMode.EYE) == "green"
        required_camera = -300.0 + (-45.0 - OBAN_LAT) * (-700.0 / (AUCKLAND_LAT - OBAN_LAT))
        assert town_tier(-45.0, required_camera - 108.0, ViewMode.CAMERA) == "yellow"

    @pytest.mark.parametrize(
        "excess, tier",
        [(49.999, "red"), (50.0, "yellow"), (99.999, "yellow"), (100.0, "green"), (100.001, "green")],
    )
    def test_eye_margin_boundaries(self, excess, tier) -> None:
        required = CURVES[ViewMode.EYE].required_at(-45.0)
        assert town_tier(-45.0, required - excess, ViewMode.EYE) == tier

    @pytest.mark.parametrize("mode", [ViewMode.CAMERA, ViewMode.PHONE])
    @pytest.mark.parametrize("excess, tier", [(149.999, "yellow"), (150.0, "green")])
    def test_camera_and_phone_margin_boundary(self, mode, excess, tier) -> None:
        required = CURVES[mode].required_at(-45.0)
        assert town_tier(-45.0, required - excess, mode) == tier

    def test_out_of_reach_has_no_tier(self) -> None:
        assert town_tier(-45.0, -900.0, ViewMode.EYE) is None

    def test_positive_strength_has_no_tier(self) -> None:
        assert town_tier(-46.9, 100.0, ViewMode.CAMERA) is None


class TestClassifyTowns:
    def test_returns_copies(self) -> None:
        towns = classify_towns(-1500.0)
        assert len(towns) == len(NZ_TOWNS)
        assert all(t.cam is None for t in NZ_TOWNS)
        assert any(t.cam is not None for t in towns)

    def test_southern_towns_light_up_first(self) -> None:
        towns = {t.name: t for t in classify_towns(-500.0)}
        assert towns["Oban"].cam is not None
        assert towns["Auckland"].cam is None

    def test_quiet_conditions_show_nothing(self) -> None:
        towns = classify_towns(0.0)
        assert all(t.cam is None and t.phone is None and t.eye is None for t in towns)
