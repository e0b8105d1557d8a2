"""Tests for the latitude-adjusted aurora score."""

import pytest

from nzaurora.forecast.score import (
    GREYMOUTH_LATITUDE,
    compose_score,
    location_adjustment,
    location_blurb,
)


class TestLocationAdjustment:
    def test_no_latitude_means_no_adjustment(self) -> None:
        assert location_adjustment(None) == 0.0

    def test_reference_latitude_is_unadjusted(self) -> None:
        assert location_adjustment(GREYMOUTH_LATITUDE) == 0.0

    def test_south_is_boosted(self) -> None:
        # Oban is about 495 km south: 49 full segments of 10 km
        assert location_adjustment(-46.9) == pytest.approx(9.8)

    def test_north_is_reduced(self) -> None:
        # Auckland is about 623 km north: 62 full segments
        assert location_adjustment(-36.85) == pytest.approx(-12.4)

    def test_partial_segment_does_not_count(self) -> None:
        # about 5.6 km south
        assert location_adjustment(GREYMOUTH_LATITUDE - 0.05) == 0.0


class TestComposeScore:
    """Tests for compose_score."""

    def test_final_is_base_plus_adjustment(self) -> None:
        score = compose_score(30.0, -46.9)
        assert score.final == pytest.approx(39.8)
        assert score.base == 30.0

    def test_clamped_to_percentage(self) -> None:
        assert compose_score(95.0, -46.9).final == 100.0
        assert compose_score(5.0, -36.85).final == 0.0

    def test_unknown_base_has_no_final(self) -> None:
        score = compose_score(None, -46.9)
        assert score.final is None
        assert score.locationAdjustment == pytest.approx(9.8)

    def test_blurb_describes_adjustment(self) -> None:
        assert "south of Greymouth" in location_blurb(-46.9)
        assert "north of Greymouth" in location_blurb(-36.85)
        assert "Greymouth" in compose_score(20.0).blurb
