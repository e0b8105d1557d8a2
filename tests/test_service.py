"""Tests for the forecast service refresh loops and derived outputs."""

from datetime import datetime, timezone

import pytest

from nzaurora.models import SightingSubmission, SubstormStatus


async def refresh_all(service) -> None:
    await service.refresh_forecast()
    await service.refresh_goes()
    await service.refresh_ground()
    await service.refresh_sightings()


class TestRefresh:
    """Each loop commits its own slice of state."""

    @pytest.mark.anyio
    async def test_refresh_populates_state(self, service) -> None:
        await refresh_all(service)
        assert service.base_score == pytest.approx(30.0)
        assert len(service.plasma) == 15
        assert len(service.mag) == 15
        assert len(service.goes["goes18"]) == 15
        assert service.disturbance.stationCount == 1
        assert service.shocks[0].location == "Earth"
        assert service.sightings[0].name == "Aroha"

    @pytest.mark.anyio
    async def test_failed_fetch_keeps_previous_state(self, service, feed_server) -> None:
        await refresh_all(service)
        feed_server.routes.clear()
        await refresh_all(service)
        assert service.base_score == pytest.approx(30.0)
        assert len(service.mag) == 15
        assert service.disturbance is not None
        assert len(service.sightings) == 1

    @pytest.mark.anyio
    async def test_results_after_close_are_discarded(self, service) -> None:
        service.close()
        await refresh_all(service)
        assert service.composite is None
        assert service.disturbance is None
        assert service.sightings == []

    def test_scheduler_has_four_loops(self, service) -> None:
        names = sorted(t.name for t in service.build_scheduler().tasks)
        assert names == ["forecast", "goes", "ground", "sightings"]


class TestDerivedOutputs:
    """Outputs derived from the refreshed state."""

    @pytest.mark.anyio
    async def test_score_for_viewer(self, service) -> None:
        await refresh_all(service)
        score = service.aurora_score(-46.9)
        assert score.final == pytest.approx(39.8)

    def test_score_before_first_load(self, service) -> None:
        assert service.aurora_score().final is None

    @pytest.mark.anyio
    async def test_substorm_forecast(self, service, now_ms) -> None:
        await refresh_all(service)
        forecast = service.substorm_forecast()
        assert forecast.status == SubstormStatus.IMMINENT_30
        assert forecast.windowEnd == now_ms + 30 * 60_000

    def test_substorm_forecast_without_data(self, service) -> None:
        forecast = service.substorm_forecast()
        assert forecast.status == SubstormStatus.QUIET
        assert forecast.likelihood == 0

    @pytest.mark.anyio
    async def test_ground_report(self, service) -> None:
        await refresh_all(service)
        report = service.ground_report()
        assert report.state.strength == pytest.approx(-1200.0)
        towns = {t.name: t for t in report.towns}
        assert towns["Dunedin"].eye == "green"
        assert report.reach.camera >= report.reach.eye
        assert report.outlook.startswith("Incoming")

    def test_ground_report_offline(self, service) -> None:
        assert service.ground_report() is None

    @pytest.mark.anyio
    async def test_gauges(self, service) -> None:
        await refresh_all(service)
        gauges = service.gauges().gauges
        assert gauges["speed"].color == "orange"
        assert gauges["density"].color == "gray"
        assert gauges["power"].color == "orange"
        assert gauges["bz"].color == "yellow"

    @pytest.mark.anyio
    async def test_activity_summary(self, service) -> None:
        await refresh_all(service)
        summary = service.activity_summary()
        assert summary.highestScore.finalScore == 31

    @pytest.mark.anyio
    async def test_shock_alert_window(self, service) -> None:
        await refresh_all(service)
        assert service.shock_report().activeAlert
        later = datetime(2024, 5, 10, 14, 0, tzinfo=timezone.utc)
        assert not service.shock_report(now=later).activeAlert

    @pytest.mark.anyio
    async def test_daylight(self, service, now_ms) -> None:
        await refresh_all(service)
        assert not service.is_daylight()
        assert service.is_daylight(now_ms - 2 * 3_600_000)

    def test_daylight_without_sun_times(self, service) -> None:
        assert not service.is_daylight()

    @pytest.mark.anyio
    async def test_submit_sighting_refreshes_list(self, service, feed_server) -> None:
        submission = SightingSubmission(lat=-45.0, lng=170.0, status="dslr", name="Tama")
        key = await service.submit_sighting(submission)
        assert key == "sighting-1"
        assert len(feed_server.posted) == 1
        assert service.sightings[0].name == "Aroha"
