"""Forecast service: polled feed state and the outputs derived from it.

Each polling loop refreshes its own slice of state. Outputs are derived
on request from whatever each slice last held, so loops never wait on one
another. A failed fetch leaves the previous slice in place; results that
arrive after :meth:`ForecastService.close` are discarded.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from nzaurora.adapters import (
    ForecastWorkerAdapter,
    NoaaAdapter,
    SightingsAdapter,
    TildeAdapter,
)
from nzaurora.cache import TTLCache
from nzaurora.config import Settings
from nzaurora.forecast import (
    activity_summary,
    aggregate_disturbance,
    classify_towns,
    compose_score,
    forecast_substorm,
    gauge_reading,
    goes_onset,
    l1_conditions,
    merge_solar_wind,
    outlook_text,
    reach_latitudes,
)
from nzaurora.middleware.logging import log_info, log_warning
from nzaurora.models import (
    ActivitySummary,
    AuroraScore,
    DisturbanceState,
    ForecastComposite,
    GaugePanel,
    GroundReport,
    InterplanetaryShock,
    MagSample,
    PlasmaSample,
    ShockReport,
    Sighting,
    SightingSubmission,
    StationSeries,
    SubstormForecast,
    TimeSample,
)
from nzaurora.scheduler import PollingScheduler

SHOCK_ALERT_WINDOW = timedelta(hours=3)


def now_ms() -> int:
    return int(time.time() * 1000)


class ForecastService:
    """Owns the adapters, the latest feed data and the derived forecasts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        tilde: Optional[TildeAdapter] = None,
        noaa: Optional[NoaaAdapter] = None,
        worker: Optional[ForecastWorkerAdapter] = None,
        sightings: Optional[SightingsAdapter] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.settings = settings or Settings()
        self.cache = TTLCache(ttl=self.settings.cache_ttl)
        timeout = self.settings.http_timeout
        self.tilde = tilde or TildeAdapter(self.settings.tilde_base, cache=self.cache, timeout=timeout)
        self.noaa = noaa or NoaaAdapter(self.settings.noaa_base, timeout=timeout)
        self.worker = worker or ForecastWorkerAdapter(
            self.settings.forecast_url, self.settings.ips_url, timeout=timeout
        )
        self.sightings_adapter = sightings or SightingsAdapter(self.settings.sightings_url, timeout=timeout)
        self.clock = clock
        self.closed = False

        self.composite: Optional[ForecastComposite] = None
        self.plasma: List[PlasmaSample] = []
        self.mag: List[MagSample] = []
        self.goes: Dict[str, List[TimeSample]] = {"goes18": [], "goes19": []}
        self.stations: List[StationSeries] = []
        self.disturbance: Optional[DisturbanceState] = None
        self.shocks: List[InterplanetaryShock] = []
        self.sightings: List[Sighting] = []

    # -- refresh loops ------------------------------------------------------

    def _commit(self, name: str, **values) -> bool:
        if self.closed:
            log_info("refresh_discarded", loop=name)
            return False
        for key, value in values.items():
            setattr(self, key, value)
        return True

    async def refresh_forecast(self) -> None:
        """Composite score, L1 solar wind and the shock list."""
        composite, plasma, mag, shocks = await asyncio.gather(
            self.worker.fetch_composite(),
            self.noaa.fetch_plasma(),
            self.noaa.fetch_mag(),
            self.worker.fetch_shocks(),
        )
        updates = {}
        if composite is not None:
            updates["composite"] = composite
        if plasma is not None:
            updates["plasma"] = plasma
        if mag is not None:
            updates["mag"] = mag
        if shocks is not None:
            updates["shocks"] = shocks
        if len(updates) < 4:
            log_warning("forecast_refresh_partial", updated=sorted(updates))
        if self._commit("forecast", **updates):
            log_info(
                "forecast_refreshed",
                score=self.base_score,
                plasma=len(self.plasma),
                mag=len(self.mag),
                shocks=len(self.shocks),
            )

    async def refresh_goes(self) -> None:
        goes18, goes19 = await asyncio.gather(
            self.noaa.fetch_goes("goes18"), self.noaa.fetch_goes("goes19")
        )
        goes = dict(self.goes)
        if goes18 is not None:
            goes["goes18"] = goes18
        if goes19 is not None:
            goes["goes19"] = goes19
        if self._commit("goes", goes=goes):
            log_info("goes_refreshed", **{k: len(v) for k, v in goes.items()})

    async def refresh_ground(self) -> None:
        stations = await self.tilde.fetch_all()
        if stations is None:
            log_warning("ground_refresh_failed")
            return
        state = aggregate_disturbance(stations, self.clock(), policy=self.settings.station_policy)
        if state is None:
            log_warning("ground_insufficient_data", stations=len(stations))
        if self._commit("ground", stations=stations, disturbance=state):
            log_info(
                "ground_refreshed",
                stations=len(stations),
                strength=state.strength if state else None,
            )

    async def refresh_sightings(self) -> None:
        sightings = await self.sightings_adapter.fetch_sightings()
        if sightings is not None and self._commit("sightings", sightings=sightings):
            log_info("sightings_refreshed", count=len(sightings))

    async def submit_sighting(self, submission: SightingSubmission) -> Optional[str]:
        key = await self.sightings_adapter.submit(submission)
        if key is not None:
            await self.refresh_sightings()
        return key

    def build_scheduler(self) -> PollingScheduler:
        scheduler = PollingScheduler()
        scheduler.add("forecast", self.settings.forecast_interval, self.refresh_forecast)
        scheduler.add("goes", self.settings.goes_interval, self.refresh_goes)
        scheduler.add("ground", self.settings.ground_interval, self.refresh_ground)
        scheduler.add("sightings", self.settings.sightings_interval, self.refresh_sightings)
        return scheduler

    def close(self) -> None:
        self.closed = True

    # -- derived outputs ----------------------------------------------------

    @property
    def base_score(self) -> Optional[float]:
        if self.composite is None:
            return None
        return self.composite.currentForecast.spotTheAuroraForecast

    def aurora_score(self, lat: Optional[float] = None) -> AuroraScore:
        return compose_score(self.base_score, lat)

    def substorm_forecast(self, now: Optional[int] = None) -> SubstormForecast:
        now = self.clock() if now is None else now
        l1 = l1_conditions(merge_solar_wind(self.plasma, self.mag), now)
        onset = goes_onset(list(self.goes.values()), now)
        return forecast_substorm(l1, onset, self.base_score, now)

    def ground_report(self) -> Optional[GroundReport]:
        """Disturbance with town tiers, or ``None`` while the ground feed is offline."""
        state = self.disturbance
        if state is None:
            return None
        latest_bz = next((m.bz for m in reversed(self.mag) if m.bz is not None), 0.0)
        latest_speed = next((p.speed for p in reversed(self.plasma) if p.speed is not None), 0.0)
        return GroundReport(
            state=state,
            towns=classify_towns(state.strength),
            reach=reach_latitudes(state.strength),
            outlook=outlook_text(latest_bz, latest_speed, state.strength),
        )

    def activity_summary(self) -> Optional[ActivitySummary]:
        history = self.composite.historicalData if self.composite else []
        return activity_summary(history, self.mag)

    def gauges(self) -> GaugePanel:
        plasma = self.plasma[-1] if self.plasma else None
        mag = self.mag[-1] if self.mag else None
        inputs = self.composite.currentForecast.inputs if self.composite else None
        power = inputs.hemisphericPower if inputs else None
        return GaugePanel(
            gauges={
                "speed": gauge_reading(plasma.speed if plasma else None, "speed"),
                "density": gauge_reading(plasma.density if plasma else None, "density"),
                "power": gauge_reading(power, "power"),
                "bt": gauge_reading(mag.bt if mag else None, "bt"),
                "bz": gauge_reading(mag.bz if mag else None, "bz"),
            }
        )

    def shock_report(self, now: Optional[datetime] = None) -> ShockReport:
        now = now or datetime.fromtimestamp(self.clock() / 1000, tz=timezone.utc)
        latest = self.shocks[0] if self.shocks else None
        active = latest is not None and now - latest.eventTime <= SHOCK_ALERT_WINDOW
        return ShockReport(shocks=self.shocks, activeAlert=active, latest=latest)

    def is_daylight(self, now: Optional[int] = None) -> bool:
        now = self.clock() if now is None else now
        sun = self.composite.currentForecast.sun if self.composite else None
        if sun is None or sun.rise is None or sun.set is None:
            return False
        return sun.rise < now < sun.set
