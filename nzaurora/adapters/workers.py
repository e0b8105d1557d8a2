"""Adapters for the aurora-forecast and sightings workers."""

from __future__ import annotations

from typing import List, Optional

import httpx

from nzaurora.middleware.logging import log_info
from nzaurora.models.feeds import (
    ForecastComposite,
    InterplanetaryShock,
    Sighting,
    SightingSubmission,
)

from .base import JsonFeedAdapter
from .parsing import parse_forecast_composite, parse_shocks, parse_sightings


class ForecastWorkerAdapter(JsonFeedAdapter):
    """Composite aurora score feed and the interplanetary shock list."""

    feed = "forecast_worker"

    def __init__(
        self,
        forecast_url: str,
        ips_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.forecast_url = forecast_url
        self.ips_url = ips_url

    async def fetch_composite(self) -> Optional[ForecastComposite]:
        raw = await self._get_json(self.forecast_url)
        if raw is None:
            return None
        return parse_forecast_composite(raw)

    async def fetch_shocks(self) -> Optional[List[InterplanetaryShock]]:
        raw = await self._get_json(self.ips_url)
        if raw is None:
            return None
        return parse_shocks(raw)


class SightingsAdapter(JsonFeedAdapter):
    """Reads and submits crowd-sourced aurora sightings."""

    feed = "sightings"

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.url = url

    async def fetch_sightings(self) -> Optional[List[Sighting]]:
        raw = await self._get_json(self.url)
        if raw is None:
            return None
        return parse_sightings(raw)

    async def submit(self, submission: SightingSubmission) -> Optional[str]:
        """Post a sighting and return the key assigned by the worker."""
        raw = await self._post_json(self.url, submission.model_dump())
        if not isinstance(raw, dict) or not raw.get("key"):
            return None
        log_info("sighting_submitted", status=submission.status, key=raw["key"])
        return str(raw["key"])
