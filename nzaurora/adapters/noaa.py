"""Adapter for NOAA SWPC solar wind and GOES magnetometer feeds."""

from __future__ import annotations

from typing import List, Optional

import httpx

from nzaurora.models.series import MagSample, PlasmaSample, TimeSample

from .base import JsonFeedAdapter
from .parsing import parse_goes, parse_mag, parse_plasma


class NoaaAdapter(JsonFeedAdapter):
    """Real-time solar wind (DSCOVR/ACE at L1) and GOES Hp data."""

    feed = "noaa"

    def __init__(
        self,
        base_url: str = "https://services.swpc.noaa.gov",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.base_url = base_url.rstrip("/")
        self.endpoints = {
            "plasma": f"{self.base_url}/products/solar-wind/plasma-1-day.json",
            "mag": f"{self.base_url}/products/solar-wind/mag-1-day.json",
            "goes18": f"{self.base_url}/json/goes/primary/magnetometers-1-day.json",
            "goes19": f"{self.base_url}/json/goes/secondary/magnetometers-1-day.json",
        }

    async def fetch_plasma(self) -> Optional[List[PlasmaSample]]:
        raw = await self._get_json(self.endpoints["plasma"])
        if raw is None:
            return None
        return parse_plasma(raw) or None

    async def fetch_mag(self) -> Optional[List[MagSample]]:
        raw = await self._get_json(self.endpoints["mag"])
        if raw is None:
            return None
        return parse_mag(raw) or None

    async def fetch_goes(self, satellite: str) -> Optional[List[TimeSample]]:
        """Hp series for ``goes18`` (primary) or ``goes19`` (secondary)."""
        raw = await self._get_json(self.endpoints[satellite])
        if raw is None:
            return None
        return parse_goes(raw)
