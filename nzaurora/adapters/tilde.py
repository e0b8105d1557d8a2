"""Adapter for GeoNet Tilde ground magnetometer data.

Stations are discovered through the ``dataSummary`` endpoint, which lists
every station/sensor/series/method/aspect combination in the ``geomag``
domain. The summary changes rarely and is kept in the injected
:class:`~nzaurora.cache.TTLCache`.
"""

from __future__ import annotations

import asyncio
from typing import List, NamedTuple, Optional

import httpx

from nzaurora.cache import TTLCache
from nzaurora.middleware.logging import log_info, log_warning
from nzaurora.models.series import StationSeries

from .base import JsonFeedAdapter
from .parsing import _to_float, parse_tilde_series, select_north_series_key

DOMAIN = "geomag"
AGGREGATION_PARAMS = {"aggregationPeriod": "5m", "aggregationFunction": "mean"}
SUMMARY_CACHE_KEY = "tilde_stations"


class StationRef(NamedTuple):
    code: str
    series_key: str
    lat: Optional[float] = None
    lon: Optional[float] = None


def stations_from_summary(summary: object, domain: str = DOMAIN) -> List[StationRef]:
    """Stations of a ``dataSummary`` response that expose a north series."""
    if not isinstance(summary, dict):
        return []
    stations = ((summary.get("domain") or {}).get(domain) or {}).get("stations")
    if not isinstance(stations, dict):
        return []
    refs = []
    for code, data in stations.items():
        key = select_north_series_key(code, data)
        if key is None:
            continue
        lat = lon = None
        if isinstance(data, dict):
            lat = _to_float(data.get("latitude"))
            lon = _to_float(data.get("longitude"))
        refs.append(StationRef(code=code, series_key=key, lat=lat, lon=lon))
    return refs


class TildeAdapter(JsonFeedAdapter):
    """Fetches north-component series for every geomag station."""

    feed = "tilde"

    def __init__(
        self,
        base_url: str = "https://tilde.geonet.org.nz/v4",
        cache: Optional[TTLCache] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else TTLCache(ttl=3600)

    async def discover_stations(self) -> List[StationRef]:
        cached = self.cache.get(SUMMARY_CACHE_KEY)
        if cached is not None:
            return cached
        summary = await self._get_json(f"{self.base_url}/dataSummary/{DOMAIN}")
        refs = stations_from_summary(summary)
        if refs:
            self.cache.set(SUMMARY_CACHE_KEY, refs)
            log_info("tilde_stations_discovered", stations=[r.code for r in refs])
        else:
            log_warning("tilde_no_stations")
        return refs

    async def fetch_station(self, ref: StationRef) -> Optional[StationSeries]:
        raw = await self._get_json(
            f"{self.base_url}/data/{DOMAIN}/{ref.series_key}/latest/2d",
            params=AGGREGATION_PARAMS,
        )
        if raw is None:
            return None
        return StationSeries(
            code=ref.code,
            seriesKey=ref.series_key,
            lat=ref.lat,
            lon=ref.lon,
            samples=parse_tilde_series(raw),
        )

    async def fetch_all(self) -> Optional[List[StationSeries]]:
        """Series for every discovered station, or ``None`` when no station
        could be discovered or fetched."""
        refs = await self.discover_stations()
        if not refs:
            return None
        results = await asyncio.gather(*(self.fetch_station(ref) for ref in refs))
        series = [s for s in results if s is not None]
        return series or None
