"""Service configuration read from environment variables."""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel

from nzaurora.forecast.disturbance import StationPolicy

DEFAULT_FORECAST_URL = "https://spottheaurora.thenamesrock.workers.dev/"


class Settings(BaseModel):
    """Upstream endpoints, polling intervals and tunables."""

    api_key: Optional[str] = None
    tilde_base: str = "https://tilde.geonet.org.nz/v4"
    noaa_base: str = "https://services.swpc.noaa.gov"
    forecast_url: str = DEFAULT_FORECAST_URL
    ips_url: str = DEFAULT_FORECAST_URL + "ips"
    sightings_url: str = "https://aurora-sightings.thenamesrock.workers.dev/"
    http_timeout: float = 10.0
    forecast_interval: float = 60.0
    goes_interval: float = 60.0
    ground_interval: float = 60.0
    sightings_interval: float = 120.0
    station_policy: StationPolicy = StationPolicy.MIN
    cache_ttl: float = 3600.0


def load_settings() -> Settings:
    """Build :class:`Settings` from ``NZAURORA_*`` environment variables."""
    env = {
        "api_key": os.getenv("NZAURORA_API_KEY"),
        "tilde_base": os.getenv("NZAURORA_TILDE_BASE"),
        "noaa_base": os.getenv("NZAURORA_NOAA_BASE"),
        "forecast_url": os.getenv("NZAURORA_FORECAST_URL"),
        "ips_url": os.getenv("NZAURORA_IPS_URL"),
        "sightings_url": os.getenv("NZAURORA_SIGHTINGS_URL"),
        "http_timeout": os.getenv("NZAURORA_HTTP_TIMEOUT"),
        "forecast_interval": os.getenv("NZAURORA_FORECAST_INTERVAL"),
        "goes_interval": os.getenv("NZAURORA_GOES_INTERVAL"),
        "ground_interval": os.getenv("NZAURORA_GROUND_INTERVAL"),
        "sightings_interval": os.getenv("NZAURORA_SIGHTINGS_INTERVAL"),
        "station_policy": os.getenv("NZAURORA_STATION_POLICY"),
        "cache_ttl": os.getenv("NZAURORA_CACHE_TTL"),
    }
    values = {k: v for k, v in env.items() if v not in (None, "")}
    # The IPS list lives under the forecast worker unless overridden.
    if "forecast_url" in values and "ips_url" not in values:
        values["ips_url"] = values["forecast_url"].rstrip("/") + "/ips"
    return Settings(**values)
