"""Shared fixtures for the nzaurora test suite."""

from datetime import datetime, timezone

import httpx
import pytest

from nzaurora.adapters import (
    ForecastWorkerAdapter,
    NoaaAdapter,
    SightingsAdapter,
    TildeAdapter,
)
from nzaurora.cache import TTLCache
from nzaurora.config import Settings
from nzaurora.service import ForecastService

# 2024-05-10 12:00:00 UTC, aligned to a five-minute boundary
NOW_MS = 1_715_342_400_000
MINUTE_MS = 60_000

TILDE = "https://tilde.test/v4"
SWPC = "https://swpc.test"
WORKER = "https://worker.test/"
SIGHTINGS = "https://sightings.test/"


def _iso(t: int) -> str:
    return datetime.fromtimestamp(t / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S.000")


def _feed_routes(now: int) -> dict:
    """Upstream payloads describing a strongly disturbed evening."""
    minutes = [now - m * MINUTE_MS for m in range(14, -1, -1)]
    tilde_rows = [
        {"ts": _iso(now - m * MINUTE_MS), "val": 52000.0} for m in range(300, 0, -5)
    ] + [{"ts": _iso(now), "val": 52000.0 - 120.0}]
    return {
        "/v4/dataSummary/geomag": {
            "domain": {
                "geomag": {
                    "stations": {
                        "EYWM": {
                            "latitude": -43.47,
                            "longitude": 172.39,
                            "sensorCodes": {
                                "50": {
                                    "names": {
                                        "magnetic-field-component": {
                                            "methods": {"60s": {"aspects": {"X": {}}}}
                                        }
                                    }
                                }
                            },
                        }
                    }
                }
            }
        },
        "/v4/data/geomag/EYWM/magnetic-field-component/50/60s/X/latest/2d": [{"data": tilde_rows}],
        "/products/solar-wind/plasma-1-day.json": [["time_tag", "density", "speed", "temperature"]]
        + [[_iso(t), "8.0", "550.0", "100000"] for t in minutes],
        "/products/solar-wind/mag-1-day.json": [
            ["time_tag", "bx_gsm", "by_gsm", "bz_gsm", "lon_gsm", "lat_gsm", "bt"]
        ]
        + [[_iso(t), "1.0", "0.0", "-12.0", "0", "0", "12.0"] for t in minutes],
        "/json/goes/primary/magnetometers-1-day.json": [
            {"time_tag": _iso(t), "Hp": 100.0} for t in minutes
        ],
        "/json/goes/secondary/magnetometers-1-day.json": [
            {"time_tag": _iso(t), "Hp": 100.0} for t in minutes
        ],
        "/": {
            "currentForecast": {
                "spotTheAuroraForecast": 30.0,
                "lastUpdated": now,
                "sun": {"rise": now - 6 * 3_600_000, "set": now - 3_600_000},
                "inputs": {"magneticField": {"bt": 12, "bz": -12}, "hemisphericPower": 80},
            },
            "historicalData": [
                {"timestamp": now - 30 * MINUTE_MS, "baseScore": 20, "finalScore": 22},
                {"timestamp": now, "baseScore": 30, "finalScore": 31},
            ],
            "rawHistory": [],
        },
        "/ips": [
            {
                "activityID": "2024-05-10T10:30:00-IPS-001",
                "eventTime": "2024-05-10T10:30Z",
                "instruments": [{"displayName": "DSCOVR: PLASMAG"}],
                "location": "Earth",
            }
        ],
        "/sightings": [
            {"lat": -45.87, "lng": 170.5, "status": "eye", "name": "Aroha", "timestamp": now - MINUTE_MS}
        ],
    }


class FeedServer:
    """Mock upstream answering from a mutable ``routes`` table."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests = []
        self.posted = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            self.posted.append(request)
            return httpx.Response(200, json={"key": "sighting-1"})
        body = self.routes.get(request.url.path)
        if body is None:
            return httpx.Response(503, json={"error": "unavailable"})
        return httpx.Response(200, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def now_ms() -> int:
    return NOW_MS


@pytest.fixture
def feed_server() -> FeedServer:
    return FeedServer(_feed_routes(NOW_MS))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        tilde_base=TILDE,
        noaa_base=SWPC,
        forecast_url=WORKER,
        ips_url=WORKER + "ips",
        sightings_url=SIGHTINGS + "sightings",
    )


@pytest.fixture
def service(feed_server, settings) -> ForecastService:
    transport = feed_server.transport
    return ForecastService(
        settings,
        tilde=TildeAdapter(TILDE, cache=TTLCache(ttl=60), transport=transport),
        noaa=NoaaAdapter(SWPC, transport=transport),
        worker=ForecastWorkerAdapter(settings.forecast_url, settings.ips_url, transport=transport),
        sightings=SightingsAdapter(settings.sightings_url, transport=transport),
        clock=lambda: NOW_MS,
    )
