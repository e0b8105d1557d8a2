"""Main application module for nzaurora.

This module defines the FastAPI application, registers middleware,
defines REST endpoints over the forecast service, and mounts an MCP
server exposing the same operations as tools. The service's polling
loops are started and stopped by the application lifespan. A
module-level ``app`` is built via ``create_app`` so that ASGI servers
like Uvicorn can discover it automatically.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from fastapi_mcp import FastApiMCP

from .config import Settings, load_settings
from .forecast import classify_towns, predict_arrival, reach_latitudes
from .middleware import RequestLogMiddleware, log_info
from .models import CMEParameters, SightingSubmission
from .service import ForecastService

MCP_OPERATIONS = [
    "aurora_score",
    "substorm_forecast",
    "activity_summary",
    "solar_wind_gauges",
    "ground_disturbance",
    "reach_latitudes",
    "town_visibility",
    "cme_transit",
    "list_sightings",
    "interplanetary_shocks",
]


def create_app(
    service: Optional[ForecastService] = None,
    settings: Optional[Settings] = None,
    start_polling: bool = True,
) -> FastAPI:
    """Factory function for constructing the FastAPI application.

    ``service`` defaults to one built from ``settings`` (or the
    environment). With ``start_polling`` false the lifespan leaves the
    polling loops alone, which is what tests want.
    """
    settings = settings or (service.settings if service else load_settings())
    service = service or ForecastService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = service.build_scheduler() if start_polling else None
        if scheduler is not None:
            scheduler.start()
        log_info("service_started", polling=start_polling)
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()
            service.close()
            log_info("service_stopped")

    app = FastAPI(title="NZ Aurora", lifespan=lifespan)
    app.state.service = service

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    # -----------------------------------------------------------------------
    # API key dependency
    # -----------------------------------------------------------------------
    api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)

    def require_api_key(x_api_key: str = Depends(api_key_header)) -> None:
        """Validate the ``x-api-key`` header against ``NZAURORA_API_KEY``."""
        if settings.api_key and x_api_key != settings.api_key:
            raise HTTPException(status_code=401, detail="Missing or invalid API key")

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    @app.get("/api")
    def api_root():
        """Return a simple service descriptor for programmatic clients."""
        return {
            "ok": True,
            "service": "NZ Aurora",
            "docs": "/docs",
            "health": "/health",
            "mcp": "/mcp",
        }

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"ok": True}

    @app.get(
        "/api/forecast/score",
        operation_id="aurora_score",
        tags=["Forecast"],
    )
    async def rest_aurora_score(
        lat: Optional[float] = Query(None, ge=-90, le=90, description="Viewer latitude"),
    ) -> JSONResponse:
        """Aurora likelihood adjusted for the viewer's latitude.

        Without ``lat`` the Greymouth forecast is returned unchanged.
        Responds 503 until the forecast feed has been loaded once.
        """
        score = service.aurora_score(lat)
        if score.final is None:
            raise HTTPException(status_code=503, detail="Forecast not loaded yet")
        return JSONResponse(
            {"record": score.model_dump(), "daylight": service.is_daylight()}
        )

    @app.get(
        "/api/forecast/substorm",
        operation_id="substorm_forecast",
        tags=["Forecast"],
    )
    async def rest_substorm_forecast() -> JSONResponse:
        """Current substorm phase, likelihood, window and suggested action."""
        forecast = service.substorm_forecast()
        return JSONResponse({"record": forecast.model_dump(mode="json")})

    @app.get(
        "/api/forecast/summary",
        operation_id="activity_summary",
        tags=["Forecast"],
    )
    async def rest_activity_summary() -> JSONResponse:
        """Highest score and strong southward-Bz events of the last day."""
        summary = service.activity_summary()
        if summary is None:
            raise HTTPException(status_code=503, detail="No activity history available")
        return JSONResponse({"record": summary.model_dump()})

    @app.get(
        "/api/forecast/gauges",
        operation_id="solar_wind_gauges",
        tags=["Forecast"],
    )
    async def rest_gauges() -> JSONResponse:
        """Colour band and fill level for the solar wind and power gauges."""
        return JSONResponse({"record": service.gauges().model_dump()})

    @app.get(
        "/api/disturbance",
        operation_id="ground_disturbance",
        tags=["Ground"],
    )
    async def rest_disturbance() -> JSONResponse:
        """Ground magnetometer disturbance with per-town visibility tiers."""
        report = service.ground_report()
        if report is None:
            raise HTTPException(status_code=503, detail="System Offline")
        return JSONResponse({"record": report.model_dump()})

    @app.get(
        "/api/disturbance/reach",
        operation_id="reach_latitudes",
        tags=["Ground"],
    )
    async def rest_reach(
        strength: float = Query(..., description="Disturbance strength, negative = disturbed"),
    ) -> JSONResponse:
        """Northernmost latitude with visibility per observation mode."""
        return JSONResponse({"record": reach_latitudes(strength).model_dump()})

    @app.get(
        "/api/disturbance/towns",
        operation_id="town_visibility",
        tags=["Ground"],
    )
    async def rest_towns(
        strength: float = Query(..., description="Disturbance strength, negative = disturbed"),
    ) -> JSONResponse:
        """Camera, phone and naked-eye tiers for each reference town."""
        towns = classify_towns(strength)
        return JSONResponse({"records": [t.model_dump() for t in towns]})

    @app.post(
        "/api/cme/transit",
        operation_id="cme_transit",
        tags=["CME"],
    )
    async def rest_cme_transit(params: CMEParameters) -> JSONResponse:
        """Predict Earth arrival of a CME from its launch parameters."""
        forecast = predict_arrival(params)
        return JSONResponse({"record": forecast.model_dump(mode="json")})

    @app.get(
        "/api/sightings",
        operation_id="list_sightings",
        tags=["Sightings"],
    )
    async def rest_sightings() -> JSONResponse:
        """Recent crowd-sourced aurora reports, most recent first."""
        return JSONResponse(
            {"records": [s.model_dump() for s in service.sightings]}
        )

    @app.post(
        "/api/sightings",
        operation_id="submit_sighting",
        tags=["Sightings"],
        dependencies=[Depends(require_api_key)],
    )
    async def rest_submit_sighting(submission: SightingSubmission) -> JSONResponse:
        """Forward a sighting to the sightings worker."""
        key = await service.submit_sighting(submission)
        if key is None:
            raise HTTPException(status_code=502, detail="Sighting could not be submitted")
        return JSONResponse({"key": key}, status_code=201)

    @app.get(
        "/api/shocks",
        operation_id="interplanetary_shocks",
        tags=["CME"],
    )
    async def rest_shocks() -> JSONResponse:
        """Interplanetary shocks, flagged active within three hours."""
        return JSONResponse({"record": service.shock_report().model_dump(mode="json")})

    # -----------------------------------------------------------------------
    # MCP server mount
    # -----------------------------------------------------------------------
    mcp = FastApiMCP(app, include_operations=MCP_OPERATIONS)
    mcp.mount_http()

    return app


# ---------------------------------------------------------------------------
# FastAPI application instance
# ---------------------------------------------------------------------------
app = create_app()
