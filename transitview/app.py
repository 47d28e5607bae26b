"""
FastAPI application for transitview.

Lifespan manages the httpx client and transit service.
Routes: /v1/routes/{route_id}, /v1/vehicles/{vehicle_id}, /v1/alerts, /health.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException, Query

from transitview.config import AppConfig, load_config
from transitview.mbta_client import MBTAClient
from transitview.models import (
    AlertListResponse,
    RouteLookupResponse,
    VehicleLookupResponse,
)
from transitview.service import TransitService

logger = logging.getLogger(__name__)

# Global references set during lifespan
_transit_service: Optional[TransitService] = None
_config: Optional[AppConfig] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: load config, create HTTP client and transit service."""
    global _transit_service, _config

    # Configure logging
    log_level = os.environ.get("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    _config = load_config()
    logger.info(
        "Loaded config: base_url=%s, alert_activities=%s, alert_max_chars=%d",
        _config.mbta_base_url,
        ",".join(_config.alert_activities),
        _config.alert_max_chars,
    )

    async with httpx.AsyncClient() as http_client:
        mbta = MBTAClient(
            http_client=http_client,
            base_url=_config.mbta_base_url,
            api_key=_config.mbta_api_key,
            timeout=_config.request_timeout,
        )
        _transit_service = TransitService(config=_config, mbta_client=mbta)
        logger.info("Transitview ready")
        yield

    _transit_service = None
    _config = None


app = FastAPI(
    title="Transitview API",
    version="1.0.0",
    description="""
Human-readable summaries of the MBTA v3 transit feed.

## Features

- **Route lookup**: route name plus one representative headsign per direction
- **Vehicle lookup**: position, current status and occupancy in plain words
- **Alerts**: searchable, newest-first list with collapsible descriptions

All data is fetched on demand; nothing is cached or stored.
    """.strip(),
    lifespan=lifespan,
    openapi_tags=[
        {"name": "routes", "description": "Route and direction summaries"},
        {"name": "vehicles", "description": "Single vehicle status"},
        {"name": "alerts", "description": "Service alerts"},
        {"name": "health", "description": "Service health check"},
    ],
    docs_url="/docs",
    redoc_url="/redoc",
)


def _service() -> TransitService:
    if _transit_service is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _transit_service


def _require_id(value: str, kind: str) -> str:
    value = value.strip()
    if not value:
        raise HTTPException(status_code=400, detail=f"{kind} id must not be blank")
    return value


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    tags=["health"],
    summary="Health check",
    response_description="Service is healthy",
)
async def health():
    """
    Health check endpoint for monitoring and Docker health checks.

    Always returns HTTP 200 with a simple JSON response.
    """
    return {"status": "healthy"}


@app.get(
    "/v1/routes/{route_id}",
    response_model=RouteLookupResponse,
    tags=["routes"],
    summary="Look up a route",
    response_description="Route name and one headsign per direction",
)
async def get_route(route_id: str):
    """
    Return a route with the most common headsign for each direction.

    `route_id` is any MBTA route id: bus numbers (`1`, `66`, `SL4`) or
    rapid transit lines (`Red`, `Orange`, `Green-B`).

    Unknown routes return `status: not_found`; upstream failures return
    `status: error` with an error message.
    """
    route_id = _require_id(route_id, "Route")
    return await _service().lookup_route(route_id)


@app.get(
    "/v1/vehicles/{vehicle_id}",
    response_model=VehicleLookupResponse,
    tags=["vehicles"],
    summary="Look up a vehicle",
    response_description="Vehicle position and classified status",
)
async def get_vehicle(vehicle_id: str):
    """Return one vehicle with its current status and occupancy labels."""
    vehicle_id = _require_id(vehicle_id, "Vehicle")
    return await _service().lookup_vehicle(vehicle_id)


@app.get(
    "/v1/alerts",
    response_model=AlertListResponse,
    tags=["alerts"],
    summary="List service alerts",
    response_description="Filtered alerts, newest first",
)
async def get_alerts(
    q: str = Query(default="", description="Case-insensitive search on header and description"),
    expanded: Optional[list[str]] = Query(
        default=None,
        description="Alert ids whose full description should be returned",
    ),
):
    """
    Return current alerts affecting boarding, exiting or riding.

    Descriptions are shortened unless the alert id is passed in `expanded`;
    `has_more` tells whether a "More details" toggle is needed.
    """
    return await _service().list_alerts(query=q, expanded=frozenset(expanded or []))
