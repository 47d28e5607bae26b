"""
Transit service: orchestrates the MBTA client and the pure view builders.

Each call makes its own on-demand fetch and returns a response model. MBTA
failures never escape; they become a status plus an ErrorDetail.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import AbstractSet

from transitview.alerts import build_alert_list
from transitview.config import AppConfig
from transitview.headsigns import resolve_directions
from transitview.mbta_client import MBTAClient, MBTAError
from transitview.models import (
    AlertListResponse,
    ErrorCode,
    ErrorDetail,
    RouteLookupResponse,
    RouteSummary,
    Status,
    VehicleLookupResponse,
)
from transitview.records import attributes, first_present, record_id
from transitview.status import build_vehicle_view

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found."
VEHICLE_NOT_FOUND = "Vehicle not found."
NO_ROUTE_NAME = "No route name available"


def error_from_exception(exc: MBTAError) -> ErrorDetail:
    """Map an MBTAError to a user-facing ErrorDetail."""
    if exc.malformed:
        code = ErrorCode.malformed_response
    elif exc.status_code == 429:
        code = ErrorCode.mbta_rate_limited
    elif exc.status_code is None or exc.status_code >= 500:
        code = ErrorCode.mbta_unreachable
    else:
        code = ErrorCode.unknown
    return ErrorDetail(code=code, message=str(exc))


class TransitService:
    """Produces route, vehicle and alert views from live MBTA data."""

    def __init__(self, config: AppConfig, mbta_client: MBTAClient) -> None:
        self._config = config
        self._mbta = mbta_client

    async def lookup_route(self, route_id: str) -> RouteLookupResponse:
        """Fetch a route and summarize its directions by headsign."""
        now = datetime.now(timezone.utc)
        route_id = route_id.strip()
        try:
            route = await self._mbta.fetch_route(route_id)
        except MBTAError as exc:
            if exc.status_code == 404:
                return self._route_not_found(route_id, now)
            return self._route_error(route_id, now, exc)
        if route is None:
            return self._route_not_found(route_id, now)

        try:
            patterns = await self._mbta.fetch_route_patterns(route_id)
        except MBTAError as exc:
            if exc.status_code != 404:
                return self._route_error(route_id, now, exc)
            # The route exists; it just has no patterns to summarize.
            patterns = []

        summary = RouteSummary(
            id=record_id(route) or route_id,
            long_name=first_present(attributes(route).get("long_name")) or NO_ROUTE_NAME,
        )
        return RouteLookupResponse(
            as_of=now,
            route_id=route_id,
            status=Status.ok,
            route=summary,
            directions=resolve_directions(patterns),
        )

    def _route_error(
        self, route_id: str, now: datetime, exc: MBTAError
    ) -> RouteLookupResponse:
        logger.warning("MBTA error for route %s: %s", route_id, exc)
        return RouteLookupResponse(
            as_of=now,
            route_id=route_id,
            status=Status.error,
            error=error_from_exception(exc),
        )

    def _route_not_found(self, route_id: str, now: datetime) -> RouteLookupResponse:
        logger.info("Route %s not found", route_id)
        return RouteLookupResponse(
            as_of=now,
            route_id=route_id,
            status=Status.not_found,
            error=ErrorDetail(code=ErrorCode.not_found, message=ROUTE_NOT_FOUND),
        )

    async def lookup_vehicle(self, vehicle_id: str) -> VehicleLookupResponse:
        """Fetch a single vehicle and classify its status codes."""
        now = datetime.now(timezone.utc)
        vehicle_id = vehicle_id.strip()
        try:
            record = await self._mbta.fetch_vehicle(vehicle_id)
        except MBTAError as exc:
            if exc.status_code == 404:
                record = None
            else:
                logger.warning("MBTA error for vehicle %s: %s", vehicle_id, exc)
                return VehicleLookupResponse(
                    as_of=now,
                    vehicle_id=vehicle_id,
                    status=Status.error,
                    error=error_from_exception(exc),
                )

        if record is None:
            return VehicleLookupResponse(
                as_of=now,
                vehicle_id=vehicle_id,
                status=Status.not_found,
                error=ErrorDetail(code=ErrorCode.not_found, message=VEHICLE_NOT_FOUND),
            )

        return VehicleLookupResponse(
            as_of=now,
            vehicle_id=vehicle_id,
            status=Status.ok,
            vehicle=build_vehicle_view(record),
        )

    async def list_alerts(
        self, query: str = "", expanded: AbstractSet[str] = frozenset()
    ) -> AlertListResponse:
        """
        Fetch current alerts and build the searchable, newest-first list.

        `query` and `expanded` belong to the caller and are only read.
        """
        now = datetime.now(timezone.utc)
        try:
            alerts = await self._mbta.fetch_alerts(self._config.alert_activities)
        except MBTAError as exc:
            logger.warning("MBTA error for alerts: %s", exc)
            return AlertListResponse(
                as_of=now,
                status=Status.error,
                query=query,
                total=0,
                shown=0,
                error=error_from_exception(exc),
            )

        return build_alert_list(
            alerts,
            as_of=now,
            query=query,
            expanded=expanded,
            max_chars=self._config.alert_max_chars,
            tz=self._config.tz,
        )
