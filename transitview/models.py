"""
Pydantic response models for the transitview API.

Raw MBTA records stay plain dicts; these are the derived view models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Status(str, Enum):
    ok = "ok"
    not_found = "not_found"
    error = "error"


class ErrorCode(str, Enum):
    mbta_unreachable = "mbta_unreachable"
    mbta_rate_limited = "mbta_rate_limited"
    not_found = "not_found"
    malformed_response = "malformed_response"
    unknown = "unknown"


class ErrorDetail(BaseModel):
    """Error information when status is 'error' or 'not_found'."""

    code: ErrorCode
    message: str


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


class DirectionSummary(BaseModel):
    """Representative headsign for one direction of a route."""

    direction_id: int = Field(description="Direction of travel (0 or 1)")
    headsign: str = Field(description="Most frequent headsign for this direction")


class RouteSummary(BaseModel):
    id: str
    long_name: str = Field(description="Route long name, or a placeholder when absent")


class RouteLookupResponse(BaseModel):
    """Response for GET /v1/routes/{route_id}."""

    as_of: datetime
    route_id: str
    status: Status
    route: Optional[RouteSummary] = None
    directions: list[DirectionSummary] = Field(default_factory=list)
    error: Optional[ErrorDetail] = None


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


class AlertTier(str, Enum):
    default = "default"
    low = "low"
    medium = "medium"
    high = "high"


class BadgeKind(str, Enum):
    effect = "effect"
    severity = "severity"


class Badge(BaseModel):
    kind: BadgeKind
    label: str


class AlertItem(BaseModel):
    """One alert, ready for display."""

    id: Optional[str] = None
    header: str
    body: str = Field(description="Description, truncated unless expanded")
    has_more: bool = Field(
        description="True when the full description is longer than the truncation limit"
    )
    expanded: bool = False
    sent_at: Optional[datetime] = Field(
        default=None, description="created_at, falling back to updated_at"
    )
    sent_label: str
    updated_at: Optional[datetime] = None
    updated_label: Optional[str] = None
    tier: AlertTier
    badges: list[Badge] = Field(default_factory=list)


class AlertListResponse(BaseModel):
    """Response for GET /v1/alerts."""

    as_of: datetime
    status: Status
    query: str = ""
    total: int = Field(ge=0, description="Alerts fetched before filtering")
    shown: int = Field(ge=0, description="Alerts left after filtering")
    items: list[AlertItem] = Field(default_factory=list)
    error: Optional[ErrorDetail] = None


# ---------------------------------------------------------------------------
# Vehicles
# ---------------------------------------------------------------------------


class StatusCategory(str, Enum):
    stopped = "stopped"
    incoming = "incoming"
    in_transit = "in_transit"
    unknown = "unknown"


class OccupancyCategory(str, Enum):
    empty = "empty"
    many_seats = "many_seats"
    few_seats = "few_seats"
    standing_room = "standing_room"
    crushed = "crushed"
    full = "full"
    not_accepting = "not_accepting"
    no_data = "no_data"
    other = "other"


class StatusLabel(BaseModel):
    """A classified status code with its display label."""

    category: StatusCategory
    label: str


class OccupancyLabel(BaseModel):
    category: OccupancyCategory
    label: str


class VehicleView(BaseModel):
    """A single vehicle, flattened for display."""

    id: Optional[str] = None
    label: Optional[str] = None
    current_status: StatusLabel
    occupancy: OccupancyLabel
    direction_id: Optional[int] = None
    current_stop_sequence: Optional[int] = None
    speed: Optional[float] = None
    bearing: Optional[float] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    updated_at: Optional[datetime] = None
    route_id: Optional[str] = None
    trip_id: Optional[str] = None
    stop_id: Optional[str] = None


class VehicleLookupResponse(BaseModel):
    """Response for GET /v1/vehicles/{vehicle_id}."""

    as_of: datetime
    vehicle_id: str
    status: Status
    vehicle: Optional[VehicleView] = None
    error: Optional[ErrorDetail] = None
