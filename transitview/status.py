"""
Vehicle status and occupancy classification.

Raw MBTA codes (e.g. IN_TRANSIT_TO, CRUSHED_STANDING_ROOM_ONLY) are matched
case-insensitively against ordered rule lists; the first rule whose code is a
substring of the raw value wins. Every input maps to exactly one category.
"""

from __future__ import annotations

from typing import Any, Optional

from transitview.models import (
    OccupancyCategory,
    OccupancyLabel,
    StatusCategory,
    StatusLabel,
    VehicleView,
)
from transitview.records import (
    as_int,
    as_number,
    attributes,
    parse_timestamp,
    record_id,
    relationship_id,
    text,
)

UNKNOWN_STATUS = "Unknown status"
NO_OCCUPANCY = "No occupancy data"

# Order matters: codes overlap as substrings.
CURRENT_STATUS_RULES: list[tuple[str, StatusCategory, str]] = [
    ("STOPPED", StatusCategory.stopped, "Stopped"),
    ("INCOMING", StatusCategory.incoming, "Incoming"),
    ("IN_TRANSIT", StatusCategory.in_transit, "In transit"),
]

# CRUSHED_STANDING_ROOM_ONLY also contains STANDING_ROOM_ONLY.
OCCUPANCY_RULES: list[tuple[str, OccupancyCategory, str]] = [
    ("EMPTY", OccupancyCategory.empty, "Empty"),
    ("MANY_SEATS", OccupancyCategory.many_seats, "Many seats"),
    ("FEW_SEATS", OccupancyCategory.few_seats, "Few seats"),
    ("CRUSHED", OccupancyCategory.crushed, "Very crowded"),
    ("STANDING_ROOM_ONLY", OccupancyCategory.standing_room, "Standing room"),
    ("FULL", OccupancyCategory.full, "Full"),
    ("NOT_ACCEPTING", OccupancyCategory.not_accepting, "Not accepting"),
]


def _normalize(code: Any) -> Optional[str]:
    """Return the stripped code as a string, or None if absent/blank."""
    if code is None:
        return None
    raw = code if isinstance(code, str) else str(code)
    raw = raw.strip()
    return raw or None


def _match(raw: str, rules: list[tuple[str, Any, str]]) -> Optional[tuple[Any, str]]:
    upper = raw.upper()
    for needle, category, label in rules:
        if needle in upper:
            return category, label
    return None


def classify_current_status(code: Any) -> StatusLabel:
    raw = _normalize(code)
    if raw is None:
        return StatusLabel(category=StatusCategory.unknown, label=UNKNOWN_STATUS)
    matched = _match(raw, CURRENT_STATUS_RULES)
    if matched is None:
        return StatusLabel(category=StatusCategory.unknown, label=raw)
    category, label = matched
    return StatusLabel(category=category, label=label)


def classify_occupancy(code: Any) -> OccupancyLabel:
    raw = _normalize(code)
    if raw is None:
        return OccupancyLabel(category=OccupancyCategory.no_data, label=NO_OCCUPANCY)
    matched = _match(raw, OCCUPANCY_RULES)
    if matched is None:
        return OccupancyLabel(category=OccupancyCategory.other, label=raw)
    category, label = matched
    return OccupancyLabel(category=category, label=label)


def build_vehicle_view(record: dict) -> VehicleView:
    """Flatten a raw MBTA vehicle record and classify its status codes."""
    attrs = attributes(record)
    return VehicleView(
        id=record_id(record),
        label=text(attrs.get("label")) or None,
        current_status=classify_current_status(attrs.get("current_status")),
        occupancy=classify_occupancy(attrs.get("occupancy_status")),
        direction_id=as_int(attrs.get("direction_id")),
        current_stop_sequence=as_int(attrs.get("current_stop_sequence")),
        speed=as_number(attrs.get("speed")),
        bearing=as_number(attrs.get("bearing")),
        latitude=as_number(attrs.get("latitude")),
        longitude=as_number(attrs.get("longitude")),
        updated_at=parse_timestamp(attrs.get("updated_at")),
        route_id=relationship_id(record, "route"),
        trip_id=relationship_id(record, "trip"),
        stop_id=relationship_id(record, "stop"),
    )
