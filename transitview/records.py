"""
Helpers for reading raw MBTA JSON:API records.

Records are `{id, attributes: {...}, relationships: {...}}` dicts. Anything
missing or of the wrong shape reads as absent instead of raising.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def attributes(record: Any) -> dict:
    """Return the record's attributes dict, or {} if there is none."""
    if not isinstance(record, dict):
        return {}
    attrs = record.get("attributes")
    return attrs if isinstance(attrs, dict) else {}


def record_id(record: Any) -> Optional[str]:
    if not isinstance(record, dict):
        return None
    value = record.get("id")
    if value is None:
        return None
    return str(value)


def relationship_id(record: Any, name: str) -> Optional[str]:
    """Extract a related record's id, e.g. relationships.route.data.id."""
    try:
        value = record["relationships"][name]["data"]["id"]
    except (KeyError, TypeError):
        return None
    return None if value is None else str(value)


def text(value: Any) -> str:
    """Return value if it is a string, else ''."""
    return value if isinstance(value, str) else ""


def first_present(*candidates: Any) -> Optional[str]:
    """
    Return the first candidate that is a non-empty string.

    Empty strings are skipped the same way as None.
    """
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return None


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp.

    Naive values are taken as UTC. Returns None for absent or unparseable input.
    """
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        ts = datetime.fromisoformat(raw.strip())
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def as_int(value: Any) -> Optional[int]:
    """Coerce an integral value to int. Booleans and floats with a fraction are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None
