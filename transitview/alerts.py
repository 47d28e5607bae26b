"""
Pure alert list building.

No I/O. Takes raw MBTA alert dicts plus the caller's search string and
expansion set, and returns AlertItem display models, newest first.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import AbstractSet, Any, Iterable, Optional, Sequence

from transitview.models import (
    AlertItem,
    AlertListResponse,
    AlertTier,
    Badge,
    BadgeKind,
    Status,
)
from transitview.records import (
    as_number,
    attributes,
    first_present,
    parse_timestamp,
    record_id,
    text,
)

DEFAULT_MAX_CHARS = 140
DEFAULT_HEADER = "Service Alert"
DEFAULT_DESCRIPTION = "No description provided."
UNKNOWN_TIME = "Unknown time"
ELLIPSIS = "…"

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Sort position for alerts without a usable timestamp.
NO_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def matches_query(alert: dict, query: str) -> bool:
    """
    Case-insensitive substring match on header or description.

    An empty (or whitespace-only) query matches everything.
    """
    needle = query.strip().casefold()
    if not needle:
        return True
    attrs = attributes(alert)
    return (
        needle in text(attrs.get("header")).casefold()
        or needle in text(attrs.get("description")).casefold()
    )


def filter_alerts(alerts: Iterable[dict], query: str) -> list[dict]:
    return [alert for alert in alerts if matches_query(alert, query)]


def resolve_sent_time(alert: dict) -> Optional[datetime]:
    """
    Extract the display timestamp of an alert.

    Uses created_at as primary, updated_at as fallback. The first non-empty
    value is the one parsed; if it does not parse, there is no timestamp.
    """
    attrs = attributes(alert)
    return parse_timestamp(first_present(attrs.get("created_at"), attrs.get("updated_at")))


def alert_sort_key(alert: dict) -> tuple[bool, datetime]:
    """
    Sort key for an alert. Never raises.

    Alerts without a timestamp rank below every timestamped alert, however old.
    """
    ts = resolve_sent_time(alert)
    if ts is None:
        return False, NO_TIMESTAMP
    return True, ts


def sort_alerts(alerts: Iterable[dict]) -> list[dict]:
    """Newest first. Stable, so equal timestamps keep their input order."""
    return sorted(alerts, key=alert_sort_key, reverse=True)


def clamp_text(value: str, max_chars: int) -> str:
    """
    Cut text to max_chars at a raw character index.

    Trailing whitespace of the cut is trimmed and an ellipsis appended.
    """
    if not value:
        return ""
    if len(value) <= max_chars:
        return value
    return value[:max_chars].rstrip() + ELLIPSIS


def severity_tier(severity: Any) -> AlertTier:
    score = as_number(severity)
    if score is None:
        return AlertTier.default
    if score >= 7:
        return AlertTier.high
    if score >= 4:
        return AlertTier.medium
    return AlertTier.low


def _format_severity(score: float) -> str:
    return str(int(score)) if score.is_integer() else str(score)


def alert_badges(alert: dict) -> list[Badge]:
    attrs = attributes(alert)
    badges = []
    effect = text(attrs.get("effect"))
    if effect:
        badges.append(Badge(kind=BadgeKind.effect, label=effect))
    score = as_number(attrs.get("severity"))
    if score is not None:
        badges.append(
            Badge(kind=BadgeKind.severity, label=f"Severity {_format_severity(score)}")
        )
    return badges


def format_timestamp(ts: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """
    Format a timestamp as e.g. 'Jun 1, 2024, 3:05 PM'.

    Converts to tz when given. Returns 'Unknown time' for None, or when the
    conversion falls outside the representable date range.
    """
    if ts is None:
        return UNKNOWN_TIME
    if tz is not None:
        try:
            ts = ts.astimezone(tz)
        except OverflowError:
            return UNKNOWN_TIME
    hour = ts.hour % 12 or 12
    meridiem = "AM" if ts.hour < 12 else "PM"
    return f"{MONTHS[ts.month - 1]} {ts.day}, {ts.year}, {hour}:{ts.minute:02d} {meridiem}"


def build_alert_item(
    alert: dict,
    expanded: bool,
    max_chars: int = DEFAULT_MAX_CHARS,
    tz: Optional[tzinfo] = None,
) -> AlertItem:
    """Build the display model for a single alert."""
    attrs = attributes(alert)
    header = first_present(attrs.get("header")) or DEFAULT_HEADER
    description = first_present(attrs.get("description")) or DEFAULT_DESCRIPTION
    sent_at = resolve_sent_time(alert)
    updated_at = parse_timestamp(attrs.get("updated_at"))

    return AlertItem(
        id=record_id(alert),
        header=header,
        body=description if expanded else clamp_text(description, max_chars),
        has_more=len(description) > max_chars,
        expanded=expanded,
        sent_at=sent_at,
        sent_label=format_timestamp(sent_at, tz),
        updated_at=updated_at,
        updated_label=format_timestamp(updated_at, tz) if updated_at else None,
        tier=severity_tier(attrs.get("severity")),
        badges=alert_badges(alert),
    )


def build_alert_items(
    alerts: Sequence[dict],
    query: str = "",
    expanded: AbstractSet[str] = frozenset(),
    max_chars: int = DEFAULT_MAX_CHARS,
    tz: Optional[tzinfo] = None,
) -> list[AlertItem]:
    """
    Filter, sort, and render alerts for display.

    Args:
        alerts: Raw MBTA alert data items. Not modified.
        query: Free-text search; empty means no filtering.
        expanded: Ids of alerts whose full description should be shown.
        max_chars: Truncation limit for collapsed descriptions.
        tz: Time zone for the formatted labels (UTC offsets kept if None).

    Returns:
        AlertItems, newest first.
    """
    items = []
    for alert in sort_alerts(filter_alerts(alerts, query)):
        alert_id = record_id(alert)
        is_expanded = alert_id is not None and alert_id in expanded
        items.append(build_alert_item(alert, is_expanded, max_chars, tz))
    return items


def build_alert_list(
    alerts: Sequence[dict],
    as_of: datetime,
    query: str = "",
    expanded: AbstractSet[str] = frozenset(),
    max_chars: int = DEFAULT_MAX_CHARS,
    tz: Optional[tzinfo] = None,
) -> AlertListResponse:
    """Wrap build_alert_items with the shown/total counts."""
    items = build_alert_items(alerts, query, expanded, max_chars, tz)
    return AlertListResponse(
        as_of=as_of,
        status=Status.ok,
        query=query,
        total=len(alerts),
        shown=len(items),
        items=items,
    )
