"""
Pure headsign resolution for route patterns.

No I/O. Takes raw MBTA route_pattern dicts for one route and returns one
DirectionSummary per direction.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from transitview.models import DirectionSummary
from transitview.records import as_int, attributes, text


def pattern_direction(pattern: dict) -> Optional[tuple[int, str]]:
    """
    Extract (direction_id, headsign) from a route pattern.

    Returns None if the direction is missing or the trimmed headsign is empty.
    """
    attrs = attributes(pattern)
    direction_id = as_int(attrs.get("direction_id"))
    if direction_id is None:
        return None
    headsign = text(attrs.get("direction_headsign")).strip()
    if not headsign:
        return None
    return direction_id, headsign


def resolve_directions(patterns: Iterable[dict]) -> list[DirectionSummary]:
    """
    Pick the most frequent headsign for each direction of a route.

    Ties go to the headsign seen first in input order. Output is sorted by
    direction_id ascending; empty input gives an empty list.
    """
    # Counter keeps insertion order, and max() returns the first maximal key.
    counts: dict[int, Counter] = {}
    for pattern in patterns:
        resolved = pattern_direction(pattern)
        if resolved is None:
            continue
        direction_id, headsign = resolved
        counts.setdefault(direction_id, Counter())[headsign] += 1

    return [
        DirectionSummary(
            direction_id=direction_id,
            headsign=max(headsign_counts, key=headsign_counts.__getitem__),
        )
        for direction_id, headsign_counts in sorted(counts.items())
    ]
