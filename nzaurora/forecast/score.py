"""Latitude adjustment of the server-supplied aurora score.

The server forecast is computed for Greymouth. Viewers further south get
a higher score and viewers further north a lower one, at 0.2% per full
10 km of meridional distance (about 2% per 100 km).
"""

from __future__ import annotations

import math
from typing import Optional

from nzaurora.models.forecast import AuroraScore

GREYMOUTH_LATITUDE = -42.45
EARTH_RADIUS_KM = 6371.0
SEGMENT_KM = 10.0
SEGMENT_PERCENT = 0.2


def distance_from_reference_km(lat: float, reference_lat: float = GREYMOUTH_LATITUDE) -> float:
    return abs(math.radians(lat - reference_lat)) * EARTH_RADIUS_KM


def location_adjustment(lat: Optional[float], reference_lat: float = GREYMOUTH_LATITUDE) -> float:
    """Percentage points to add to the base score; 0 without a latitude."""
    if lat is None:
        return 0.0
    segments = math.floor(distance_from_reference_km(lat, reference_lat) / SEGMENT_KM)
    adjustment = segments * SEGMENT_PERCENT
    return -adjustment if lat > reference_lat else adjustment


def location_blurb(lat: Optional[float], reference_lat: float = GREYMOUTH_LATITUDE) -> str:
    if lat is None:
        return "Location unavailable. Showing default forecast for Greymouth."
    adjustment = location_adjustment(lat, reference_lat)
    direction = "south" if adjustment >= 0 else "north"
    distance = distance_from_reference_km(lat, reference_lat)
    return (
        f"Forecast adjusted by {adjustment:.1f}% for your location "
        f"({distance:.0f}km {direction} of Greymouth)."
    )


def compose_score(
    base: Optional[float],
    lat: Optional[float] = None,
    reference_lat: float = GREYMOUTH_LATITUDE,
) -> AuroraScore:
    """Clamp ``base + adjustment`` to ``[0, 100]``; ``final`` stays ``None``
    while the base score is unknown."""
    adjustment = location_adjustment(lat, reference_lat)
    final = None
    if base is not None:
        final = max(0.0, min(100.0, base + adjustment))
    return AuroraScore(
        base=base,
        locationAdjustment=adjustment,
        final=final,
        blurb=location_blurb(lat, reference_lat),
    )
