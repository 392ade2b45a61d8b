"""
Great-circle distance and proximity ranking.

Filtering compares the exact haversine distance with the radius; only the
emitted value is rounded, and the ordering uses that emitted value.
"""

from __future__ import annotations

import math
from typing import Iterable

from .query import GeoPoint
from .schemas import Location

EARTH_RADIUS_MILES = 3958.756


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    # Float error can push `a` just past 1 for near-antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def round_distance(miles: float) -> float:
    """
    Two decimals, halves rounded up (12.345 -> 12.35).
    """
    return math.floor(miles * 100 + 0.5) / 100


def rank_by_proximity(
    origin: GeoPoint,
    radius_miles: float,
    candidates: Iterable[Location],
) -> list[Location]:
    if radius_miles <= 0:
        return []

    within: list[Location] = []
    for loc in candidates:
        miles = haversine_miles(origin.latitude, origin.longitude, loc.latitude, loc.longitude)
        if miles <= radius_miles:
            within.append(loc.model_copy(update={"distance": round_distance(miles)}))

    # sorted() is stable, so equal distances keep candidate (id) order.
    return sorted(within, key=lambda loc: loc.distance)
