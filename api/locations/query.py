"""
Search criteria parsing and SQL predicate composition.

Text criteria become a single parameterized WHERE clause. Proximity (`near`
+ `radius`) is deliberately left out of the predicate: it is applied after
retrieval by `ranking.rank_by_proximity`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from core import config


class InvalidSearchParameter(ValueError):
    pass


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SearchCriteria:
    search: str = ""
    city: str = ""
    near: GeoPoint | None = None
    radius_miles: float = config.DEFAULT_RADIUS_MILES

    @property
    def is_proximity(self) -> bool:
        return self.near is not None


@dataclass(frozen=True)
class Predicate:
    clauses: tuple[str, ...] = ()
    args: tuple[str, ...] = ()
    order_by: str = "id ASC"

    def where_sql(self) -> str:
        if not self.clauses:
            return ""
        return "WHERE " + " AND ".join(self.clauses)


def _parse_finite(raw: str) -> float | None:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_near(raw: str | None) -> GeoPoint | None:
    """
    Parse "lat,lng" into a point. Anything else (wrong arity, non-numeric or
    non-finite parts, or a point off the globe) yields None.
    """
    raw = (raw or "").strip()
    if not raw:
        return None

    parts = raw.split(",")
    if len(parts) != 2:
        return None

    lat = _parse_finite(parts[0])
    lng = _parse_finite(parts[1])
    if lat is None or lng is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return GeoPoint(latitude=lat, longitude=lng)


def parse_radius(raw: str | None, default: float) -> float:
    raw = (raw or "").strip()
    if not raw:
        return default
    value = _parse_finite(raw)
    return default if value is None else value


def build_criteria(
    *,
    search: str | None = None,
    city: str | None = None,
    near: str | None = None,
    radius: str | None = None,
    strict_near: bool = True,
    default_radius: float = config.DEFAULT_RADIUS_MILES,
) -> SearchCriteria:
    point = parse_near(near)
    if point is None and (near or "").strip() and strict_near:
        raise InvalidSearchParameter("near must be 'latitude,longitude' with numeric values.")

    return SearchCriteria(
        search=(search or "").strip(),
        city=(city or "").strip(),
        near=point,
        radius_miles=parse_radius(radius, default_radius) if point is not None else default_radius,
    )


def _like_pattern(text: str) -> str:
    # ILIKE's default escape character is backslash.
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def compose(criteria: SearchCriteria) -> Predicate:
    clauses: list[str] = []
    args: list[str] = []

    if criteria.search:
        args.append(_like_pattern(criteria.search))
        n = len(args)
        clauses.append(f"(name ILIKE ${n} OR address ILIKE ${n})")

    if criteria.city:
        args.append(_like_pattern(criteria.city))
        clauses.append(f"address ILIKE ${len(args)}")

    return Predicate(clauses=tuple(clauses), args=tuple(args))
