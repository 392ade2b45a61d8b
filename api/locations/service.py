"""
Location business logic.

Search flow:
- compose the text predicate (query.compose)
- fetch candidate rows in id order (repository)
- when `near` is set, filter by radius and order by distance (ranking)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import HTTPException, status

from core import db

from . import query, ranking, repository, schemas

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found.")


def _to_location(row: dict[str, Any]) -> schemas.Location:
    return schemas.Location(
        id=int(row["id"]),
        name=str(row["name"]),
        address=str(row["address"]),
        latitude=float(row["latitude"]),
        longitude=float(row["longitude"]),
    )


def _rows_to_locations(rows: Iterable[dict[str, Any]]) -> list[schemas.Location]:
    # One bad row must not fail the whole search.
    locations: list[schemas.Location] = []
    for row in rows:
        try:
            locations.append(_to_location(row))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("location_row_skipped id=%s error=%s", row.get("id"), exc)
    return locations


async def search_locations(database: db.Database, criteria: query.SearchCriteria) -> list[schemas.Location]:
    predicate = query.compose(criteria)
    logger.debug("location_search where=%r args=%r", predicate.where_sql(), predicate.args)

    rows = await repository.search_candidates(database, predicate)
    candidates = _rows_to_locations(rows)

    if not criteria.is_proximity:
        return candidates

    ranked = ranking.rank_by_proximity(criteria.near, criteria.radius_miles, candidates)
    logger.debug(
        "location_search_ranked candidates=%s within_radius=%s radius_miles=%s",
        len(candidates),
        len(ranked),
        criteria.radius_miles,
    )
    return ranked


async def get_location(database: db.Database, location_id: int) -> schemas.Location:
    row = await repository.get_location(database, location_id)
    if row is None:
        raise _not_found()
    return _to_location(row)


async def create_location(database: db.Database, payload: schemas.LocationCreate) -> schemas.Location:
    row = await repository.insert_location(
        database,
        name=payload.name,
        address=payload.address,
        latitude=payload.latitude,
        longitude=payload.longitude,
    )
    location = _to_location(row)
    logger.info("location_created id=%s", location.id)
    return location


async def replace_location(
    database: db.Database,
    location_id: int,
    payload: schemas.LocationCreate,
) -> schemas.Location:
    row = await repository.replace_location(
        database,
        location_id,
        name=payload.name,
        address=payload.address,
        latitude=payload.latitude,
        longitude=payload.longitude,
    )
    if row is None:
        raise _not_found()
    logger.info("location_replaced id=%s", location_id)
    return _to_location(row)


async def update_location(
    database: db.Database,
    location_id: int,
    payload: schemas.LocationUpdate,
) -> schemas.Location:
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        return await get_location(database, location_id)

    row = await repository.patch_location(database, location_id, **changes)
    if row is None:
        raise _not_found()
    logger.info("location_updated id=%s fields=%s", location_id, ",".join(sorted(changes)))
    return _to_location(row)


async def delete_location(database: db.Database, location_id: int) -> None:
    deleted = await repository.delete_location(database, location_id)
    if not deleted:
        raise _not_found()
    logger.info("location_deleted id=%s", location_id)
