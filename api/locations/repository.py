"""
Location persistence (raw SQL).

Schema comes from the dbmate migration:
- locations(id bigserial, name, address, latitude, longitude)
"""

from __future__ import annotations

from typing import Any

from core import db

from .query import Predicate

_COLUMNS = "id, name, address, latitude, longitude"


async def search_candidates(database: db.Database, predicate: Predicate) -> list[dict[str, Any]]:
    """
    Rows matching the text predicate, in base order. Proximity is applied by
    the caller.
    """
    sql = f"SELECT {_COLUMNS} FROM locations {predicate.where_sql()} ORDER BY {predicate.order_by}"
    return await database.fetch_all(sql, *predicate.args, operation="search locations")


async def get_location(database: db.Database, location_id: int) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM locations
        WHERE id = $1
        """,
        location_id,
        operation="get location",
    )


async def insert_location(
    database: db.Database,
    *,
    name: str,
    address: str,
    latitude: float,
    longitude: float,
) -> dict[str, Any]:
    row = await database.fetch_one(
        f"""
        INSERT INTO locations (name, address, latitude, longitude)
        VALUES ($1, $2, $3, $4)
        RETURNING {_COLUMNS}
        """,
        name,
        address,
        latitude,
        longitude,
        operation="create location",
    )
    if row is None:
        raise RuntimeError("Failed to insert location.")
    return row


async def replace_location(
    database: db.Database,
    location_id: int,
    *,
    name: str,
    address: str,
    latitude: float,
    longitude: float,
) -> dict[str, Any] | None:
    """
    Overwrite every column. Returns None when the id does not exist.
    """
    return await database.fetch_one(
        f"""
        UPDATE locations
        SET name = $2,
            address = $3,
            latitude = $4,
            longitude = $5
        WHERE id = $1
        RETURNING {_COLUMNS}
        """,
        location_id,
        name,
        address,
        latitude,
        longitude,
        operation="update location",
    )


async def patch_location(
    database: db.Database,
    location_id: int,
    *,
    name: str | None = None,
    address: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> dict[str, Any] | None:
    """
    Overwrite only the non-null arguments. Returns None when the id does not exist.
    """
    return await database.fetch_one(
        f"""
        UPDATE locations
        SET name = COALESCE($2, name),
            address = COALESCE($3, address),
            latitude = COALESCE($4::float8, latitude),
            longitude = COALESCE($5::float8, longitude)
        WHERE id = $1
        RETURNING {_COLUMNS}
        """,
        location_id,
        name,
        address,
        latitude,
        longitude,
        operation="update location",
    )


async def delete_location(database: db.Database, location_id: int) -> bool:
    status = await database.execute(
        "DELETE FROM locations WHERE id = $1",
        location_id,
        operation="delete location",
    )
    return db.affected_rows(status) > 0
