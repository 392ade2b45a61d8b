"""
Location API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from core import config, db

from . import query, schemas, service

router = APIRouter()


@router.get(
    "/locations",
    response_model=list[schemas.Location],
    response_model_exclude_none=True,
)
async def search_locations(
    search: str = Query(default="", max_length=500),
    city: str = Query(default="", max_length=500),
    near: str = Query(default="", max_length=100, description="latitude,longitude"),
    radius: str = Query(default="", max_length=50, description="miles"),
    database: db.Database = Depends(db.get_db),
) -> list[schemas.Location]:
    """
    List locations, optionally filtered by text, city, and distance from `near`.

    `distance` is only present in the response when `near` was given.
    """
    try:
        criteria = query.build_criteria(
            search=search,
            city=city,
            near=near,
            radius=radius,
            strict_near=config.strict_near_param(),
            default_radius=config.default_radius_miles(),
        )
    except query.InvalidSearchParameter as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return await service.search_locations(database, criteria)


@router.post(
    "/locations",
    response_model=schemas.Location,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_location(
    request: schemas.LocationCreate,
    database: db.Database = Depends(db.get_db),
) -> schemas.Location:
    return await service.create_location(database, request)


@router.get(
    "/locations/{location_id}",
    response_model=schemas.Location,
    response_model_exclude_none=True,
)
async def get_location(
    location_id: int,
    database: db.Database = Depends(db.get_db),
) -> schemas.Location:
    return await service.get_location(database, location_id)


@router.put(
    "/locations/{location_id}",
    response_model=schemas.Location,
    response_model_exclude_none=True,
)
async def replace_location(
    location_id: int,
    request: schemas.LocationCreate,
    database: db.Database = Depends(db.get_db),
) -> schemas.Location:
    return await service.replace_location(database, location_id, request)


@router.patch(
    "/locations/{location_id}",
    response_model=schemas.Location,
    response_model_exclude_none=True,
)
async def update_location(
    location_id: int,
    request: schemas.LocationUpdate,
    database: db.Database = Depends(db.get_db),
) -> schemas.Location:
    return await service.update_location(database, location_id, request)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    location_id: int,
    database: db.Database = Depends(db.get_db),
) -> Response:
    await service.delete_location(database, location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
