"""
Pydantic schemas for location endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=500)
    address: str = Field(..., min_length=1, max_length=1000)
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class LocationUpdate(BaseModel):
    """
    Partial update: omitted fields keep their stored value.
    """

    name: str | None = Field(default=None, min_length=1, max_length=500)
    address: str | None = Field(default=None, min_length=1, max_length=1000)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)


class Location(BaseModel):
    id: int
    name: str
    address: str
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    # Miles from the search origin; only set by proximity search.
    distance: float | None = None
