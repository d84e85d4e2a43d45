from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from storefront.schemas.location import Location


class StoreSchema(BaseModel):
    id: str
    name: str
    description: str = ""
    address: str = ""
    phone: str = ""
    business_hours: str = ""
    is_open: bool = True
    owner_id: Optional[str] = None
    logo: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    distance: Optional[float] = Field(None, description="km from the user, one decimal place")


class StoreItem(StoreSchema):
    """A store as returned by the API, with display-ready distance fields."""

    distance_label: Optional[str] = None
    walking_minutes: Optional[int] = None


class StoreRanking(BaseModel):
    stores: list[StoreSchema]
    ranked: bool = False
    excluded_count: int = Field(0, description="Stores left out of distance sorting for lack of coordinates")
    location: Optional[Location] = None


class StoreListResponse(BaseModel):
    items: list[StoreItem]
    total: int
    ranked: bool
    excluded_count: int
    location: Optional[Location] = None


__all__ = ["StoreItem", "StoreListResponse", "StoreRanking", "StoreSchema"]
