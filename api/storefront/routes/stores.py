from __future__ import annotations

import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from storefront.core.config import get_settings
from storefront.db.session import get_async_session
from storefront.schemas.location import Location
from storefront.schemas.stores import StoreListResponse
from storefront.services.stores import build_store_list_response, fetch_all_stores

router = APIRouter(prefix="/stores", tags=["stores"])
settings = get_settings()


def _location(lat: float, lng: float) -> Location:
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise HTTPException(status_code=400, detail="lat and lng must be finite numbers")
    return Location(latitude=lat, longitude=lng)


def _optional_location(lat: Optional[float], lng: Optional[float]) -> Optional[Location]:
    if lat is None and lng is None:
        return None
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="lat and lng must be supplied together")
    return _location(lat, lng)


@router.get("")
async def list_stores(
    lat: Optional[float] = Query(None),
    lng: Optional[float] = Query(None),
    owner_id: Optional[str] = Query(None),
) -> StoreListResponse:
    """All stores, nearest first when a location is given; unranked otherwise."""
    location = _optional_location(lat, lng)
    async with get_async_session() as session:
        stores = await fetch_all_stores(session, owner_id=owner_id)
    return build_store_list_response(stores, location)


@router.get("/nearby")
async def stores_nearby(
    lat: float = Query(...),
    lng: float = Query(...),
    limit: Optional[int] = Query(None),
) -> StoreListResponse:
    limit = settings.nearby_store_limit if limit is None else limit
    if limit <= 0:
        raise HTTPException(status_code=400, detail="limit must be positive")
    if limit > 20:
        raise HTTPException(status_code=400, detail="limit cannot exceed 20")
    location = _location(lat, lng)

    async with get_async_session() as session:
        stores = await fetch_all_stores(session)
    return build_store_list_response(stores, location, limit=limit)
