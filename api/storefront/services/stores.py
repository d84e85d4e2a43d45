from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import get_settings
from storefront.db.models import Store
from storefront.schemas.location import Location
from storefront.schemas.stores import StoreItem, StoreListResponse, StoreSchema
from storefront.services.cache import cached_json
from storefront.services.geospatial import calculate_duration, format_distance
from storefront.services.rankings import build_store_ranking

settings = get_settings()


def _store_list_key(owner_id: Optional[str]) -> str:
    return f"stores:{owner_id or 'all'}"


def store_to_schema(store: Store) -> StoreSchema:
    return StoreSchema(
        id=store.id,
        name=store.name,
        description=store.description or "",
        address=store.address or "",
        phone=store.phone or "",
        business_hours=store.business_hours or "",
        is_open=store.is_open,
        owner_id=store.owner_id,
        logo=store.logo,
        latitude=store.latitude,
        longitude=store.longitude,
        created_at=store.created_at,
        updated_at=store.updated_at,
    )


async def fetch_all_stores(session: AsyncSession, owner_id: Optional[str] = None) -> list[StoreSchema]:
    """All stores, newest first, optionally limited to one owner."""

    async def producer() -> list[dict]:
        query = select(Store).order_by(Store.created_at.desc())
        if owner_id:
            query = query.where(Store.owner_id == owner_id)
        result = await session.execute(query)
        return [store_to_schema(store).model_dump(mode="json") for store in result.scalars().all()]

    rows = await cached_json(_store_list_key(owner_id), settings.api_cache_ttl_seconds, producer)
    return [StoreSchema(**row) for row in rows]


def to_store_item(store: StoreSchema) -> StoreItem:
    item = StoreItem(**store.model_dump())
    if store.distance is not None:
        item.distance_label = format_distance(store.distance)
        item.walking_minutes = calculate_duration(store.distance, settings.average_walking_speed_kmh)
    return item


def build_store_list_response(
    stores: list[StoreSchema],
    location: Optional[Location],
    limit: Optional[int] = None,
) -> StoreListResponse:
    ranking = build_store_ranking(stores, location, limit=limit)
    items = [to_store_item(store) for store in ranking.stores]
    return StoreListResponse(
        items=items,
        total=len(items),
        ranked=ranking.ranked,
        excluded_count=ranking.excluded_count,
        location=ranking.location,
    )


__all__ = ["build_store_list_response", "fetch_all_stores", "store_to_schema", "to_store_item"]
