from __future__ import annotations

import logging
from typing import Optional, Sequence

from storefront.schemas.location import Location
from storefront.schemas.stores import StoreRanking, StoreSchema
from storefront.services.geospatial import calculate_distance

logger = logging.getLogger(__name__)


def has_coordinates(store: StoreSchema) -> bool:
    return store.latitude is not None and store.longitude is not None


def count_stores_without_location(stores: Sequence[StoreSchema]) -> int:
    return sum(1 for store in stores if not has_coordinates(store))


def _with_distance(store: StoreSchema, location: Location) -> StoreSchema:
    distance = calculate_distance(
        location.latitude,
        location.longitude,
        store.latitude,
        store.longitude,
    )
    return store.model_copy(update={"distance": distance})


def rank_stores_by_distance(
    stores: Sequence[StoreSchema],
    location: Optional[Location],
) -> list[StoreSchema]:
    """Annotate stores with their distance from ``location`` and sort nearest first.

    Stores without coordinates are dropped from the ranked output. When there is
    nothing to rank against (no location, no stores, or no store with
    coordinates) the input list is returned as-is with no distances attached.
    """
    if location is None or not stores:
        return list(stores)

    located = [store for store in stores if has_coordinates(store)]
    if not located:
        return list(stores)

    ranked = [_with_distance(store, location) for store in located]
    # list.sort is stable, so equal distances keep their input order.
    ranked.sort(key=lambda s: s.distance)
    return ranked


def nearby_stores(
    stores: Sequence[StoreSchema],
    location: Optional[Location],
    limit: int = 3,
) -> list[StoreSchema]:
    return rank_stores_by_distance(stores, location)[: max(limit, 0)]


def build_store_ranking(
    stores: Sequence[StoreSchema],
    location: Optional[Location],
    limit: Optional[int] = None,
) -> StoreRanking:
    ranked_stores = rank_stores_by_distance(stores, location)
    ranked = location is not None and any(has_coordinates(store) for store in stores)
    if limit is not None:
        ranked_stores = ranked_stores[: max(limit, 0)]

    excluded = count_stores_without_location(stores)
    if ranked and excluded:
        logger.debug("%d of %d stores excluded from distance sorting", excluded, len(stores))

    return StoreRanking(
        stores=ranked_stores,
        ranked=ranked,
        excluded_count=excluded,
        location=location,
    )


__all__ = [
    "build_store_ranking",
    "count_stores_without_location",
    "has_coordinates",
    "nearby_stores",
    "rank_stores_by_distance",
]
