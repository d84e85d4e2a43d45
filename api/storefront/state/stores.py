from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from storefront.schemas.location import Location
from storefront.schemas.stores import StoreRanking, StoreSchema
from storefront.services.geolocation import LocationResolver, LocationUnavailableError
from storefront.services.rankings import build_store_ranking, count_stores_without_location
from storefront.webview.environment import PageContext

logger = logging.getLogger(__name__)

_generation = itertools.count(1)


@dataclass(frozen=True)
class RequestToken:
    generation: int


@dataclass
class StoreListState:
    """View state for the customer store list, owned by whoever composes the screen.

    Location requests are tokenised: a result arriving after a newer request
    started, or after ``close()``, is dropped instead of overwriting state.
    """

    stores: list[StoreSchema] = field(default_factory=list)
    location: Optional[Location] = None
    location_error: Optional[str] = None
    is_loading: bool = False
    is_location_loading: bool = False
    error: Optional[str] = None
    closed: bool = False
    _current: Optional[RequestToken] = field(default=None, repr=False)

    def set_stores(self, stores: Sequence[StoreSchema]) -> None:
        self.stores = list(stores)
        self.is_loading = False

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def set_error(self, message: str) -> None:
        self.error = message
        self.is_loading = False

    def clear_error(self) -> None:
        self.error = None

    def set_location(self, location: Optional[Location]) -> None:
        self.location = location
        self.location_error = None

    def set_location_error(self, message: str) -> None:
        self.location = None
        self.location_error = message

    @property
    def excluded_count(self) -> int:
        return count_stores_without_location(self.stores)

    def ranking(self, limit: Optional[int] = None) -> StoreRanking:
        return build_store_ranking(self.stores, self.location, limit=limit)

    def begin_location_request(self) -> RequestToken:
        token = RequestToken(next(_generation))
        self._current = token
        self.is_location_loading = True
        return token

    def is_current(self, token: RequestToken) -> bool:
        return not self.closed and self._current == token

    def apply_location(self, token: RequestToken, location: Location) -> bool:
        if not self.is_current(token):
            logger.debug("Dropping stale location result (request %d)", token.generation)
            return False
        self.set_location(location)
        self.is_location_loading = False
        return True

    def apply_location_error(self, token: RequestToken, message: str) -> bool:
        if not self.is_current(token):
            logger.debug("Dropping stale location error (request %d)", token.generation)
            return False
        self.set_location_error(message)
        self.is_location_loading = False
        return True

    async def load_location(self, resolver: LocationResolver, context: PageContext) -> Optional[Location]:
        token = self.begin_location_request()
        try:
            location = await resolver.resolve(context)
        except LocationUnavailableError as exc:
            self.apply_location_error(token, str(exc))
            return None
        return location if self.apply_location(token, location) else None

    def close(self) -> None:
        """Invalidate outstanding requests; call when the screen goes away."""
        self.closed = True
        self._current = None
        self.is_location_loading = False


__all__ = ["RequestToken", "StoreListState"]
