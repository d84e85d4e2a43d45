"""Tests for the store list and session state containers."""
from __future__ import annotations

import pytest

from storefront.schemas.location import Location
from storefront.services.geolocation import LocationResolver
from storefront.state.session import SessionState, SessionUser
from storefront.state.stores import StoreListState
from storefront.webview.bridge import PERMISSION_DENIED, GeolocationPositionError
from storefront.webview.environment import PageContext


class TestStoreListState:
    """Tests for StoreListState actions."""

    def test_set_stores_clears_loading(self, sample_stores):
        state = StoreListState(is_loading=True)
        state.set_stores(sample_stores)
        assert len(state.stores) == 3
        assert state.is_loading is False

    def test_ranking_without_location(self, sample_stores):
        state = StoreListState()
        state.set_stores(sample_stores)
        ranking = state.ranking()
        assert ranking.ranked is False
        assert [s.id for s in ranking.stores] == ["a", "b", "c"]

    def test_ranking_with_location(self, sample_stores, user_location):
        state = StoreListState()
        state.set_stores(sample_stores)
        state.set_location(user_location)
        ranking = state.ranking()
        assert [s.id for s in ranking.stores] == ["c", "a"]
        assert state.excluded_count == 1

    def test_location_error_clears_location(self, user_location):
        state = StoreListState(location=user_location)
        state.set_location_error("unable to obtain real location")
        assert state.location is None
        assert state.location_error == "unable to obtain real location"

    def test_error_actions(self):
        state = StoreListState(is_loading=True)
        state.set_error("failed")
        assert state.is_loading is False
        state.clear_error()
        assert state.error is None


class TestLocationRequestGuard:
    """Tests for stale-result protection on location requests."""

    def test_newer_request_wins(self, user_location):
        state = StoreListState()
        first = state.begin_location_request()
        second = state.begin_location_request()

        assert state.apply_location(first, Location(latitude=0, longitude=0)) is False
        assert state.apply_location(second, user_location) is True
        assert state.location == user_location
        assert state.is_location_loading is False

    def test_closed_state_ignores_results(self, user_location):
        state = StoreListState()
        token = state.begin_location_request()
        state.close()

        assert state.apply_location(token, user_location) is False
        assert state.apply_location_error(token, "late") is False
        assert state.location is None
        assert state.location_error is None

    @pytest.mark.asyncio
    async def test_load_location_success(self, geolocation_factory):
        state = StoreListState()
        geolocation = geolocation_factory(location=Location(latitude=1, longitude=2))

        location = await state.load_location(LocationResolver(), PageContext(geolocation=geolocation))

        assert location == Location(latitude=1, longitude=2)
        assert state.location == location
        assert state.is_location_loading is False

    @pytest.mark.asyncio
    async def test_load_location_failure_has_no_default(self, geolocation_factory):
        state = StoreListState()
        geolocation = geolocation_factory(error=GeolocationPositionError(PERMISSION_DENIED))

        location = await state.load_location(LocationResolver(), PageContext(geolocation=geolocation))

        assert location is None
        assert state.location is None
        assert state.location_error == "unable to obtain real location"


class TestSessionState:
    def test_sign_in_and_out(self):
        state = SessionState()
        assert state.is_authenticated is False
        state.sign_in(SessionUser(uid="u1", email="owner@example.com", role="store_owner"))
        assert state.is_authenticated is True
        state.sign_out()
        assert state.user is None
