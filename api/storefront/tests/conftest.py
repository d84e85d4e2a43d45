"""Test fixtures and configuration for the storefront API tests."""
from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Iterator
from typing import Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


def pytest_configure(config):
    """Set up environment variables before any test imports happen."""
    os.environ["ENVIRONMENT"] = "development"
    os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
    os.environ["REDIS_URL"] = "redis://localhost:6379/0"
    os.environ["CORS_ORIGINS"] = "http://localhost:5173"

    try:
        from storefront.core.config import get_settings
        get_settings.cache_clear()
    except ImportError:
        pass


from contextlib import asynccontextmanager

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.db.base import Base
from storefront.schemas.location import Location, PositionOptions
from storefront.schemas.stores import StoreSchema
from storefront.webview.dom import HeadlessDocument
from storefront.webview.environment import PageContext
from storefront.webview.scheduling import ImmediateScheduler

ANDROID_WEBVIEW_UA = (
    "Mozilla/5.0 (Linux; Android 13; Pixel 7 Build/TQ3A.230805.001; wv) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Version/4.0 Chrome/118.0.0.0 Mobile Safari/537.36"
)
DESKTOP_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class FakeLocationBridge:
    """Stands in for the host's ``flutterLocationBridge``."""

    def __init__(
        self,
        granted: bool = True,
        result: Optional[dict] = None,
        permission_error: Optional[Exception] = None,
        location_error: Optional[Exception] = None,
    ) -> None:
        self.granted = granted
        self.result = result if result is not None else {"success": True, "latitude": 1.0, "longitude": 2.0}
        self.permission_error = permission_error
        self.location_error = location_error
        self.permission_calls = 0
        self.location_calls = 0

    async def get_location_permission(self) -> dict:
        self.permission_calls += 1
        if self.permission_error:
            raise self.permission_error
        return {"granted": self.granted}

    async def get_current_location(self) -> dict:
        self.location_calls += 1
        if self.location_error:
            raise self.location_error
        return self.result


class FakeGeolocation:
    """Stands in for ``navigator.geolocation``."""

    def __init__(
        self,
        location: Optional[Location] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.location = location or Location(latitude=37.5665, longitude=126.9780)
        self.error = error
        self.delay = delay
        self.calls: list[PositionOptions] = []

    async def get_current_position(self, options: PositionOptions) -> Location:
        self.calls.append(options)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.location


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncIterator[AsyncSession]:
    """Create an async session for testing."""
    factory = async_sessionmaker(async_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_redis():
    """Mock Redis client for tests."""
    mock = MagicMock()
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value=True)
    mock.ping = AsyncMock(return_value=True)
    mock.close = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def client(mock_redis) -> Iterator[TestClient]:
    """Create a test client with mocked dependencies."""
    from storefront.core.config import get_settings
    get_settings.cache_clear()

    mock_session = AsyncMock()
    mock_session.execute = AsyncMock(return_value=MagicMock(scalar=MagicMock(return_value=1)))

    @asynccontextmanager
    async def mock_get_session():
        yield mock_session

    @asynccontextmanager
    async def mock_transaction():
        yield mock_session

    async def mock_get_redis():
        return mock_redis

    with patch("storefront.routes.stores.get_async_session", mock_get_session), \
         patch("storefront.routes.health.async_transaction", mock_transaction), \
         patch("storefront.routes.health.get_redis_client", mock_get_redis), \
         patch("storefront.services.cache._cache._redis", mock_redis):
        from storefront.main import app
        with TestClient(app) as test_client:
            yield test_client


@pytest.fixture
def sample_stores() -> list[StoreSchema]:
    """Two stores with coordinates around a store without any."""
    return [
        StoreSchema(id="a", name="Store A", latitude=37.50, longitude=127.00),
        StoreSchema(id="b", name="Store B"),
        StoreSchema(id="c", name="Store C", latitude=37.51, longitude=127.01),
    ]


@pytest.fixture
def user_location() -> Location:
    return Location(latitude=37.52, longitude=127.02)


@pytest.fixture
def scheduler() -> ImmediateScheduler:
    return ImmediateScheduler()


@pytest.fixture
def document() -> HeadlessDocument:
    doc = HeadlessDocument()
    doc.add('[data-testid="list-container"]', height=640)
    return doc


@pytest.fixture
def browser_context(document) -> PageContext:
    """A plain desktop browser tab."""
    return PageContext(user_agent=DESKTOP_CHROME_UA, protocol="https:", document=document)


@pytest.fixture
def webview_context(document) -> PageContext:
    """An Android WebView hosted page."""
    return PageContext(user_agent=ANDROID_WEBVIEW_UA, protocol="https:", document=document)


@pytest.fixture
def bridge_factory():
    return FakeLocationBridge


@pytest.fixture
def geolocation_factory():
    return FakeGeolocation


@pytest.fixture
def test_settings():
    """Get test settings."""
    from storefront.core.config import get_settings
    get_settings.cache_clear()
    return get_settings()
