from __future__ import annotations

import asyncio
import logging
import math
from typing import Mapping, Optional

from storefront.core.config import Settings, get_settings
from storefront.schemas.location import Location, PositionOptions
from storefront.webview.bridge import (
    GeolocationPositionError,
    maybe_await,
    parse_bridge_location,
    parse_permission,
)
from storefront.webview.environment import PageContext

logger = logging.getLogger(__name__)

LOCATION_UNAVAILABLE_MESSAGE = "unable to obtain real location"

SOURCE_BRIDGE = "bridge"
SOURCE_URL = "url"
SOURCE_BROWSER = "browser"


class LocationUnavailableError(Exception):
    """No source could produce a real position. Callers must not substitute a default."""

    def __init__(self, message: str = LOCATION_UNAVAILABLE_MESSAGE, *, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason


def _parse_coordinate(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def location_from_params(params: Mapping[str, str]) -> Optional[Location]:
    lat = _parse_coordinate(params.get("lat"))
    lng = _parse_coordinate(params.get("lng"))
    if lat is None or lng is None:
        return None
    return Location(latitude=lat, longitude=lng)


async def check_location_permission(context: PageContext) -> bool:
    """Ask the host whether location permission was granted.

    The bridge is authoritative when present; otherwise the host may pass
    ``locationPermission=true`` in the URL. Anything else means "not granted".
    """
    bridge = context.location_bridge
    if bridge is not None and hasattr(bridge, "get_location_permission"):
        try:
            result = parse_permission(await maybe_await(bridge.get_location_permission()))
        except Exception as exc:
            logger.warning("Bridge permission query failed: %s", exc)
            return False
        return result.granted
    return context.query_params.get("locationPermission") == "true"


async def get_bridge_location(context: PageContext) -> Optional[Location]:
    location, _source = await _bridge_location_with_source(context)
    return location


async def _bridge_location_with_source(context: PageContext) -> tuple[Optional[Location], Optional[str]]:
    bridge = context.location_bridge
    if bridge is not None and hasattr(bridge, "get_current_location"):
        try:
            result = parse_bridge_location(await maybe_await(bridge.get_current_location()))
        except Exception as exc:
            logger.warning("Bridge location fetch failed: %s", exc)
            return None, None
        if result is None or not result.success or result.latitude is None or result.longitude is None:
            logger.debug("Bridge returned no usable location: %r", result)
            return None, None
        if not (math.isfinite(result.latitude) and math.isfinite(result.longitude)):
            return None, None
        return Location(latitude=result.latitude, longitude=result.longitude), SOURCE_BRIDGE

    location = location_from_params(context.query_params)
    return location, (SOURCE_URL if location is not None else None)


async def get_browser_location(context: PageContext, options: Optional[PositionOptions] = None) -> Location:
    options = options or PositionOptions()
    geolocation = context.geolocation
    if geolocation is None:
        raise LocationUnavailableError(reason="geolocation API not available")

    try:
        return await asyncio.wait_for(
            geolocation.get_current_position(options),
            timeout=options.timeout_ms / 1000,
        )
    except asyncio.TimeoutError as exc:
        logger.warning("Browser geolocation timed out after %d ms", options.timeout_ms)
        raise LocationUnavailableError(reason="timeout") from exc
    except GeolocationPositionError as exc:
        logger.warning("Browser geolocation failed (code %s): %s", exc.code, exc.message)
        raise LocationUnavailableError(reason=f"geolocation error {exc.code}") from exc
    except LocationUnavailableError:
        raise
    except Exception as exc:
        logger.warning("Browser geolocation failed: %s", exc)
        raise LocationUnavailableError(reason=str(exc)) from exc


async def resolve_location_with_source(
    context: PageContext,
    options: Optional[PositionOptions] = None,
) -> tuple[Location, str]:
    if await check_location_permission(context):
        location, source = await _bridge_location_with_source(context)
        if location is not None:
            logger.debug("Location resolved from %s", source)
            return location, source

    location = await get_browser_location(context, options)
    logger.debug("Location resolved from browser geolocation")
    return location, SOURCE_BROWSER


async def resolve_location(context: PageContext, options: Optional[PositionOptions] = None) -> Location:
    """Resolve one best-effort position: host bridge first, then the browser API.

    Raises LocationUnavailableError when nothing works; no default coordinate is
    ever returned.
    """
    location, _source = await resolve_location_with_source(context, options)
    return location


async def request_location_permission(context: PageContext, timeout_ms: int = 5_000) -> bool:
    """Probe the browser API to trigger its permission prompt. Never raises."""
    try:
        await get_browser_location(context, PositionOptions(timeout_ms=timeout_ms, enable_high_accuracy=False))
    except LocationUnavailableError:
        return False
    return True


class LocationResolver:
    """Location resolution bound to the configured browser-fallback options."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    @property
    def options(self) -> PositionOptions:
        return PositionOptions(
            timeout_ms=self.settings.geolocation_timeout_ms,
            maximum_age_ms=self.settings.geolocation_maximum_age_ms,
            enable_high_accuracy=self.settings.geolocation_high_accuracy,
        )

    async def resolve(self, context: PageContext) -> Location:
        return await resolve_location(context, self.options)

    async def resolve_with_source(self, context: PageContext) -> tuple[Location, str]:
        return await resolve_location_with_source(context, self.options)

    async def request_permission(self, context: PageContext) -> bool:
        return await request_location_permission(context, self.settings.permission_probe_timeout_ms)


__all__ = [
    "LOCATION_UNAVAILABLE_MESSAGE",
    "LocationResolver",
    "LocationUnavailableError",
    "check_location_permission",
    "get_bridge_location",
    "get_browser_location",
    "location_from_params",
    "request_location_permission",
    "resolve_location",
    "resolve_location_with_source",
]
