"""Native host surfaces a page may or may not have.

A Flutter (or other) host shell can inject a location bridge and a logout
helper into the page. A regular browser offers only the standard geolocation
API. Every one of these is optional and its absence is a normal state.
"""
from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Optional, Protocol, Union, runtime_checkable

from storefront.schemas.location import BridgeLocationResult, Location, PermissionResult, PositionOptions

PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class GeolocationPositionError(Exception):
    """Error raised by a browser geolocation implementation."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"geolocation error {code}")
        self.code = code
        self.message = message


@runtime_checkable
class LocationBridge(Protocol):
    """Host-side location bridge (``window.flutterLocationBridge``)."""

    def get_location_permission(self) -> Union[PermissionResult, dict, Awaitable[Any]]: ...

    def get_current_location(self) -> Union[BridgeLocationResult, dict, Awaitable[Any]]: ...


@runtime_checkable
class BrowserGeolocation(Protocol):
    """The browser's ``navigator.geolocation.getCurrentPosition`` contract."""

    async def get_current_position(self, options: PositionOptions) -> Location: ...


LogoutHelper = Callable[[], Any]


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def parse_permission(raw: Any) -> PermissionResult:
    if isinstance(raw, PermissionResult):
        return raw
    if isinstance(raw, dict):
        return PermissionResult.model_validate(raw)
    return PermissionResult(granted=raw is True)


def parse_bridge_location(raw: Any) -> Optional[BridgeLocationResult]:
    if isinstance(raw, BridgeLocationResult):
        return raw
    if isinstance(raw, dict):
        return BridgeLocationResult.model_validate(raw)
    return None


__all__ = [
    "BrowserGeolocation",
    "GeolocationPositionError",
    "LocationBridge",
    "LogoutHelper",
    "PERMISSION_DENIED",
    "POSITION_UNAVAILABLE",
    "TIMEOUT",
    "maybe_await",
    "parse_bridge_location",
    "parse_permission",
]
