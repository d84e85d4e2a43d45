from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    """A single resolved (latitude, longitude) fix. Must be finite; ranges are not validated."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)


class PermissionResult(BaseModel):
    granted: bool = False


class BridgeLocationResult(BaseModel):
    success: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PositionOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(10_000, ge=0)
    maximum_age_ms: int = Field(5 * 60 * 1000, ge=0)
    enable_high_accuracy: bool = True


class LocationResponse(BaseModel):
    location: Location
    source: str = Field(description="bridge, url or browser")


class EnvironmentResponse(BaseModel):
    webview: bool
    user_agent: str


__all__ = [
    "BridgeLocationResult",
    "EnvironmentResponse",
    "Location",
    "LocationResponse",
    "PermissionResult",
    "PositionOptions",
]
