from __future__ import annotations

import functools

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Storefront API"
    environment: str = "development"

    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/storefront"
    redis_url: str = "redis://redis:6379/0"

    api_cache_ttl_seconds: int = 60

    # CORS configuration
    cors_origins: str = "*"

    # Browser geolocation fallback
    geolocation_timeout_ms: int = 10_000
    geolocation_maximum_age_ms: int = 5 * 60 * 1000
    geolocation_high_accuracy: bool = True
    permission_probe_timeout_ms: int = 5_000

    # WebView render/timing workarounds
    data_loading_delay_ms: int = 100
    logout_delay_ms: int = 150
    list_container_selector: str = '[data-testid="list-container"]'

    nearby_store_limit: int = 3
    average_walking_speed_kmh: float = 5.0

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @field_validator(
        "geolocation_timeout_ms",
        "geolocation_maximum_age_ms",
        "permission_probe_timeout_ms",
        "data_loading_delay_ms",
        "logout_delay_ms",
    )
    @classmethod
    def validate_non_negative_ms(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Timing values must be >= 0 ms (got {v})")
        return v

    @field_validator("nearby_store_limit")
    @classmethod
    def validate_nearby_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("nearby_store_limit must be at least 1")
        return v

    @field_validator("average_walking_speed_kmh")
    @classmethod
    def validate_walking_speed(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("average_walking_speed_kmh must be positive")
        return v


@functools.lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
