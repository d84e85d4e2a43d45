"""Rate limiting for the storefront API."""
from __future__ import annotations

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from storefront.core.config import get_settings


def get_limiter() -> Limiter:
    """
    Per-client-IP limiter.

    Production shares counters through Redis so every replica enforces the
    same budget; elsewhere counters live in memory.
    """
    settings = get_settings()
    storage_uri = str(settings.redis_url) if settings.environment == "production" else "memory://"

    return Limiter(
        key_func=get_remote_address,
        # Store lists are re-requested on every WebView resume, so allow bursts.
        default_limits=["120/minute"],
        storage_uri=storage_uri,
    )


__all__ = ["get_limiter", "RateLimitExceeded", "_rate_limit_exceeded_handler"]
