"""Middleware for the storefront API."""
from __future__ import annotations

from storefront.middleware.rate_limit import (
    RateLimitExceeded,
    _rate_limit_exceeded_handler,
    get_limiter,
)
from storefront.middleware.security import SecurityHeadersMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "get_limiter",
    "RateLimitExceeded",
    "_rate_limit_exceeded_handler",
]
