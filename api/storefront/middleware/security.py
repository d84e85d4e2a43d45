"""Security headers middleware."""
from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from storefront.core.config import get_settings

# The storefront talks to its own API plus the hosted auth/document backend.
_BACKEND_ORIGINS = "https://*.googleapis.com https://*.firebaseio.com"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every response.

    Geolocation stays allowed for our own origin: the browser fallback of the
    location resolver depends on it when no host bridge is injected.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        settings = get_settings()
        is_production = settings.environment == "production"

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"

        if is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        connect_src = f"connect-src 'self' {_BACKEND_ORIGINS}"
        if is_production:
            csp_directives = [
                "default-src 'self'",
                "script-src 'self'",
                "style-src 'self'",
                "img-src 'self' data: https:",
                connect_src,
                "frame-ancestors 'none'",
                "base-uri 'self'",
            ]
        else:
            # Development: the Vite dev server needs inline scripts and websockets.
            csp_directives = [
                "default-src 'self'",
                "script-src 'self' 'unsafe-inline' 'unsafe-eval'",
                "style-src 'self' 'unsafe-inline'",
                "img-src 'self' data: https:",
                f"{connect_src} ws://localhost:* http://localhost:*",
                "frame-ancestors 'none'",
            ]
        response.headers["Content-Security-Policy"] = "; ".join(csp_directives)
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = ", ".join(
            [
                "geolocation=(self)",
                "microphone=()",
                "camera=()",
                "payment=()",
            ]
        )
        return response


__all__ = ["SecurityHeadersMiddleware"]
