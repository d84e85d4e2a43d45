from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storefront.core.config import get_settings
from storefront.core.logging import configure_logging
from storefront.db.session import dispose_engine
from storefront.middleware import (
    RateLimitExceeded,
    SecurityHeadersMiddleware,
    _rate_limit_exceeded_handler,
    get_limiter,
)
from storefront.routes import health, location, stores

configure_logging()
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    await dispose_engine()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Rate limiting
limiter = get_limiter()
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(health.router)
app.include_router(stores.router)
app.include_router(location.router)

app.add_middleware(SecurityHeadersMiddleware)

# Development: allow the Vite dev server and the emulator's host loopback.
# Production: only the configured origins, never a wildcard with credentials.
if settings.environment == "development":
    cors_origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://10.0.2.2:5173",  # Android emulator WebView
    ]
else:
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    if "*" in cors_origins:
        logger.error("SECURITY ERROR: Cannot use wildcard CORS origins with credentials in production!")
        raise ValueError("Invalid CORS configuration: wildcard origins with credentials not allowed")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request.state.request_id = request.headers.get("x-request-id", datetime.now(timezone.utc).isoformat())
    response = await call_next(request)
    response.headers["x-request-id"] = request.state.request_id
    return response


@app.exception_handler(ValidationError)
async def validation_exception_handler(_: Request, exc: ValidationError) -> JSONResponse:
    """Handle Pydantic validation errors and return 422 with details."""
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


__all__ = ["app"]
