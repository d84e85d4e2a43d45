from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from storefront.schemas.location import EnvironmentResponse, LocationResponse
from storefront.services.geolocation import LocationResolver, LocationUnavailableError
from storefront.webview.environment import PageContext, is_webview

logger = logging.getLogger(__name__)

router = APIRouter(tags=["location"])


@router.get("/location")
async def resolve_location(request: Request) -> LocationResponse:
    """Resolve the caller's location from what its host put in the URL.

    A host shell without a bridge passes ``locationPermission=true&lat=..&lng=..``.
    There is no browser geolocation on the server, so anything else is a 404.
    """
    context = PageContext.from_request(request)
    try:
        location, source = await LocationResolver().resolve_with_source(context)
    except LocationUnavailableError as exc:
        logger.info("Location unavailable for request: %s", exc.reason)
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return LocationResponse(location=location, source=source)


@router.get("/environment")
async def environment(request: Request) -> EnvironmentResponse:
    context = PageContext.from_request(request)
    return EnvironmentResponse(webview=is_webview(context), user_agent=context.user_agent)
