"""Rendering and timing workarounds for pages hosted in an embedded WebView.

Some WebView hosts paint a blank first frame, ignore input until the first
touch, or keep showing a stale list after data arrives. Each method here is a
self-contained, best-effort mitigation: outside a WebView it passes straight
through, and inside one any failure is logged and the caller's callback still
runs.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from storefront.core.config import Settings, get_settings
from storefront.webview.bridge import maybe_await
from storefront.webview.dom import Element, TouchEvent
from storefront.webview.environment import PageContext, WebViewDetector, detector_for
from storefront.webview.scheduling import AsyncioScheduler, Scheduler, defer_frames

logger = logging.getLogger(__name__)

Callback = Callable[[], Any]

NEAR_OPAQUE = "0.99"
COMPOSITING_HINT = "translateZ(0)"


class RenderCoordinator:
    def __init__(
        self,
        context: PageContext,
        detector: Optional[WebViewDetector] = None,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.context = context
        self.detector = detector or detector_for(context)
        self.scheduler = scheduler or AsyncioScheduler()
        self.settings = settings or get_settings()

    @property
    def active(self) -> bool:
        try:
            return bool(self.detector())
        except Exception as exc:
            logger.warning("WebView detection failed, treating page as a browser tab: %s", exc)
            return False

    def _dispatch_touch(self, target: Optional[Element]) -> None:
        if target is None:
            return
        try:
            target.dispatch_event(TouchEvent("touchstart", bubbles=True, cancelable=True))
        except Exception as exc:
            logger.warning("Synthetic touchstart dispatch failed: %s", exc)

    def _body(self) -> Optional[Element]:
        document = self.context.document
        if document is None:
            return None
        try:
            return document.body
        except Exception as exc:
            logger.warning("Document body unavailable: %s", exc)
            return None

    def _query(self, selector: str) -> Optional[Element]:
        document = self.context.document
        if document is None:
            return None
        try:
            return document.query_selector(selector)
        except Exception as exc:
            logger.warning("Container lookup failed for %s: %s", selector, exc)
            return None

    async def optimize_transition(self, callback: Optional[Callback] = None) -> Any:
        """Wake the WebView with a touch and let two frames paint before ``callback``."""
        if not self.active:
            return await maybe_await(callback()) if callback else None

        self._dispatch_touch(self._body())
        try:
            await defer_frames(self.scheduler, 2)
        except Exception as exc:
            logger.warning("Frame deferral failed, running transition callback now: %s", exc)
        return await maybe_await(callback()) if callback else None

    async def optimize_data_loading(self, loader: Callback, delay_ms: Optional[int] = None) -> Any:
        if not self.active:
            return await maybe_await(loader())

        delay = self.settings.data_loading_delay_ms if delay_ms is None else delay_ms
        try:
            await self.scheduler.sleep(delay / 1000)
        except Exception as exc:
            logger.warning("Data loading delay failed, loading immediately: %s", exc)
        return await maybe_await(loader())

    async def optimize_list_rendering(
        self,
        selector: Optional[str] = None,
        on_ready: Optional[Callback] = None,
    ) -> Any:
        """Force a repaint of a freshly populated list container."""
        selector = selector or self.settings.list_container_selector
        container = self._query(selector) if self.active else None
        if container is None:
            return await maybe_await(on_ready()) if on_ready else None

        try:
            container.style["opacity"] = NEAR_OPAQUE
            container.offset_height  # noqa: B018 - forces layout
            await defer_frames(self.scheduler, 2)
            container.style["opacity"] = "1"
            container.style["transform"] = COMPOSITING_HINT
        except Exception as exc:
            logger.warning("List repaint workaround failed for %s: %s", selector, exc)
        self._dispatch_touch(container)
        return await maybe_await(on_ready()) if on_ready else None

    def optimize_scroll(self, selector: Optional[str] = None) -> bool:
        """Apply momentum-scrolling hints to a container. Returns False if none was found."""
        selector = selector or self.settings.list_container_selector
        container = self._query(selector) if self.active else None
        if container is None:
            return False

        def keep_composited(_event: object) -> None:
            container.style["transform"] = COMPOSITING_HINT

        try:
            container.style["-webkit-overflow-scrolling"] = "touch"
            container.style["overscroll-behavior"] = "contain"
            container.style["will-change"] = "transform"
            container.add_event_listener("scroll", keep_composited, passive=True)
        except Exception as exc:
            logger.warning("Scroll hints could not be applied to %s: %s", selector, exc)
            return False
        return True

    def _clear_storage(self) -> None:
        for name, storage in (
            ("localStorage", self.context.local_storage),
            ("sessionStorage", self.context.session_storage),
        ):
            try:
                storage.clear()
            except Exception as exc:
                logger.warning("%s clear failed (ignored): %s", name, exc)

    async def _run_logout(self, logout: Callable[[], Awaitable[Any]], on_complete: Optional[Callback]) -> None:
        try:
            await maybe_await(logout())
        except Exception as exc:
            logger.error("Logout callback failed, finishing logout anyway: %s", exc)
        if on_complete is not None:
            try:
                await maybe_await(on_complete())
            except Exception as exc:
                logger.warning("Post-logout cleanup failed: %s", exc)

    async def optimize_logout(
        self,
        logout: Callable[[], Awaitable[Any]],
        on_complete: Optional[Callback] = None,
    ) -> None:
        """Run ``logout`` so that the UI can never be left stuck. Never raises."""
        helper = self.context.logout_helper
        if helper is None:
            await self._run_logout(logout, on_complete)
            return

        logger.info("Running host-assisted logout")
        self._clear_storage()
        try:
            await maybe_await(helper())
        except Exception as exc:
            logger.warning("Host logout helper failed: %s", exc)

        try:
            await self.scheduler.sleep(self.settings.logout_delay_ms / 1000)
            await self.scheduler.next_frame()
        except Exception as exc:
            logger.warning("Logout deferral failed, continuing now: %s", exc)
        await self._run_logout(logout, on_complete)


__all__ = ["RenderCoordinator"]
