"""Embedded WebView support: environment detection and render/timing workarounds."""
from __future__ import annotations

from storefront.webview.coordinator import RenderCoordinator
from storefront.webview.dom import HeadlessDocument, HeadlessElement, TouchEvent
from storefront.webview.environment import PageContext, detector_for, is_webview
from storefront.webview.scheduling import AsyncioScheduler, ImmediateScheduler

__all__ = [
    "AsyncioScheduler",
    "HeadlessDocument",
    "HeadlessElement",
    "ImmediateScheduler",
    "PageContext",
    "RenderCoordinator",
    "TouchEvent",
    "detector_for",
    "is_webview",
]
