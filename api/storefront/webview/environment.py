from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Mapping, MutableMapping, Optional

from starlette.requests import Request

from storefront.webview.bridge import BrowserGeolocation, LocationBridge, LogoutHelper
from storefront.webview.dom import Document

WEBVIEW_UA_KEYWORDS: FrozenSet[str] = frozenset(
    {"wv", "webview", "app", "flutter", "react-native", "cordova", "phonegap"}
)

# Too common inside other words (AppleWebKit) to match as a substring.
WHOLE_TOKEN_KEYWORDS: FrozenSet[str] = frozenset({"app"})

# Globals a native host shell injects into the page.
BRIDGE_GLOBALS: FrozenSet[str] = frozenset(
    {
        "flutterLocationBridge",
        "flutterLogoutHelper",
        "isFlutterWebView",
        "flutter_inappwebview",
        "ReactNativeWebView",
    }
)

_UA_TOKEN = re.compile(r"[a-z0-9]+")

WebViewDetector = Callable[[], bool]


@dataclass
class PageContext:
    """Everything the location and WebView helpers may read about one page."""

    user_agent: str = ""
    protocol: str = "https:"
    query_params: Mapping[str, str] = field(default_factory=dict)
    standalone: bool = False
    # Android WebViews send the host app package in X-Requested-With.
    requested_with: str = ""
    host_globals: FrozenSet[str] = frozenset()
    location_bridge: Optional[LocationBridge] = None
    logout_helper: Optional[LogoutHelper] = None
    geolocation: Optional[BrowserGeolocation] = None
    document: Optional[Document] = None
    local_storage: MutableMapping[str, str] = field(default_factory=dict)
    session_storage: MutableMapping[str, str] = field(default_factory=dict)

    def has_bridge_global(self) -> bool:
        if self.location_bridge is not None or self.logout_helper is not None:
            return True
        return bool(self.host_globals & BRIDGE_GLOBALS)

    @classmethod
    def from_request(cls, request: Request) -> "PageContext":
        return cls(
            user_agent=request.headers.get("user-agent", ""),
            protocol=f"{request.url.scheme}:",
            query_params=dict(request.query_params),
            requested_with=request.headers.get("x-requested-with", ""),
        )


def user_agent_tokens(user_agent: str) -> set[str]:
    return set(_UA_TOKEN.findall(user_agent.lower()))


def _user_agent_matches(user_agent: str) -> bool:
    lowered = user_agent.lower()
    for keyword in WEBVIEW_UA_KEYWORDS - WHOLE_TOKEN_KEYWORDS:
        if keyword in lowered:
            return True
    return bool(user_agent_tokens(user_agent) & WHOLE_TOKEN_KEYWORDS)


def is_webview(context: PageContext) -> bool:
    """Heuristically classify the page as running inside an embedded WebView.

    Keywords match anywhere in the user agent, except ``app`` which must be
    a whole token so that ``AppleWebKit`` does not count.

    Besides the user agent, a known bridge global, a ``file:`` page and the
    standalone display flag, an ``X-Requested-With`` header naming an app
    package also counts: Android WebViews send it, while browsers send
    either nothing or ``XMLHttpRequest``.
    """
    if _user_agent_matches(context.user_agent):
        return True
    if context.has_bridge_global():
        return True
    if context.requested_with and context.requested_with != "XMLHttpRequest":
        return True
    if context.protocol == "file:":
        return True
    return context.standalone is True


def detector_for(context: PageContext) -> WebViewDetector:
    return lambda: is_webview(context)


__all__ = [
    "BRIDGE_GLOBALS",
    "PageContext",
    "WEBVIEW_UA_KEYWORDS",
    "WHOLE_TOKEN_KEYWORDS",
    "WebViewDetector",
    "detector_for",
    "is_webview",
    "user_agent_tokens",
]
