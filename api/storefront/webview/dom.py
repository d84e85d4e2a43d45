from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Tuple


@dataclass(frozen=True)
class TouchEvent:
    type: str = "touchstart"
    bubbles: bool = True
    cancelable: bool = True


class EventNotSupportedError(RuntimeError):
    """The platform cannot construct or dispatch the requested event type."""


EventListener = Callable[[object], None]


class Element(Protocol):
    style: Dict[str, str]

    @property
    def offset_height(self) -> int: ...

    def dispatch_event(self, event: TouchEvent) -> bool: ...

    def add_event_listener(self, event_type: str, listener: EventListener, passive: bool = False) -> None: ...


class Document(Protocol):
    @property
    def body(self) -> Element: ...

    def query_selector(self, selector: str) -> Optional[Element]: ...


@dataclass
class HeadlessElement:
    """In-process element for non-browser targets.

    Records every style read-back and dispatched event so callers can see what a
    real page would have received.
    """

    selector: str = "body"
    style: Dict[str, str] = field(default_factory=dict)
    height: int = 0
    supports_touch: bool = True
    dispatched: List[TouchEvent] = field(default_factory=list)
    listeners: List[Tuple[str, EventListener, bool]] = field(default_factory=list)
    layout_reads: int = 0

    @property
    def offset_height(self) -> int:
        self.layout_reads += 1
        return self.height

    def dispatch_event(self, event: TouchEvent) -> bool:
        if not self.supports_touch and event.type.startswith("touch"):
            raise EventNotSupportedError(f"{event.type} is not supported on this platform")
        self.dispatched.append(event)
        for event_type, listener, _passive in list(self.listeners):
            if event_type == event.type:
                listener(event)
        return True

    def add_event_listener(self, event_type: str, listener: EventListener, passive: bool = False) -> None:
        self.listeners.append((event_type, listener, passive))

    def fire(self, event_type: str) -> None:
        for listened, listener, _passive in list(self.listeners):
            if listened == event_type:
                listener(event_type)


@dataclass
class HeadlessDocument:
    body: HeadlessElement = field(default_factory=HeadlessElement)
    elements: Dict[str, HeadlessElement] = field(default_factory=dict)

    def add(self, selector: str, **kwargs) -> HeadlessElement:
        element = HeadlessElement(selector=selector, **kwargs)
        self.elements[selector] = element
        return element

    def query_selector(self, selector: str) -> Optional[HeadlessElement]:
        if selector == "body":
            return self.body
        return self.elements.get(selector)


__all__ = [
    "Document",
    "Element",
    "EventNotSupportedError",
    "HeadlessDocument",
    "HeadlessElement",
    "TouchEvent",
]
