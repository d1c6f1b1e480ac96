"""
DOM adapter contract used by the navigation controller.

The controller never touches a document directly; everything goes through an
object implementing `DomAdapter`. Elements are addressed by their id.
"""
from __future__ import annotations

from typing import Callable, Optional, Protocol

from .events import DomEvent

# Pseudo targets for listeners that live outside the element tree.
WINDOW = "@window"
DOCUMENT = "@document"
BODY = "@body"

# Element ids and classes the page is required to expose.
HAMBURGER_MENU = "hamburgerMenu"
SIDEBAR = "sidebar"
SIDEBAR_CLOSE = "sidebarClose"
SIDEBAR_OVERLAY = "sidebarOverlay"
PAGE_LOADER = "pageLoader"
NAVBAR = "navbar"
SIDEBAR_LINK_CLASS = "sidebar-link"
SECTION_CLASS = "section"

ACTIVE_CLASS = "active"
SCROLLED_CLASS = "scrolled"
HIDDEN_CLASS = "hidden"
PAGE_LOADED_CLASS = "page-loaded"

Listener = Callable[[DomEvent], None]
RemoveListener = Callable[[], None]


class DomAdapter(Protocol):
    """Capabilities the navigation controller needs from a document."""

    title: str

    def exists(self, element_id: str) -> bool: ...

    def ids_with_class(self, class_name: str) -> list[str]: ...

    def add_class(self, element_id: str, class_name: str) -> None: ...

    def remove_class(self, element_id: str, class_name: str) -> None: ...

    def has_class(self, element_id: str, class_name: str) -> bool: ...

    def set_attribute(self, element_id: str, name: str, value: str) -> None: ...

    def get_attribute(self, element_id: str, name: str) -> Optional[str]: ...

    def focus(self, element_id: str) -> None: ...

    @property
    def active_element(self) -> Optional[str]: ...

    def focusable_within(self, element_id: str) -> list[str]: ...

    def add_listener(self, target: str, event_type: str, listener: Listener) -> RemoveListener: ...

    def set_scroll_locked(self, locked: bool) -> None: ...

    def scroll_to_top(self, smooth: bool = True) -> None: ...

    @property
    def scroll_y(self) -> float: ...

    @property
    def hidden(self) -> bool: ...

    def append_live_region(self, message: str) -> str: ...

    def remove_node(self, node_id: str) -> None: ...


class HistoryAdapter(Protocol):
    """The slice of `window.location` / `window.history` the router uses."""

    @property
    def hash(self) -> str: ...

    def push(self, url_hash: str) -> None: ...

    def replace(self, url_hash: str) -> None: ...


class StorageAdapter(Protocol):
    """`localStorage`-like key/value store. Either method may raise."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...
