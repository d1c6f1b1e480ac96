"""
In-memory implementations of the DOM, history and storage adapters.

`build_page_document()` lays out the element tree the site's shell exposes, so
the controller can run end to end without a browser.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from mes_shared import ErrorCode, get_logger

from .dom import (
    BODY,
    DOCUMENT,
    HAMBURGER_MENU,
    NAVBAR,
    PAGE_LOADER,
    SECTION_CLASS,
    SIDEBAR,
    SIDEBAR_CLOSE,
    SIDEBAR_LINK_CLASS,
    SIDEBAR_OVERLAY,
    WINDOW,
    Listener,
    RemoveListener,
)
from .events import DomEvent, ErrorEvent, KeyEvent, click
from .state import BASE_TITLE, SECTION_IDS, section_name
from .storage import StorageError

logger = get_logger(__name__)

_FOCUSABLE_TAGS = frozenset({"button", "input", "select", "textarea"})


@dataclass
class MemoryElement:
    id: str
    tag: str = "div"
    parent: Optional[str] = None
    classes: set[str] = field(default_factory=set)
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[str] = field(default_factory=list)
    text: str = ""

    @property
    def focusable(self) -> bool:
        if self.tag in _FOCUSABLE_TAGS:
            return True
        if self.tag == "a" and "href" in self.attributes:
            return True
        tabindex = self.attributes.get("tabindex")
        return tabindex is not None and tabindex != "-1"


class MemoryDocument:
    """A small element tree implementing `DomAdapter`."""

    def __init__(self, title: str = ""):
        self._title = title
        self.elements: dict[str, MemoryElement] = {BODY: MemoryElement(BODY, tag="body")}
        self._listeners: dict[tuple[str, str], list[Listener]] = {}
        self._node_seq = itertools.count(1)
        self._active: Optional[str] = None
        self._hidden = False
        self.scroll_y_value = 0.0
        self.scroll_locked = False
        self.scroll_requests: list[bool] = []
        self.announcements: list[str] = []
        self.mutations = 0

    # --- tree building ---

    def create_element(
        self,
        element_id: str,
        tag: str = "div",
        parent: str = BODY,
        classes: Iterable[str] = (),
        text: str = "",
        **attributes: str,
    ) -> str:
        if element_id in self.elements:
            raise ValueError(f"Duplicate element id {element_id!r}")
        self._get(parent).children.append(element_id)
        self.elements[element_id] = MemoryElement(
            element_id,
            tag=tag,
            parent=parent,
            classes=set(classes),
            attributes={k.replace("_", "-"): str(v) for k, v in attributes.items()},
            text=text,
        )
        return element_id

    def remove_node(self, node_id: str) -> None:
        element = self.elements.pop(node_id, None)
        if element is None:
            return
        if element.parent in self.elements:
            self.elements[element.parent].children.remove(node_id)
        for child in list(element.children):
            self.remove_node(child)
        if self._active == node_id:
            self._active = None
        self.mutations += 1

    def _get(self, element_id: str) -> MemoryElement:
        try:
            return self.elements[element_id]
        except KeyError:
            raise KeyError(f"No element with id {element_id!r}") from None

    def _walk(self, element_id: str) -> Iterator[MemoryElement]:
        for child_id in self._get(element_id).children:
            child = self.elements[child_id]
            yield child
            yield from self._walk(child_id)

    # --- DomAdapter ---

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: str) -> None:
        if value != self._title:
            self._title = value
            self.mutations += 1

    def exists(self, element_id: str) -> bool:
        return element_id in self.elements

    def ids_with_class(self, class_name: str) -> list[str]:
        return [el.id for el in self._walk(BODY) if class_name in el.classes]

    def add_class(self, element_id: str, class_name: str) -> None:
        classes = self._get(element_id).classes
        if class_name not in classes:
            classes.add(class_name)
            self.mutations += 1

    def remove_class(self, element_id: str, class_name: str) -> None:
        classes = self._get(element_id).classes
        if class_name in classes:
            classes.discard(class_name)
            self.mutations += 1

    def has_class(self, element_id: str, class_name: str) -> bool:
        return class_name in self._get(element_id).classes

    def set_attribute(self, element_id: str, name: str, value: str) -> None:
        attributes = self._get(element_id).attributes
        if attributes.get(name) != value:
            attributes[name] = value
            self.mutations += 1

    def get_attribute(self, element_id: str, name: str) -> Optional[str]:
        return self._get(element_id).attributes.get(name)

    def focus(self, element_id: str) -> None:
        self._get(element_id)
        self._active = element_id

    @property
    def active_element(self) -> Optional[str]:
        return self._active

    def focusable_within(self, element_id: str) -> list[str]:
        return [el.id for el in self._walk(element_id) if el.focusable]

    def add_listener(self, target: str, event_type: str, listener: Listener) -> RemoveListener:
        bucket = self._listeners.setdefault((target, event_type), [])
        bucket.append(listener)

        def remove() -> None:
            if listener in bucket:
                bucket.remove(listener)

        return remove

    def listener_count(self, target: str, event_type: str) -> int:
        return len(self._listeners.get((target, event_type), ()))

    def set_scroll_locked(self, locked: bool) -> None:
        if locked != self.scroll_locked:
            self.scroll_locked = locked
            self.mutations += 1

    def scroll_to_top(self, smooth: bool = True) -> None:
        self.scroll_requests.append(smooth)
        self.scroll_y_value = 0.0

    @property
    def scroll_y(self) -> float:
        return self.scroll_y_value

    @property
    def hidden(self) -> bool:
        return self._hidden

    def append_live_region(self, message: str) -> str:
        node_id = f"sr-announcement-{next(self._node_seq)}"
        self.create_element(
            node_id,
            classes=("sr-only",),
            text=message,
            role="status",
            aria_live="polite",
            aria_atomic="true",
        )
        self.announcements.append(message)
        self.mutations += 1
        return node_id

    @property
    def live_regions(self) -> list[str]:
        return [el.text for el in self._walk(BODY) if el.attributes.get("role") == "status"]

    # --- event dispatch ---

    def _propagation_path(self, target: str) -> list[str]:
        if target == WINDOW:
            return [WINDOW]
        if target == DOCUMENT:
            return [DOCUMENT, WINDOW]
        path = []
        current: Optional[str] = target
        while current is not None:
            path.append(current)
            current = self._get(current).parent
        return path + [DOCUMENT, WINDOW]

    def dispatch(self, target: str, event: DomEvent) -> DomEvent:
        """Deliver `event` to `target` and bubble it up to the window."""
        if event.target is None:
            event.target = target
        for node in self._propagation_path(target):
            for listener in list(self._listeners.get((node, event.type), ())):
                try:
                    listener(event)
                except Exception as exc:
                    self._report_error(exc, event)
        return event

    def _report_error(self, exc: Exception, source: DomEvent) -> None:
        if source.type == "error":
            logger.error("Error handler failed: %s", exc)
            return
        self.dispatch(WINDOW, ErrorEvent(type="error", target=WINDOW, error=exc, source=source))

    def click(self, element_id: str) -> DomEvent:
        return self.dispatch(element_id, click())

    def press(self, key: str, **modifiers: bool) -> KeyEvent:
        """Key press on the focused element (or the body)."""
        target = self._active or BODY
        event = KeyEvent.keydown(key, target=target, **modifiers)
        self.dispatch(target, event)
        return event

    def scroll_to(self, y: float) -> None:
        self.scroll_y_value = float(y)
        self.dispatch(WINDOW, DomEvent(type="scroll"))

    def set_hidden(self, hidden: bool) -> None:
        self._hidden = hidden
        self.dispatch(DOCUMENT, DomEvent(type="visibilitychange"))


class MemoryHistory:
    """Session history with a URL hash; back/forward fire `popstate`."""

    def __init__(self, document: Optional[MemoryDocument] = None, initial_hash: str = ""):
        self.document = document
        self.entries: list[str] = [initial_hash]
        self.index = 0
        self.calls: list[tuple[str, str]] = []

    @property
    def hash(self) -> str:
        return self.entries[self.index]

    def push(self, url_hash: str) -> None:
        del self.entries[self.index + 1:]
        self.entries.append(url_hash)
        self.index += 1
        self.calls.append(("push", url_hash))

    def replace(self, url_hash: str) -> None:
        self.entries[self.index] = url_hash
        self.calls.append(("replace", url_hash))

    def back(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        self._popstate()
        return True

    def forward(self) -> bool:
        if self.index >= len(self.entries) - 1:
            return False
        self.index += 1
        self._popstate()
        return True

    def _popstate(self) -> None:
        if self.document is not None:
            self.document.dispatch(WINDOW, DomEvent(type="popstate"))


class MemoryStorage:
    """`localStorage` stand-in that can be disabled or given a tiny quota."""

    def __init__(self, data: Optional[dict[str, str]] = None, available: bool = True, quota: Optional[int] = None):
        self.data: dict[str, str] = dict(data or {})
        self.available = available
        self.quota = quota

    def get_item(self, key: str) -> Optional[str]:
        if not self.available:
            raise StorageError("localStorage is disabled")
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if not self.available:
            raise StorageError("localStorage is disabled")
        value = str(value)
        if self.quota is not None:
            used = sum(len(k) + len(v) for k, v in self.data.items() if k != key)
            if used + len(key) + len(value) > self.quota:
                raise StorageError("The quota has been exceeded", ErrorCode.QUOTA_EXCEEDED)
        self.data[key] = value


def build_page_document(active: Optional[str] = SECTION_IDS[0], with_loader: bool = True) -> MemoryDocument:
    """The element tree of the site's document shell."""
    doc = MemoryDocument(title=BASE_TITLE)

    if with_loader:
        doc.create_element(PAGE_LOADER, classes=("page-loader",))

    doc.create_element(NAVBAR, tag="nav", classes=("navbar",))
    doc.create_element(
        HAMBURGER_MENU,
        tag="button",
        parent=NAVBAR,
        aria_expanded="false",
        aria_controls=SIDEBAR,
        aria_label="Open navigation menu",
    )

    doc.create_element(SIDEBAR_OVERLAY, classes=("sidebar-overlay",))
    doc.create_element(SIDEBAR, tag="aside", classes=("sidebar",), aria_hidden="true")
    doc.create_element(SIDEBAR_CLOSE, tag="button", parent=SIDEBAR, aria_label="Close navigation menu")
    for section_id in SECTION_IDS:
        doc.create_element(
            f"sidebar-link-{section_id}",
            tag="a",
            parent=SIDEBAR,
            classes=(SIDEBAR_LINK_CLASS,),
            text=section_name(section_id),
            href=f"#{section_id}",
        )

    doc.create_element("main", tag="main")
    for section_id in SECTION_IDS:
        is_active = section_id == active
        doc.create_element(
            section_id,
            tag="section",
            parent="main",
            classes=(SECTION_CLASS, "active") if is_active else (SECTION_CLASS,),
            aria_hidden="false" if is_active else "true",
        )
    doc.mutations = 0
    return doc
