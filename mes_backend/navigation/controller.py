"""
Page controller: one instance per page session.

Owns the navigation state, wires the router and sidebar together, binds the
page's event listeners and reports errors that escape any handler.
"""
from __future__ import annotations

from typing import Any, Callable, Optional

from mes_shared import get_logger

from ..config import (
    ANIMATION_DELAY_MS,
    CLIENT_VERSION,
    DEBOUNCE_DELAY_MS,
    SCROLL_THRESHOLD,
)
from .announcer import Announcer
from .dom import (
    BODY,
    DOCUMENT,
    HAMBURGER_MENU,
    HIDDEN_CLASS,
    NAVBAR,
    PAGE_LOADED_CLASS,
    PAGE_LOADER,
    SCROLLED_CLASS,
    SIDEBAR_CLOSE,
    SIDEBAR_LINK_CLASS,
    SIDEBAR_OVERLAY,
    WINDOW,
    DomAdapter,
    HistoryAdapter,
    Listener,
    RemoveListener,
    StorageAdapter,
)
from .events import DomEvent, ErrorEvent
from .router import SectionRouter
from .scheduler import Debouncer, ManualScheduler, ScheduledTask, Scheduler
from .sidebar import SidebarController
from .state import NavigationState
from .storage import SectionStore

logger = get_logger(__name__)


class PageController:
    def __init__(
        self,
        dom: DomAdapter,
        history: HistoryAdapter,
        storage: Optional[StorageAdapter] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.dom = dom
        self.history = history
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        if getattr(self.scheduler, "on_error", False) is None:
            self.scheduler.on_error = self.report_error  # type: ignore[attr-defined]

        self.state = NavigationState()
        self.store = SectionStore(storage)
        self.announcer = Announcer(dom, self.scheduler)
        self.sidebar = SidebarController(dom, self.scheduler, self.announcer, self.state)
        self.router = SectionRouter(
            dom, history, self.store, self.announcer, self.state, close_sidebar=self.sidebar.close
        )
        self.sidebar.router = self.router

        self.errors: list[BaseException] = []
        self.initialized = False
        self._listeners: list[RemoveListener] = []
        self._timers: list[ScheduledTask] = []
        self._scroll = Debouncer(self.scheduler, DEBOUNCE_DELAY_MS, self.update_navbar)

        self._install_error_handlers()

    # --- public operations ---

    def show_section(self, target: object) -> bool:
        return self.router.show_section(target)

    def open_sidebar(self) -> bool:
        return self.sidebar.open()

    def close_sidebar(self) -> bool:
        return self.sidebar.close()

    def toggle_sidebar(self) -> bool:
        return self.sidebar.toggle()

    def public_api(self) -> dict[str, Any]:
        """The debugging handle the page exposes on `window`."""
        return {
            "version": CLIENT_VERSION,
            "state": self.state,
            "open_sidebar": self.open_sidebar,
            "close_sidebar": self.close_sidebar,
            "show_section": self.show_section,
        }

    # --- lifecycle ---

    def init_page(self) -> str:
        if self.initialized:
            return self.state.current_section

        self._timers.append(self.scheduler.call_later(ANIMATION_DELAY_MS, self._hide_loader))

        section_id = self.router.init_navigation()
        self.bind_event_listeners()

        self.dom.add_class(BODY, PAGE_LOADED_CLASS)
        self.initialized = True
        logger.info("Military Essentials website initialized (section=%s)", section_id)
        return section_id

    def bind_event_listeners(self) -> None:
        if self.dom.exists(HAMBURGER_MENU):
            self._listen(HAMBURGER_MENU, "click", lambda _e: self.sidebar.toggle())
        if self.dom.exists(SIDEBAR_CLOSE):
            self._listen(SIDEBAR_CLOSE, "click", lambda _e: self.sidebar.close())
        if self.dom.exists(SIDEBAR_OVERLAY):
            self._listen(SIDEBAR_OVERLAY, "click", lambda _e: self.sidebar.close())

        for link_id in self.dom.ids_with_class(SIDEBAR_LINK_CLASS):
            self._listen(link_id, "click", self._sidebar_link_listener(link_id))

        self._listen(DOCUMENT, "keydown", self.sidebar.handle_keydown)
        self._listen(WINDOW, "popstate", self.router.handle_popstate)
        self._listen(WINDOW, "scroll", self._scroll.trigger)
        self._listen(DOCUMENT, "visibilitychange", self.handle_visibility_change)

    def dispose(self) -> None:
        """Drop every listener and timer this controller owns."""
        for remove in self._listeners:
            remove()
        self._listeners.clear()
        for task in self._timers:
            task.cancel()
        self._timers.clear()
        self._scroll.cancel()
        self.sidebar.cancel_pending_focus()
        self.announcer.clear()
        self.sidebar.trap.release()

    # --- handlers ---

    def update_navbar(self) -> None:
        if not self.dom.exists(NAVBAR):
            return
        if self.dom.scroll_y > SCROLL_THRESHOLD:
            self.dom.add_class(NAVBAR, SCROLLED_CLASS)
        else:
            self.dom.remove_class(NAVBAR, SCROLLED_CLASS)

    def handle_visibility_change(self, _event: Optional[DomEvent] = None) -> None:
        if self.dom.hidden:
            logger.debug("Page hidden")
        else:
            logger.debug("Page visible")

    def handle_error(self, event: DomEvent) -> None:
        error = event.error if isinstance(event, ErrorEvent) else None
        if event.type == "unhandledrejection":
            logger.error("Unhandled promise rejection: %s", error)
        else:
            logger.error("Global error: %s", error, exc_info=error)
        if error is not None:
            self.errors.append(error)

    def report_error(self, exc: BaseException) -> None:
        """Entry point for failures in deferred callbacks."""
        self.handle_error(ErrorEvent(type="error", target=WINDOW, error=exc))

    # --- internals ---

    def _install_error_handlers(self) -> None:
        self._listen(WINDOW, "error", self.handle_error)
        self._listen(WINDOW, "unhandledrejection", self.handle_error)

    def _listen(self, target: str, event_type: str, listener: Listener) -> None:
        self._listeners.append(self.dom.add_listener(target, event_type, listener))

    def _sidebar_link_listener(self, link_id: str) -> Callable[[DomEvent], None]:
        def listener(event: DomEvent) -> None:
            self.sidebar.handle_link_click(event, link_id)
        return listener

    def _hide_loader(self) -> None:
        if self.dom.exists(PAGE_LOADER):
            self.dom.add_class(PAGE_LOADER, HIDDEN_CLASS)
