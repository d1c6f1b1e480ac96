"""
Sidebar controller: open/closed lifecycle of the slide-out menu, with its
ARIA state, focus trap and deferred focus moves.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from mes_shared import get_logger

from ..config import FOCUS_DELAY_MS
from .announcer import Announcer
from .dom import (
    ACTIVE_CLASS,
    HAMBURGER_MENU,
    SIDEBAR,
    SIDEBAR_CLOSE,
    SIDEBAR_OVERLAY,
    DomAdapter,
)
from .events import DomEvent, KeyEvent
from .focus_trap import FocusTrap
from .scheduler import ScheduledTask, Scheduler
from .state import NavigationState

if TYPE_CHECKING:
    from .router import SectionRouter

logger = get_logger(__name__)

TOGGLE_SHORTCUT_KEY = "k"


class SidebarController:
    def __init__(
        self,
        dom: DomAdapter,
        scheduler: Scheduler,
        announcer: Announcer,
        state: NavigationState,
        router: Optional["SectionRouter"] = None,
        focus_delay_ms: float = FOCUS_DELAY_MS,
    ):
        self.dom = dom
        self.scheduler = scheduler
        self.announcer = announcer
        self.state = state
        self.router = router
        self.focus_delay_ms = focus_delay_ms
        self.trap = FocusTrap(dom, SIDEBAR)
        self._pending_focus: Optional[ScheduledTask] = None

    @property
    def is_open(self) -> bool:
        return self.state.is_sidebar_open

    def open(self) -> bool:
        if self.state.is_sidebar_open:
            return False

        self.state.is_sidebar_open = True
        self.dom.add_class(SIDEBAR, ACTIVE_CLASS)
        self.dom.add_class(SIDEBAR_OVERLAY, ACTIVE_CLASS)
        self.dom.set_scroll_locked(True)

        self.dom.set_attribute(HAMBURGER_MENU, "aria-expanded", "true")
        self.dom.set_attribute(SIDEBAR, "aria-hidden", "false")

        self.trap.install()
        # The panel needs a frame to start its transition before it can take focus.
        self._schedule_focus(SIDEBAR_CLOSE)

        self.announcer.announce("Navigation menu opened")
        return True

    def close(self) -> bool:
        if not self.state.is_sidebar_open:
            return False

        self.state.is_sidebar_open = False
        self.dom.remove_class(SIDEBAR, ACTIVE_CLASS)
        self.dom.remove_class(SIDEBAR_OVERLAY, ACTIVE_CLASS)
        self.dom.set_scroll_locked(False)

        self.dom.set_attribute(HAMBURGER_MENU, "aria-expanded", "false")
        self.dom.set_attribute(SIDEBAR, "aria-hidden", "true")

        self._schedule_focus(HAMBURGER_MENU)
        self.trap.release()

        self.announcer.announce("Navigation menu closed")
        return True

    def toggle(self) -> bool:
        if self.state.is_sidebar_open:
            return self.close()
        return self.open()

    def cancel_pending_focus(self) -> None:
        pending, self._pending_focus = self._pending_focus, None
        if pending is not None:
            pending.cancel()

    def _schedule_focus(self, element_id: str) -> None:
        # Only the latest transition may move focus.
        self.cancel_pending_focus()
        self._pending_focus = self.scheduler.call_later(
            self.focus_delay_ms, lambda: self.dom.focus(element_id)
        )

    def handle_link_click(self, event: DomEvent, link_id: Optional[str] = None) -> None:
        """Navigate first, then close, so the destination is announced before the menu closing."""
        event.prevent_default()
        if self.router is None:
            logger.error("Sidebar link activated without a router")
        else:
            self.router.handle_link_click(event, link_id)
        self.close()

    def handle_keydown(self, event: DomEvent) -> None:
        if not isinstance(event, KeyEvent):
            return
        if event.key == "Escape" and self.state.is_sidebar_open:
            self.close()

        if (event.ctrl or event.meta) and event.key == TOGGLE_SHORTCUT_KEY:
            event.prevent_default()
            self.toggle()
