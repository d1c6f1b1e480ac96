"""
Section router: keeps exactly one section active and in sync with the URL
hash, document title, persisted state and screen reader announcements.
"""
from __future__ import annotations

from typing import Callable, Optional

from mes_shared import get_logger

from .announcer import Announcer
from .dom import ACTIVE_CLASS, SECTION_CLASS, DomAdapter, HistoryAdapter
from .events import DomEvent
from .state import (
    DEFAULT_SECTION,
    NavigationState,
    normalize_section_id,
    section_name,
    section_title,
)
from .storage import SectionStore

logger = get_logger(__name__)


class SectionRouter:
    def __init__(
        self,
        dom: DomAdapter,
        history: HistoryAdapter,
        store: SectionStore,
        announcer: Announcer,
        state: NavigationState,
        close_sidebar: Optional[Callable[[], None]] = None,
    ):
        self.dom = dom
        self.history = history
        self.store = store
        self.announcer = announcer
        self.state = state
        self.close_sidebar = close_sidebar
        # Sections are declared by the page and never change afterwards.
        self.sections: tuple[str, ...] = tuple(dom.ids_with_class(SECTION_CLASS))
        self._sync_current_from_document()

    def _sync_current_from_document(self) -> None:
        for section_id in self.sections:
            if self.dom.has_class(section_id, ACTIVE_CLASS):
                self.state.current_section = section_id
                return

    def is_known(self, section_id: Optional[str]) -> bool:
        return bool(section_id) and section_id in self.sections and self.dom.exists(section_id)

    def resolve(self, target: object) -> Optional[str]:
        """Normalize `target` and return its section id, or None (logged) if unknown."""
        section_id = normalize_section_id(target)
        if section_id is None:
            logger.error("Invalid section ID: %r", target)
            return None
        if not self.is_known(section_id):
            logger.error("Section not found: %s", section_id)
            return None
        return section_id

    def show_section(self, target: object) -> bool:
        """
        Activate the section named by `target` ("tos" or "#tos") and push its
        hash onto history when the active section changed.

        Returns False, leaving every piece of state untouched, when the target
        does not name a section of this page. Re-showing the active section
        only closes the sidebar and never adds a history entry.
        """
        previous = self.state.current_section
        if not self._activate(target):
            return False
        if self.state.current_section != previous:
            self.push_history(self.state.current_section)
        return True

    def _activate(self, target: object) -> bool:
        """Activation path shared by every entry point. Never writes history."""
        section_id = self.resolve(target)
        if section_id is None:
            return False

        if section_id == self.state.current_section and self.dom.has_class(section_id, ACTIVE_CLASS):
            if self.close_sidebar is not None:
                self.close_sidebar()
            return True

        for other in self.sections:
            self.dom.remove_class(other, ACTIVE_CLASS)
            self.dom.set_attribute(other, "aria-hidden", "true")
        self.dom.add_class(section_id, ACTIVE_CLASS)
        self.dom.set_attribute(section_id, "aria-hidden", "false")

        self.state.current_section = section_id
        self.store.save(section_id)

        self.dom.scroll_to_top(smooth=True)
        self.dom.title = section_title(section_id)
        self.announcer.announce(f"Navigated to {section_name(section_id)}")
        return True

    def init_navigation(self) -> str:
        """
        Pick the initial section: URL hash, then persisted section, then home.

        The URL is rewritten with a history replace when the section came from
        storage or when the hash in the URL names something else.
        """
        hash_id = normalize_section_id(self.history.hash)
        section_id: Optional[str] = None
        from_storage = False

        if hash_id is not None:
            section_id = self.resolve(hash_id)

        if section_id is None:
            stored = self.store.load()
            if stored.ok:
                candidate = normalize_section_id(stored.data)
                if self.is_known(candidate):
                    section_id, from_storage = candidate, True
                else:
                    logger.warning("Ignoring persisted section %r", stored.data)

        if section_id is None:
            section_id = DEFAULT_SECTION

        self._activate(section_id)

        if from_storage or (hash_id is not None and hash_id != section_id):
            self.history.replace(f"#{section_id}")
        return section_id

    def handle_popstate(self, event: Optional[DomEvent] = None) -> None:
        """Back/forward: follow the URL. History is read here, never written."""
        self._activate(self.history.hash or f"#{DEFAULT_SECTION}")

    def handle_link_click(self, event: DomEvent, link_id: Optional[str] = None) -> bool:
        event.prevent_default()
        link_id = link_id or event.target
        href = self.dom.get_attribute(link_id, "href") if link_id else None
        return self.show_section(href)

    def push_history(self, section_id: str) -> None:
        url_hash = f"#{section_id}"
        if self.history.hash != url_hash:
            self.history.push(url_hash)
