"""
Keyboard focus trap for the open sidebar.
"""
from __future__ import annotations

from typing import Optional

from .dom import DomAdapter, RemoveListener
from .events import DomEvent, KeyEvent


class FocusTrap:
    """
    Confines Tab cycling to the focusable elements of one container.

    The trap is a resource: `install()` acquires the keydown listener and
    `release()` gives it back. Releasing twice is harmless; `releases` counts
    the releases that actually removed a listener.
    """

    def __init__(self, dom: DomAdapter, container_id: str):
        self.dom = dom
        self.container_id = container_id
        self.focusables: list[str] = []
        self.installs = 0
        self.releases = 0
        self._remove: Optional[RemoveListener] = None

    @property
    def active(self) -> bool:
        return self._remove is not None

    def install(self) -> None:
        if self._remove is not None:
            return
        self.focusables = self.dom.focusable_within(self.container_id)
        self._remove = self.dom.add_listener(self.container_id, "keydown", self.handle_keydown)
        self.installs += 1

    def release(self) -> None:
        remove, self._remove = self._remove, None
        if remove is None:
            return
        remove()
        self.releases += 1

    def handle_keydown(self, event: DomEvent) -> None:
        if not isinstance(event, KeyEvent) or event.key != "Tab" or not self.focusables:
            return
        first, last = self.focusables[0], self.focusables[-1]
        current = self.dom.active_element
        if event.shift:
            if current == first:
                self.dom.focus(last)
                event.prevent_default()
        elif current == last:
            self.dom.focus(first)
            event.prevent_default()
