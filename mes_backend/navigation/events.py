"""
Event objects dispatched through the DOM adapter.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class DomEvent:
    """A DOM-style event. `target` is the id of the element it was dispatched on."""

    type: str
    target: Optional[str] = None
    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class KeyEvent(DomEvent):
    key: str = ""
    shift: bool = False
    ctrl: bool = False
    meta: bool = False

    @classmethod
    def keydown(cls, key: str, target: Optional[str] = None, **modifiers: bool) -> "KeyEvent":
        return cls(type="keydown", target=target, key=key, **modifiers)


@dataclass
class ErrorEvent(DomEvent):
    """Raised on the window when a listener or deferred callback fails."""

    error: Optional[BaseException] = None
    source: Any = None


def click(target: Optional[str] = None) -> DomEvent:
    return DomEvent(type="click", target=target)
