"""
Client-side navigation for the single-page site: section router, sidebar
controller and the page controller that wires them to a document.
"""
from .controller import PageController
from .dom import DomAdapter, HistoryAdapter, StorageAdapter
from .events import DomEvent, ErrorEvent, KeyEvent
from .focus_trap import FocusTrap
from .memory import MemoryDocument, MemoryHistory, MemoryStorage, build_page_document
from .router import SectionRouter
from .scheduler import Debouncer, LoopScheduler, ManualScheduler, Scheduler
from .sidebar import SidebarController
from .state import NavigationState
from .storage import SectionStore, StorageError

__all__ = [
    "PageController",
    "SectionRouter",
    "SidebarController",
    "NavigationState",
    "FocusTrap",
    "SectionStore",
    "StorageError",
    "DomAdapter",
    "HistoryAdapter",
    "StorageAdapter",
    "DomEvent",
    "ErrorEvent",
    "KeyEvent",
    "Scheduler",
    "ManualScheduler",
    "LoopScheduler",
    "Debouncer",
    "MemoryDocument",
    "MemoryHistory",
    "MemoryStorage",
    "build_page_document",
]
