"""
Screen reader announcements through short-lived polite live regions.
"""
from __future__ import annotations

from mes_shared import get_logger

from ..config import ANNOUNCEMENT_TTL_MS
from .dom import DomAdapter
from .scheduler import ScheduledTask, Scheduler

logger = get_logger(__name__)


class Announcer:
    def __init__(self, dom: DomAdapter, scheduler: Scheduler, ttl_ms: float = ANNOUNCEMENT_TTL_MS):
        self.dom = dom
        self.scheduler = scheduler
        self.ttl_ms = ttl_ms
        self._expiry: dict[str, ScheduledTask] = {}

    @property
    def pending(self) -> int:
        return len(self._expiry)

    def announce(self, message: str) -> None:
        node_id = self.dom.append_live_region(message)
        logger.debug("Announced: %s", message)
        self._expiry[node_id] = self.scheduler.call_later(self.ttl_ms, lambda: self._expire(node_id))

    def clear(self) -> None:
        """Cancel every pending removal and drop the live regions now."""
        expiry, self._expiry = self._expiry, {}
        for node_id, task in expiry.items():
            task.cancel()
            self.dom.remove_node(node_id)

    def _expire(self, node_id: str) -> None:
        self._expiry.pop(node_id, None)
        self.dom.remove_node(node_id)
