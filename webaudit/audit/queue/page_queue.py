"""Thread-safe FIFO of pages awaiting audit.

Pages are pushed by the harvest step (pages the trainer rebuilt from
responses) and by plugins. The audit loop is the only consumer. The queue is
the sole synchronization point between those contexts, so callers never need
their own locking.
"""

import logging
import queue
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from ..models.page import Page


logger = logging.getLogger(__name__)


class QueueClosedError(Exception):
    """Raised when a page is pushed after the queue was closed."""
    pass


@dataclass
class PageQueueStats:
    """Counters of page queue traffic."""
    enqueued_total: int = 0
    dequeued_total: int = 0
    queue_size_max: int = 0
    created_at: float = field(default_factory=time.time)

    def export(self) -> Dict[str, Any]:
        data = asdict(self)
        data["uptime_seconds"] = time.time() - data.pop("created_at")
        return data


class PageQueue:
    """FIFO queue of pages, safe for concurrent push and pop.

    Unlike a crawl frontier there is no deduplication: the trainer decides
    whether a page is new, and the same URL may legitimately come back with
    new elements.
    """

    def __init__(self):
        self._pages: "queue.Queue[Page]" = queue.Queue()
        self._stats = PageQueueStats()
        self._stats_lock = threading.Lock()
        self._closed = False

    def push(self, page: Page) -> None:
        """Append ``page`` behind everything already queued.

        Raises:
            QueueClosedError: If ``close()`` was called
        """
        if self._closed:
            raise QueueClosedError(f"Cannot queue {page.url}: page queue is closed")

        self._pages.put(page)
        with self._stats_lock:
            self._stats.enqueued_total += 1
            if self._pages.qsize() > self._stats.queue_size_max:
                self._stats.queue_size_max = self._pages.qsize()

        logger.debug(f"Queued page for audit: {page.url}")

    def pop(self, block: bool = False, timeout: Optional[float] = None) -> Optional[Page]:
        """Take the oldest page off the queue.

        Args:
            block: Wait for a page when the queue is empty
            timeout: Upper bound on the wait when blocking

        Returns:
            The page, or None when nothing was queued
        """
        try:
            page = self._pages.get(block=block, timeout=timeout)
        except queue.Empty:
            return None

        with self._stats_lock:
            self._stats.dequeued_total += 1

        logger.debug(f"Dequeued page: {page.url}")
        return page

    def close(self) -> None:
        """Refuse further pushes. Pages already queued can still be popped."""
        self._closed = True
        logger.debug("Page queue closed")

    def qsize(self) -> int:
        return self._pages.qsize()

    def empty(self) -> bool:
        return self._pages.empty()

    def is_closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return self.qsize()

    def get_stats(self) -> Dict[str, Any]:
        """Traffic counters plus the current size."""
        with self._stats_lock:
            stats = self._stats.export()
        stats["current_size"] = self.qsize()
        stats["is_closed"] = self._closed
        return stats
