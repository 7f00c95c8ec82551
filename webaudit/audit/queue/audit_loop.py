"""Drains the page queue until auditing stops producing new pages.

Each popped page is audited, the requests its modules queued are performed,
and the trainer is asked for a page rebuilt from the responses. If it returns
one, that page goes back on the queue. The loop ends when the queue is empty
and the last iteration produced nothing new.

There is no iteration bound by default: a trainer that keeps reporting "new"
pages keeps the loop alive. ``max_iterations`` caps the pages processed per
drain for callers that need a guarantee.
"""

import logging
import threading
from typing import Any, Callable, List, Optional

from ..models.page import Page
from .page_queue import PageQueue


logger = logging.getLogger(__name__)


class AuditQueueLoop:
    """Fixpoint driver over the page queue.

    Args:
        page_queue: Queue to drain
        run_page: Audits one page (the module executor)
        http: Transport whose queued requests are run after every page
        max_iterations: Optional ceiling on pages processed per drain
    """

    def __init__(
        self,
        page_queue: PageQueue,
        run_page: Callable[[Page], Any],
        http: Any,
        max_iterations: Optional[int] = None
    ):
        self.page_queue = page_queue
        self.run_page = run_page
        self.http = http
        self.max_iterations = max_iterations

        self.audited_urls: List[str] = []
        self._draining = False
        self._lock = threading.Lock()

    def drain(self) -> int:
        """Audit queued pages until no new page appears.

        A call made while a drain is already in progress (harvesting from
        inside an audited page) returns immediately: the active loop picks up
        whatever was pushed, in the same FIFO order, without growing the
        stack.

        Returns:
            Number of pages processed by this call
        """
        with self._lock:
            if self._draining:
                return 0
            self._draining = True

        processed = 0
        try:
            while not self.page_queue.empty():
                if self.max_iterations is not None and processed >= self.max_iterations:
                    logger.warning(
                        f"Audit queue ceiling of {self.max_iterations} pages reached, "
                        f"leaving {self.page_queue.qsize()} page(s) queued"
                    )
                    break

                page = self.page_queue.pop()
                if page is None:
                    break

                self.audited_urls.append(page.url)
                self.run_page(page)
                processed += 1

                # run the requests queued while auditing and see whether the
                # responses revealed an updated page
                self.http.run()
                new_page = self.http.trainer.page()
                if new_page is not None:
                    self.page_queue.push(new_page)
        finally:
            with self._lock:
                self._draining = False

        return processed

    @property
    def draining(self) -> bool:
        """Whether a drain is in progress."""
        return self._draining
