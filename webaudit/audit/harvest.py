"""Collects responses to the requests modules queued and feeds new pages back.

Harvesting performs every request sitting in the transport's queue, asks the
trainer for a page reconstructed from the responses and, if there is one,
queues it and drains the audit queue.
"""

import logging
from typing import Any, Callable, Optional

from .models.page import Page
from .queue.page_queue import PageQueue


logger = logging.getLogger(__name__)


class Harvester:
    """Harvest coordinator.

    Args:
        http: Transport holding the queued requests and the trainer
        page_queue: Queue new pages are pushed onto
        drain: Drains the audit queue after harvesting
    """

    def __init__(self, http: Any, page_queue: PageQueue, drain: Callable[[], Any]):
        self.http = http
        self.page_queue = page_queue
        self.drain = drain

    def harvest(self) -> Optional[Page]:
        """Run queued requests and audit whatever new page they revealed.

        Returns:
            The page the trainer produced, or None
        """
        logger.info("Harvesting HTTP responses...")
        logger.info(
            "Depending on server responsiveness and network conditions this may take a while."
        )

        self.http.run()

        page = self.http.trainer.page()
        if page is not None:
            logger.debug(f"Trainer produced updated page: {page.url}")
            self.page_queue.push(page)

        self.drain()
        return page
