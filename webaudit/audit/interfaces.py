"""Protocols for the collaborators the audit core drives but does not own.

The crawler, the HTTP transport and the trainer live outside this package.
The framework only relies on the members declared here.
"""

from typing import Callable, List, Optional, Protocol

from .models.options import ScanOptions
from .models.page import Page


class Trainer(Protocol):
    """Infers newly reachable pages from responses observed during the scan."""

    def page(self) -> Optional[Page]:
        """Return a page rebuilt from new response content, if any."""
        ...


class HTTPTransport(Protocol):
    """Queues, sends and counts HTTP requests."""

    @property
    def request_count(self) -> int:
        """Number of requests performed so far."""
        ...

    @property
    def response_count(self) -> int:
        """Number of responses received so far."""
        ...

    @property
    def trainer(self) -> Trainer:
        """Trainer fed with every response the transport receives."""
        ...

    def run(self) -> None:
        """Perform every queued request and block until all responses arrive."""
        ...


class Spider(Protocol):
    """Crawls the target and hands every discovered page to a callback."""

    def run(self, callback: Callable[[Page], None]) -> Optional[List[str]]:
        """Crawl, calling ``callback`` once per page; return the sitemap."""
        ...


SpiderFactory = Callable[[ScanOptions], Spider]
