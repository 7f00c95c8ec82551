"""Scan orchestration: the run lifecycle and its controls.

The Framework owns the component registries, the page queue and the
collaborators that audit pages. ``run()`` crawls the target, audits every
page with the loaded modules, harvests the responses those modules provoke,
absorbs pages pushed by plugins and finally builds, reports and persists the
AuditStore. Faults inside a phase are logged and contained; once constructed,
a run always reaches reporting.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .components.base import ComponentNotFoundError
from .components.modules import ModuleRegistry
from .components.plugins import PluginRegistry
from .components.reports import ReportRegistry
from .executor import ModuleExecutor
from .harvest import Harvester
from .interfaces import HTTPTransport, Spider, SpiderFactory
from .introspection import list_modules, list_plugins, list_reports
from .models.audit_store import AuditStore
from .models.options import ScanOptions
from .models.page import Page
from .pause import PauseGate
from .queue.audit_loop import AuditQueueLoop
from .queue.page_queue import PageQueue
from .snapshot import SnapshotBuilder
from .utils.cookie_jar import CookieJarParseError, parse_cookie_jar
from .utils.failure import failure_barrier


logger = logging.getLogger(__name__)

VERSION = "0.1.0"
REVISION = "0.1"


class ConfigurationError(Exception):
    """Raised when the scan options cannot be acted upon."""
    pass


class NoCookieJarError(ConfigurationError):
    """Raised when the configured cookie-jar file does not exist."""
    pass


class Framework:
    """Drives a scan from crawl to report.

    Args:
        options: Scan options
        http: HTTP transport, also giving access to the trainer
        spider_factory: Builds a fresh crawler for every run
        modules: Module registry (a new one is created if omitted)
        reports: Report registry (a new one is created if omitted)
        plugins: Plugin registry (a new one is created if omitted)

    Raises:
        ConfigurationError: If the options reference a missing cookie jar or
            unknown components
    """

    def __init__(
        self,
        options: ScanOptions,
        http: HTTPTransport,
        spider_factory: SpiderFactory,
        modules: Optional[ModuleRegistry] = None,
        reports: Optional[ReportRegistry] = None,
        plugins: Optional[PluginRegistry] = None
    ):
        self.options = options
        self.http = http
        self.spider_factory = spider_factory
        self.spider: Optional[Spider] = None

        self.modules = modules if modules is not None else ModuleRegistry()
        self.reports = reports if reports is not None else ReportRegistry(options)
        self.plugins = plugins if plugins is not None else PluginRegistry(self)
        self.reports.options = options
        self.plugins.framework = self

        self.page_queue = PageQueue()
        self.pause_gate = PauseGate(options.pause_poll_interval)

        self.executor = ModuleExecutor(
            self.modules,
            options,
            pause_gate=self.pause_gate,
            http=http,
            on_page_audited=self.harvest
        )
        self.audit_loop = AuditQueueLoop(
            self.page_queue,
            self.executor.run_modules,
            http,
            max_iterations=options.max_audit_iterations
        )
        self.harvester = Harvester(http, self.page_queue, self.audit_loop.drain)

        self._spider_sitemap: Optional[List[str]] = None
        self._running = False

        self._prepare_cookie_jar()
        self._prepare_user_agent()

        # Captures the pristine redundancy rules
        self.snapshot = SnapshotBuilder(options, self.modules, VERSION, REVISION, self.sitemap)

        self._load_components()

    @property
    def version(self) -> str:
        return VERSION

    @property
    def revision(self) -> str:
        return REVISION

    @property
    def running(self) -> bool:
        """Whether a run is in its crawl/audit phase."""
        return self._running

    @property
    def paused(self) -> bool:
        """Whether module execution is paused."""
        return self.pause_gate.paused

    def pause(self) -> None:
        """Hold module execution before the next module starts."""
        self.pause_gate.pause()

    def resume(self) -> None:
        """Let module execution continue."""
        self.pause_gate.resume()

    def run(self) -> bool:
        """Run the scan.

        Returns:
            True once timing, snapshot, reports and persistence have been
            handled, whatever faults occurred along the way
        """
        self._running = True
        self.options.start_datetime = datetime.utcnow()
        logger.info(f"Starting scan of {self.options.url or 'target'}")

        failure_barrier(self.plugins.run, "plugin startup", log=logger)

        failure_barrier(self._audit, "audit", absorb_interrupts=True, log=logger)

        self.options.finish_datetime = datetime.utcnow()
        self.options.delta_time = (
            self.options.finish_datetime - self.options.start_datetime
        ).total_seconds()

        self.options.only_positives = False
        self._running = False

        failure_barrier(self.plugins.block, "plugin shutdown", log=logger)

        # Pages plugins pushed while running
        failure_barrier(self.audit_loop.drain, "audit queue", log=logger)

        error = failure_barrier(lambda: self.audit_store(fresh=True), "audit store", log=logger)
        store = self.snapshot.cached if error is None else None

        if self.options.reports and store is not None:
            failure_barrier(lambda: self.reports.run(store), "reports", log=logger)

        if self.options.repsave and not self.options.repload:
            failure_barrier(
                lambda: self.audit_store_save(self.options.repsave),
                "audit store persistence",
                log=logger
            )

        logger.info(f"Scan finished in {self.options.delta_time:.2f}s")
        return True

    def _audit(self) -> None:
        self.spider = self.spider_factory(self.options)
        sitemap = self.spider.run(self._audit_crawled_page)
        if sitemap is not None:
            self._spider_sitemap = list(sitemap)

        if self.options.http_harvest_last:
            self.harvest()

    def _audit_crawled_page(self, page: Page) -> None:
        failure_barrier(
            lambda: self.executor.run_modules(page),
            f"audit of {page.url}",
            log=logger
        )

    def harvest(self) -> Optional[Page]:
        """Run queued requests and audit any page they revealed."""
        return self.harvester.harvest()

    def sitemap(self) -> Optional[List[str]]:
        """URLs covered so far: the crawler's sitemap plus pages audited from the queue.

        Returns None when nothing has been crawled or audited.
        """
        urls = list(self._spider_sitemap or []) + list(self.audit_loop.audited_urls)
        return urls or None

    def stats(self) -> Dict[str, Any]:
        """Request/response counters and throughput of the current run."""
        requests = self.http.request_count
        elapsed = self._elapsed()

        return {
            "requests": requests,
            "responses": self.http.response_count,
            "time": elapsed,
            "avg": int(requests / elapsed) if elapsed else 0,
        }

    def _elapsed(self) -> Optional[float]:
        if self.options.delta_time is not None and not self._running:
            return self.options.delta_time
        if self.options.start_datetime is None:
            return None
        return (datetime.utcnow() - self.options.start_datetime).total_seconds()

    def audit_store(self, fresh: bool = False) -> AuditStore:
        """Snapshot of the scan; cached unless ``fresh``."""
        return self.snapshot.build(fresh=fresh)

    def audit_store_save(self, path: str) -> Path:
        """Save the current audit store under ``path`` plus the report extension.

        Returns:
            Path of the written file
        """
        # Import here to avoid circular imports
        from ..persistence.storage import save_audit_store

        target = Path(f"{path}{self.reports.extension}")
        logger.info("Dumping audit results...")

        saved = save_audit_store(self.audit_store(), target)
        logger.info(f"Audit store saved in: {saved}")
        return saved

    def lsmod(self) -> List[Dict[str, Any]]:
        """List modules whose path matches every ``options.lsmod`` pattern."""
        return list_modules(self.modules, self.options.lsmod)

    def lsrep(self) -> List[Dict[str, Any]]:
        """List available reports."""
        return list_reports(self.reports)

    def lsplug(self) -> List[Dict[str, Any]]:
        """List available plugins."""
        return list_plugins(self.plugins)

    def reset(self) -> None:
        """Forget findings and unload modules and reports."""
        self.modules.clear_results()
        self.modules.clear()
        self.reports.clear()
        self.snapshot.invalidate()
        self.audit_loop.audited_urls.clear()
        self._spider_sitemap = None

        reset_transport = getattr(self.http, "reset", None)
        if callable(reset_transport):
            reset_transport()
        logger.debug("Framework reset")

    def _prepare_cookie_jar(self) -> None:
        if not self.options.cookie_jar:
            return

        if not Path(self.options.cookie_jar).is_file():
            raise NoCookieJarError(f"Cookie-jar '{self.options.cookie_jar}' doesn't exist.")

        try:
            cookies = parse_cookie_jar(self.options.cookie_jar)
        except CookieJarParseError as e:
            raise ConfigurationError(str(e))

        self.options.cookies = {**self.options.cookies, **cookies}
        logger.debug(f"Loaded {len(cookies)} cookie(s) from {self.options.cookie_jar}")

    def _prepare_user_agent(self) -> None:
        if not self.options.user_agent:
            self.options.user_agent = f"webaudit/{VERSION}"

        if self.options.authed_by:
            self.options.user_agent += f" (Scan authorized by: {self.options.authed_by})"

    def _load_components(self) -> None:
        try:
            self.modules.load(self.options.mods)
            self.reports.load(self.options.reports)
            self.plugins.load(self.options.plugins)
        except ComponentNotFoundError as e:
            raise ConfigurationError(str(e))
