"""Runs the loaded check modules against one page.

Modules run in registry order. Between modules the executor honours the
pause gate; each module gets its own deep copy of the page and its faults are
contained so the remaining modules, and the scan, carry on.
"""

import logging
import traceback
from typing import Any, Callable, Optional

from .components.modules import AuditContext, ModuleRegistry
from .gating import should_run
from .models.options import ScanOptions
from .models.page import Page
from .pause import PauseGate


logger = logging.getLogger(__name__)


class ModuleExecutor:
    """Schedules modules against pages.

    Args:
        modules: Registry whose loaded modules are run
        options: Scan options (audit toggles, harvesting mode)
        pause_gate: Gate waited on before every module
        http: Transport handed to module instances
        on_page_audited: Called after all modules ran on a page, unless
            responses are harvested only at the end of the crawl
    """

    def __init__(
        self,
        modules: ModuleRegistry,
        options: ScanOptions,
        pause_gate: Optional[PauseGate] = None,
        http: Any = None,
        on_page_audited: Optional[Callable[[], Any]] = None
    ):
        self.modules = modules
        self.options = options
        self.pause_gate = pause_gate or PauseGate(options.pause_poll_interval)
        self.http = http
        self.on_page_audited = on_page_audited

    def run_modules(self, page: Optional[Page]) -> int:
        """Audit ``page`` with every loaded module.

        Returns:
            Number of modules that passed gating and were run
        """
        if page is None:
            return 0

        ran = 0
        for name, module_class in self.modules.items():
            self.pause_gate.wait()

            if self.run_module(name, module_class, page):
                ran += 1

        if not self.options.http_harvest_last and self.on_page_audited is not None:
            self.on_page_audited()

        return ran

    def run_module(self, name: str, module_class: type, page: Page) -> bool:
        """Run a single module against its own copy of ``page``.

        The page is copied only once the module passed gating.

        Returns:
            True if the module passed gating (whether or not it then failed)
        """
        if not should_run(module_class.info.elements, page, self.options):
            logger.debug(f"Skipping module {name} for {page.url}: no matching elements")
            return False

        page = page.clone()
        context = AuditContext(options=self.options, http=self.http, registry=self.modules)
        try:
            module = module_class(page, context)
            module.prepare()
            module.run()
            module.clean_up()
        except Exception as e:
            logger.error(f"Error in {name}: {e}")
            logger.debug(f"Traceback for {name}:\n{traceback.format_exc()}")

        return True
