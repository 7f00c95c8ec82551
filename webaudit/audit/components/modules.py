"""Check modules and the registry that loads them and collects their findings.

A module is instantiated once per page with its own copy of that page, then
driven through ``prepare()``, ``run()`` and ``clean_up()``. Findings are
handed to the registry through ``register_results()``.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, List, Optional

from pydantic import Field

from ..models.options import ScanOptions
from ..models.page import ElementKind, Page
from ..models.vulnerability import Vulnerability
from .base import ComponentInfo, ComponentRegistry


logger = logging.getLogger(__name__)


class ModuleInfo(ComponentInfo):
    """Declared metadata of a check module."""

    elements: List[ElementKind] = Field(
        default_factory=list,
        description="Element kinds the module audits (empty = every page)"
    )
    references: dict = Field(default_factory=dict, description="Reference titles mapped to URLs")


@dataclass
class AuditContext:
    """What a module instance can reach besides its page."""
    options: ScanOptions
    http: Any = None
    registry: Optional["ModuleRegistry"] = None


class BaseModule(ABC):
    """Abstract base class for check modules."""

    shortname: ClassVar[Optional[str]] = None
    info: ClassVar[ModuleInfo] = ModuleInfo(name="Base module")

    def __init__(self, page: Page, context: Optional[AuditContext] = None):
        self.page = page
        self.context = context
        self.results: List[Vulnerability] = []

    @property
    def http(self) -> Any:
        """HTTP transport to queue probing requests on."""
        return self.context.http if self.context else None

    @property
    def options(self) -> Optional[ScanOptions]:
        """Options of the running scan."""
        return self.context.options if self.context else None

    def prepare(self) -> None:
        """Called before ``run()``."""
        pass

    @abstractmethod
    def run(self) -> None:
        """Audit the page."""
        ...

    def clean_up(self) -> None:
        """Called after ``run()``."""
        pass

    def register_results(self, vulns: List[Vulnerability]) -> None:
        """Record findings, tagging them with this module's name."""
        name = self.shortname or type(self).__name__
        tagged = [vuln.model_copy(update={"mod_name": vuln.mod_name or name}) for vuln in vulns]

        self.results.extend(tagged)
        if self.context and self.context.registry is not None:
            self.context.registry.register_results(tagged)


class ModuleRegistry(ComponentRegistry):
    """Registry of check modules plus the findings they registered."""

    component_type = "module"
    base_class = BaseModule
    entry_point_group = "webaudit.modules"

    def __init__(self):
        super().__init__()
        self._results: List[Vulnerability] = []
        self._results_lock = threading.Lock()

    def register_results(self, vulns: List[Vulnerability]) -> None:
        """Store findings logged by a module instance."""
        with self._results_lock:
            self._results.extend(vulns)

        for vuln in vulns:
            logger.info(f"Found {vuln.name} in {vuln.element or 'page'} at {vuln.url}")

    def results(self) -> List[Vulnerability]:
        """Every finding registered so far."""
        with self._results_lock:
            return list(self._results)

    def clear_results(self) -> None:
        """Forget every registered finding."""
        with self._results_lock:
            self._results.clear()
