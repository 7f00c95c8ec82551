"""Report components rendering an AuditStore."""

import logging
from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional

from ..models.audit_store import AuditStore
from ..models.options import ScanOptions
from ..utils.failure import failure_barrier
from .base import ComponentInfo, ComponentRegistry


logger = logging.getLogger(__name__)


class BaseReport(ABC):
    """Abstract base class for reports."""

    shortname: ClassVar[Optional[str]] = None
    info: ClassVar[ComponentInfo] = ComponentInfo(name="Base report")

    def __init__(self, audit_store: AuditStore, options: Optional[ScanOptions] = None):
        self.audit_store = audit_store
        self.options = options

    @abstractmethod
    def run(self) -> None:
        """Render the report."""
        ...


class ReportRegistry(ComponentRegistry):
    """Registry of reports; also names the extension of saved audit stores."""

    component_type = "report"
    base_class = BaseReport
    entry_point_group = "webaudit.reports"

    EXTENSION = ".auditstore"

    def __init__(self, options: Optional[ScanOptions] = None):
        super().__init__()
        self.options = options

    @property
    def extension(self) -> str:
        """File extension appended to saved audit stores."""
        return self.EXTENSION

    def run(self, audit_store: AuditStore) -> List[str]:
        """Run every loaded report against ``audit_store``.

        Each report gets its own deep copy of the store. A failing report is
        logged and does not stop the others.

        Returns:
            Names of the reports that completed
        """
        completed = []
        for name, report_class in self.items():
            logger.debug(f"Running report: {name}")
            error = failure_barrier(
                lambda: report_class(audit_store.model_copy(deep=True), self.options).run(),
                f"report '{name}'",
                log=logger
            )
            if error is None:
                completed.append(name)

        return completed
