"""Builds the AuditStore snapshot of a scan.

Redundancy rules count down while the scan runs. Before a snapshot is taken
the options get a fresh copy of the rules as they were when the framework was
initialized, so every snapshot embeds the configured counters and repeated
snapshots never accumulate.
"""

import logging
from copy import deepcopy
from typing import Callable, Iterable, List, Optional

from .components.modules import ModuleRegistry
from .models.audit_store import AuditStore
from .models.options import RedundancyRule, ScanOptions


logger = logging.getLogger(__name__)

SITEMAP_SENTINEL = "N/A"


class SnapshotBuilder:
    """Lazily builds and caches the AuditStore.

    Args:
        options: Live scan options
        modules: Module registry (names and findings)
        version: Framework version
        revision: Framework class revision
        sitemap: Returns the URLs covered so far, or None if no crawl ran
    """

    def __init__(
        self,
        options: ScanOptions,
        modules: ModuleRegistry,
        version: str,
        revision: str,
        sitemap: Callable[[], Optional[Iterable[str]]]
    ):
        self.options = options
        self.modules = modules
        self.version = version
        self.revision = revision
        self.sitemap = sitemap

        self._pristine_redundant: List[RedundancyRule] = deepcopy(options.redundant)
        self._store: Optional[AuditStore] = None

    def build(self, fresh: bool = False) -> AuditStore:
        """Return the cached snapshot, or build a new one.

        Args:
            fresh: Discard the cached snapshot and rebuild
        """
        self.restore_redundancy_rules()

        if self._store is not None and not fresh:
            return self._store

        options = self.options.to_h()
        options["mods"] = self.modules.keys()

        urls = self.sitemap()
        sitemap = sorted(set(urls)) if urls else [SITEMAP_SENTINEL]

        self._store = AuditStore(
            version=self.version,
            revision=self.revision,
            options=options,
            sitemap=sitemap,
            vulns=[vuln.model_copy(deep=True) for vuln in self.modules.results()]
        )
        logger.debug(
            f"Built audit store: {len(sitemap)} sitemap entries, {len(self._store.vulns)} findings"
        )
        return self._store

    def restore_redundancy_rules(self) -> None:
        """Put the pristine redundancy rules back on the options."""
        self.options.redundant = deepcopy(self._pristine_redundant)

    def invalidate(self) -> None:
        """Drop the cached snapshot."""
        self._store = None

    @property
    def cached(self) -> Optional[AuditStore]:
        """The cached snapshot, if any."""
        return self._store
