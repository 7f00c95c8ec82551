"""Immutable snapshot of a scan's results.

The AuditStore is what reports consume and what gets persisted to disk. It
holds the options the scan ran with, the sitemap and every finding the
modules registered.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .vulnerability import Vulnerability, severity_counts


class AuditStore(BaseModel):
    """Serializable view of scan configuration, sitemap and findings."""

    version: str = Field(description="Framework version that produced the store")
    revision: str = Field(description="Framework class revision")
    options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Scan options as a plain mapping, with loaded module names under 'mods'"
    )
    sitemap: List[str] = Field(
        default_factory=list,
        description="Sorted URLs covered by the scan, or ['N/A'] when none"
    )
    vulns: List[Vulnerability] = Field(
        default_factory=list,
        description="Findings registered by modules"
    )

    class Config:
        """Pydantic configuration."""
        frozen = True

    @property
    def start_datetime(self) -> Optional[datetime]:
        """When the scan started."""
        return _parse_datetime(self.options.get("start_datetime"))

    @property
    def finish_datetime(self) -> Optional[datetime]:
        """When the scan finished."""
        return _parse_datetime(self.options.get("finish_datetime"))

    @property
    def delta_time(self) -> Optional[float]:
        """Scan duration in seconds."""
        return self.options.get("delta_time")

    @property
    def modules(self) -> List[str]:
        """Names of the modules that were loaded."""
        return list(self.options.get("mods", []))

    def severity_summary(self) -> Dict[str, int]:
        """Count findings by severity."""
        return severity_counts(self.vulns)

    def to_dict(self) -> Dict[str, Any]:
        """Export the store as a plain JSON-compatible mapping."""
        return self.model_dump(mode="json")


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)
