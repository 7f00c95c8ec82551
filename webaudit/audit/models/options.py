"""Pydantic models for scan configuration.

ScanOptions carries everything the orchestration core reads at run time:
per-element audit toggles, redundancy rules, harvesting mode, the names of
components to load, persistence paths and the timing window of the run.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RedundancyRule(BaseModel):
    """Limit on how many times URLs matching ``pattern`` get audited.

    ``count`` is decremented while the scan runs, so a pristine copy of the
    rule set is kept by the framework and restored before reporting.
    """

    pattern: str = Field(description="Regex matched against element URLs")
    count: int = Field(ge=0, description="Remaining number of audits allowed")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v):
        """Validate that the pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid redundancy pattern '{v}': {e}")
        return v

    def matches(self, url: str) -> bool:
        """Check whether ``url`` falls under this rule."""
        return re.search(self.pattern, url) is not None


class ScanOptions(BaseModel):
    """Configuration for a single scan run."""

    url: Optional[str] = Field(default=None, description="Target URL")

    # Element auditing
    audit_links: bool = Field(default=True, description="Audit link elements")
    audit_forms: bool = Field(default=True, description="Audit form elements")
    audit_cookies: bool = Field(default=True, description="Audit cookie elements")
    audit_headers: bool = Field(default=False, description="Audit header elements")

    redundant: List[RedundancyRule] = Field(
        default_factory=list,
        description="Redundancy rules with their remaining counters"
    )

    # Scheduling
    http_harvest_last: bool = Field(
        default=False,
        description="Harvest HTTP responses once at the end of the crawl instead of after every page"
    )
    max_audit_iterations: Optional[int] = Field(
        default=None,
        ge=1,
        description="Optional ceiling on pages processed per queue drain (None = unbounded)"
    )
    pause_poll_interval: float = Field(
        default=1.0,
        gt=0.0,
        le=60.0,
        description="Seconds between checks of the pause flag"
    )

    # Components
    mods: List[str] = Field(default_factory=list, description="Modules to load ('*' for all)")
    reports: List[str] = Field(default_factory=list, description="Reports to load ('*' for all)")
    plugins: List[str] = Field(default_factory=list, description="Plugins to load ('*' for all)")
    lsmod: List[str] = Field(
        default_factory=list,
        description="Regex filters a module path must all match to be listed"
    )

    # Persistence
    repsave: Optional[str] = Field(
        default=None,
        description="Path (without extension) to save the audit store to"
    )
    repload: Optional[str] = Field(
        default=None,
        description="Path of a previously saved audit store being reloaded"
    )

    # HTTP identity
    cookie_jar: Optional[str] = Field(default=None, description="Netscape cookie-jar file")
    cookies: Dict[str, str] = Field(default_factory=dict, description="Cookies sent with every request")
    user_agent: Optional[str] = Field(default=None, description="User-Agent string")
    authed_by: Optional[str] = Field(default=None, description="Who authorized the scan")

    # Reporting
    only_positives: bool = Field(
        default=False,
        description="Restrict output to positive findings while scanning"
    )

    # Timing window
    start_datetime: Optional[datetime] = Field(default=None, description="When the run started")
    finish_datetime: Optional[datetime] = Field(default=None, description="When the run finished")
    delta_time: Optional[float] = Field(default=None, description="Run duration in seconds")

    @field_validator("lsmod")
    @classmethod
    def validate_regex_patterns(cls, v):
        """Validate that regex patterns compile correctly."""
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern '{pattern}': {e}")
        return v

    @model_validator(mode="after")
    def validate_persistence(self):
        """Saving and reloading the same file makes no sense."""
        if self.repsave and self.repload and self.repsave == self.repload:
            raise ValueError("repsave and repload must point to different files")
        return self

    @property
    def element_toggles(self) -> Dict[str, bool]:
        """Audit toggles keyed by element kind value."""
        return {
            "link": self.audit_links,
            "form": self.audit_forms,
            "cookie": self.audit_cookies,
            "header": self.audit_headers,
        }

    def to_h(self) -> Dict[str, Any]:
        """Export options as a plain JSON-compatible mapping."""
        return self.model_dump(mode="json")
