"""Finding model registered by check modules."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .page import ElementKind


class Severity(str, Enum):
    """Severity levels for findings."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFORMATIONAL = "informational"


class Vulnerability(BaseModel):
    """A vulnerability logged by a check module against one element."""

    name: str = Field(description="Vulnerability name")
    description: str = Field(default="", description="What the issue is")
    severity: Severity = Field(default=Severity.MEDIUM, description="Severity of the issue")
    element: Optional[ElementKind] = Field(
        default=None,
        description="Kind of element the issue was found in"
    )

    url: str = Field(description="Page URL where the issue was found")
    var: Optional[str] = Field(default=None, description="Vulnerable input name")
    method: str = Field(default="GET", description="HTTP method of the vulnerable request")
    injected: Optional[str] = Field(default=None, description="Payload that triggered the issue")
    evidence: Optional[str] = Field(default=None, description="Response excerpt proving the issue")

    cwe: Optional[str] = Field(default=None, description="CWE identifier")
    remedy_guidance: Optional[str] = Field(default=None, description="How to fix the issue")
    references: Dict[str, str] = Field(
        default_factory=dict,
        description="Reference titles mapped to URLs"
    )
    mod_name: Optional[str] = Field(
        default=None,
        description="Name of the module that logged the issue"
    )
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Module specific data")
    found_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the issue was registered"
    )

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


def severity_counts(vulns: List[Vulnerability]) -> Dict[str, int]:
    """Count findings by severity."""
    counts = {severity.value: 0 for severity in Severity}
    for vuln in vulns:
        severity = vuln.severity.value if hasattr(vuln.severity, "value") else str(vuln.severity)
        counts[severity] = counts.get(severity, 0) + 1
    return counts
