"""Data models for the audit core."""

from .page import ElementKind, Element, Page
from .vulnerability import Severity, Vulnerability, severity_counts
from .options import RedundancyRule, ScanOptions
from .audit_store import AuditStore

__all__ = [
    # Pages
    'ElementKind',
    'Element',
    'Page',

    # Findings
    'Severity',
    'Vulnerability',
    'severity_counts',

    # Configuration
    'RedundancyRule',
    'ScanOptions',

    # Results
    'AuditStore'
]
