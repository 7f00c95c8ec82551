"""Audit engine package for webaudit.

This package provides the orchestration core of the scanner: scheduling of
check modules against crawled pages, response harvesting, the audit queue,
the run lifecycle and the AuditStore snapshot.
"""

from .framework import Framework, ConfigurationError, NoCookieJarError, VERSION, REVISION
from .models import (
    ElementKind,
    Element,
    Page,
    Severity,
    Vulnerability,
    RedundancyRule,
    ScanOptions,
    AuditStore
)
from .components import (
    BaseModule,
    BaseReport,
    BasePlugin,
    ModuleInfo,
    ComponentInfo,
    ModuleRegistry,
    ReportRegistry,
    PluginRegistry,
    ComponentNotFoundError
)
from .gating import should_run
from .queue import PageQueue, AuditQueueLoop

__all__ = [
    # Main framework
    'Framework',
    'ConfigurationError',
    'NoCookieJarError',
    'VERSION',
    'REVISION',

    # Models
    'ElementKind',
    'Element',
    'Page',
    'Severity',
    'Vulnerability',
    'RedundancyRule',
    'ScanOptions',
    'AuditStore',

    # Components
    'BaseModule',
    'BaseReport',
    'BasePlugin',
    'ModuleInfo',
    'ComponentInfo',
    'ModuleRegistry',
    'ReportRegistry',
    'PluginRegistry',
    'ComponentNotFoundError',

    # Scheduling
    'should_run',
    'PageQueue',
    'AuditQueueLoop'
]

__version__ = VERSION
