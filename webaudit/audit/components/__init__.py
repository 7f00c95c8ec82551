"""Pluggable components: check modules, reports and plugins.

Each component kind has a base class and a registry. Registries are ordered:
the order components are loaded in is the order they run in.
"""

from .base import ComponentInfo, ComponentRegistry, ComponentNotFoundError
from .modules import ModuleInfo, AuditContext, BaseModule, ModuleRegistry
from .reports import BaseReport, ReportRegistry
from .plugins import BasePlugin, PluginRegistry

__all__ = [
    # Registry machinery
    'ComponentInfo',
    'ComponentRegistry',
    'ComponentNotFoundError',

    # Modules
    'ModuleInfo',
    'AuditContext',
    'BaseModule',
    'ModuleRegistry',

    # Reports
    'BaseReport',
    'ReportRegistry',

    # Plugins
    'BasePlugin',
    'PluginRegistry'
]
