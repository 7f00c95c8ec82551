"""Configuration loading utilities for the audit core.

This package provides YAML-based configuration loading with environment
overrides for scan options.
"""

from .loader import (
    load_scan_options,
    create_default_scan_config,
    save_default_config,
    ConfigLoadError
)

__all__ = [
    "load_scan_options",
    "create_default_scan_config",
    "save_default_config",
    "ConfigLoadError"
]
