"""Loads ScanOptions from YAML.

A scan config file holds the option values at the top level plus an optional
``environments`` mapping. The section named by the selected environment
(``WEBAUDIT_ENV``, ``production`` when unset) is merged over the top level
before the options are validated.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from ..models.options import ScanOptions


logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE = "WEBAUDIT_ENV"
DEFAULT_ENVIRONMENT = "production"
DEFAULT_CONFIG_PATH = Path(__file__).parents[3] / "config" / "scan.yaml"


class ConfigLoadError(Exception):
    """Raised when scan options cannot be read or do not validate."""
    pass


def load_scan_options(
    config_path: Optional[Union[str, Path]] = None,
    environment: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> ScanOptions:
    """Build ScanOptions from a YAML file.

    Args:
        config_path: YAML file to read (``config/scan.yaml`` in the project
            root when omitted)
        environment: Section of ``environments`` to merge; read from
            ``WEBAUDIT_ENV`` when omitted
        overrides: Values merged last, over file and environment

    Returns:
        Validated ScanOptions

    Raises:
        ConfigLoadError: If the file is missing, malformed or invalid

    Example:
        >>> options = load_scan_options("config/scan.yaml", environment="test")
        >>> options.max_audit_iterations
        20
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    raw = _read_mapping(path)

    environments = raw.pop("environments", None) or {}
    environment = environment or os.getenv(ENVIRONMENT_VARIABLE, DEFAULT_ENVIRONMENT)

    section = environments.get(environment)
    if section:
        raw = _deep_merge(raw, section)
        logger.info(f"Using '{environment}' scan settings from {path}")

    if overrides:
        raw = _deep_merge(raw, overrides)
        logger.debug(f"Merged {len(overrides)} option override(s)")

    try:
        return ScanOptions(**raw)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid scan options in {path}: {e}")


def _read_mapping(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigLoadError(f"Scan config not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Malformed YAML in {path}: {e}")
    except OSError as e:
        raise ConfigLoadError(f"Cannot read {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"{path} must contain a YAML mapping, got {type(data).__name__}")
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated with ``override``; nested mappings merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def create_default_scan_config() -> Dict[str, Any]:
    """Default scan settings, including development and test environments."""
    defaults = ScanOptions().model_dump(
        mode="json",
        exclude={"cookies", "only_positives", "repload", "start_datetime", "finish_datetime", "delta_time"}
    )
    defaults["mods"] = ["*"]
    defaults["environments"] = {
        "development": {
            "http_harvest_last": True,
            "max_audit_iterations": 100,
        },
        "test": {
            "pause_poll_interval": 0.05,
            "max_audit_iterations": 20,
        },
    }
    return defaults


def save_default_config(output_path: Union[str, Path]) -> None:
    """Write the default scan settings to ``output_path``.

    Raises:
        ConfigLoadError: If the file cannot be written
    """
    path = Path(output_path)
    try:
        path.write_text(
            yaml.safe_dump(create_default_scan_config(), default_flow_style=False, sort_keys=False)
        )
    except OSError as e:
        raise ConfigLoadError(f"Cannot write {path}: {e}")

    logger.info(f"Wrote default scan settings to {path}")
