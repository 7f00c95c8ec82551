"""File storage for AuditStore snapshots.

Stores are written as YAML so they can be inspected by hand and reloaded to
re-run reports without scanning again.
"""

import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from ..audit.models.audit_store import AuditStore


logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an audit store cannot be written or read."""
    pass


def save_audit_store(store: AuditStore, path: Union[str, Path]) -> Path:
    """Serialize ``store`` to ``path``.

    Raises:
        StorageError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(store.to_dict(), f, default_flow_style=False, sort_keys=False)
    except (IOError, yaml.YAMLError) as e:
        raise StorageError(f"Failed to save audit store to {path}: {e}")

    logger.debug(f"Saved audit store to: {path}")
    return path


def load_audit_store(path: Union[str, Path]) -> AuditStore:
    """Read an audit store previously written by ``save_audit_store``.

    Raises:
        StorageError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    if not path.exists():
        raise StorageError(f"Audit store not found: {path}")

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise StorageError(f"Failed to parse audit store: {e}")
    except IOError as e:
        raise StorageError(f"Failed to read audit store: {e}")

    if not isinstance(data, dict):
        raise StorageError("Audit store file must contain a YAML dictionary")

    try:
        return AuditStore(**data)
    except ValidationError as e:
        raise StorageError(f"Invalid audit store: {e}")
