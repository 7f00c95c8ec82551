"""Persistence of scan results."""

from .storage import save_audit_store, load_audit_store, StorageError

__all__ = [
    'save_audit_store',
    'load_audit_store',
    'StorageError'
]
