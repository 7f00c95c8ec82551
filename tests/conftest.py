"""Shared test fixtures and configuration for webaudit tests."""

import pytest
import sys
from pathlib import Path

# Add project root and the tests directory (for the fakes module) to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from webaudit.audit.components.modules import ModuleRegistry
from webaudit.audit.models.options import ScanOptions

from fakes import FakeTrainer, FakeTransport


@pytest.fixture
def scan_options():
    """Scan options with every element kind enabled."""
    return ScanOptions(
        url="http://test.local/",
        audit_links=True,
        audit_forms=True,
        audit_cookies=True,
        audit_headers=True,
        pause_poll_interval=0.01
    )


@pytest.fixture
def trainer():
    """Trainer without prepared discoveries."""
    return FakeTrainer()


@pytest.fixture
def transport(trainer):
    """In-memory transport wired to the ``trainer`` fixture."""
    return FakeTransport(trainer)


@pytest.fixture
def module_registry():
    """Empty module registry."""
    return ModuleRegistry()
