"""Unit tests for audit store persistence."""

import pytest

from webaudit.audit.models.audit_store import AuditStore
from webaudit.audit.models.vulnerability import Severity, Vulnerability
from webaudit.persistence import StorageError, load_audit_store, save_audit_store


@pytest.fixture
def audit_store():
    """Store with one finding."""
    return AuditStore(
        version="0.1.0",
        revision="0.1",
        options={"url": "http://test.local/", "mods": ["xss"], "delta_time": 1.5},
        sitemap=["http://test.local/", "http://test.local/search"],
        vulns=[
            Vulnerability(
                name="Cross-Site Scripting",
                url="http://test.local/search",
                element="form",
                var="q",
                severity=Severity.HIGH,
                injected="<script>",
                mod_name="xss"
            )
        ]
    )


class TestStorage:
    """Test cases for saving and loading audit stores."""

    def test_save_and_load(self, tmp_path, audit_store):
        path = save_audit_store(audit_store, tmp_path / "reports" / "scan.auditstore")

        assert path.exists()

        loaded = load_audit_store(path)
        assert loaded.sitemap == audit_store.sitemap
        assert loaded.modules == ["xss"]
        assert loaded.vulns[0].var == "q"
        assert loaded.severity_summary()["high"] == 1

    def test_load_missing(self, tmp_path):
        with pytest.raises(StorageError, match="not found"):
            load_audit_store(tmp_path / "none.auditstore")

    def test_load_malformed(self, tmp_path):
        path = tmp_path / "bad.auditstore"
        path.write_text("version: [1, 2\n")

        with pytest.raises(StorageError):
            load_audit_store(path)

    def test_load_invalid_structure(self, tmp_path):
        path = tmp_path / "invalid.auditstore"
        path.write_text("version: '1'\nvulns: 12\n")

        with pytest.raises(StorageError, match="Invalid audit store"):
            load_audit_store(path)
