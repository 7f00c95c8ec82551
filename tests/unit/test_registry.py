"""Unit tests for component registries."""

import logging
import threading
import time

import pytest

from webaudit.audit.components import base
from webaudit.audit.components.base import ComponentNotFoundError
from webaudit.audit.components.modules import AuditContext, ModuleRegistry
from webaudit.audit.components.plugins import BasePlugin, PluginRegistry
from webaudit.audit.components.reports import BaseReport, ReportRegistry
from webaudit.audit.models.audit_store import AuditStore
from webaudit.audit.models.page import Page
from webaudit.audit.models.vulnerability import Vulnerability

from fakes import make_module


class TestModuleRegistry:
    """Test cases for ModuleRegistry."""

    def setup_method(self):
        self.registry = ModuleRegistry()

    def test_register_uses_shortname(self):
        """Modules register under their shortname."""
        name = self.registry.register(make_module("csrf"))

        assert name == "csrf"
        assert self.registry.available() == ["csrf"]
        assert "csrf" not in self.registry

    def test_register_rejects_foreign_classes(self):
        """Only BaseModule subclasses are accepted."""
        with pytest.raises(ValueError):
            self.registry.register(object)

    def test_load_wildcard_keeps_registration_order(self):
        """'*' loads every registered module in registration order."""
        for name in ("b", "a", "c"):
            self.registry.register(make_module(name))

        self.registry.load(["*"])

        assert self.registry.keys() == ["b", "a", "c"]

    def test_load_unknown(self):
        """Unknown names raise ComponentNotFoundError."""
        with pytest.raises(ComponentNotFoundError):
            self.registry.load(["nope"])

    def test_info_is_a_copy(self):
        """Callers cannot mutate declared metadata through info()."""
        self.registry.register(make_module("csrf"))
        info = self.registry.info("csrf")
        info.dependencies.append("x")

        assert self.registry.info("csrf").dependencies == []

    def test_register_results_tags_module_name(self):
        """Findings registered by a module carry its name."""
        module_class = make_module("xss")
        self.registry.register(module_class)
        module = module_class(Page(url="http://test.local/"), AuditContext(options=None, registry=self.registry))

        module.register_results([Vulnerability(name="XSS", url="http://test.local/")])

        assert [vuln.mod_name for vuln in self.registry.results()] == ["xss"]
        assert len(module.results) == 1

        self.registry.clear_results()
        assert self.registry.results() == []

    def test_status(self):
        """Status reports registration and load state."""
        self.registry.register(make_module("a"))
        self.registry.register(make_module("b"))
        self.registry.load(["b"])

        status = self.registry.get_status()

        assert status["a"]["loaded"] is False
        assert status["b"]["loaded"] is True


class RecordingReport(BaseReport):
    shortname = "recording"
    rendered = []

    def run(self):
        RecordingReport.rendered.append(self.audit_store.version)


class BrokenReport(BaseReport):
    shortname = "broken"

    def run(self):
        raise IOError("disk full")


class TestReportRegistry:
    """Test cases for ReportRegistry."""

    def setup_method(self):
        RecordingReport.rendered = []

    def test_failing_report_does_not_stop_others(self):
        registry = ReportRegistry()
        registry.register(BrokenReport)
        registry.register(RecordingReport)
        registry.load(["*"])

        completed = registry.run(AuditStore(version="1.0", revision="1"))

        assert completed == ["recording"]
        assert RecordingReport.rendered == ["1.0"]

    def test_extension(self):
        assert ReportRegistry().extension == ".auditstore"


class SleepyPlugin(BasePlugin):
    shortname = "sleepy"
    finished = threading.Event()

    def run(self):
        time.sleep(0.05)
        SleepyPlugin.finished.set()


class CrashingPlugin(BasePlugin):
    shortname = "crashing"

    def prepare(self):
        raise RuntimeError("no config")


class TestPluginRegistry:
    """Test cases for PluginRegistry."""

    def test_run_and_block(self):
        """Plugins run in their own threads and block() joins them."""
        SleepyPlugin.finished.clear()
        registry = PluginRegistry()
        registry.register(SleepyPlugin)
        registry.register(CrashingPlugin)
        registry.load(["*"])

        started = registry.run()
        registry.block()

        assert started == ["sleepy", "crashing"]
        assert SleepyPlugin.finished.is_set()
        assert not registry.busy()


class FakeEntryPoint:
    """Stand-in for an importlib.metadata entry point."""

    def __init__(self, name, target=None, error=None):
        self.name = name
        self.target = target
        self.error = error

    def load(self):
        if self.error is not None:
            raise self.error
        return self.target


class TestDiscovery:
    """Test cases for entry-point discovery."""

    def test_discover_registers_entry_points(self, monkeypatch, caplog):
        """Loadable entry points are registered; broken ones are logged and skipped."""
        requested = []

        def fake_entry_points(group):
            requested.append(group)
            return [
                FakeEntryPoint("ep_xss", target=make_module("xss")),
                FakeEntryPoint("ep_broken", error=ImportError("missing dependency")),
            ]

        monkeypatch.setattr(base, "entry_points", fake_entry_points)
        registry = ModuleRegistry()

        with caplog.at_level(logging.ERROR):
            names = registry.discover()

        assert requested == ["webaudit.modules"]
        assert names == ["ep_xss"]
        assert registry.available() == ["ep_xss"]
        assert "Failed to load module 'ep_broken'" in caplog.text

    def test_discover_explicit_group(self, monkeypatch):
        requested = []

        def fake_entry_points(group):
            requested.append(group)
            return []

        monkeypatch.setattr(base, "entry_points", fake_entry_points)

        assert ReportRegistry().discover("custom.reports") == []
        assert requested == ["custom.reports"]

    def test_discover_without_group(self):
        """Registries without an entry point group discover nothing."""
        assert base.ComponentRegistry().discover() == []
