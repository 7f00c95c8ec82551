"""Unit tests for the Framework controls."""

from datetime import datetime

import pytest

from webaudit.audit.framework import (
    ConfigurationError,
    Framework,
    NoCookieJarError,
    REVISION,
    VERSION
)
from webaudit.audit.models.options import ScanOptions

from fakes import FakeSpider, FakeTransport, make_module


COOKIE_JAR = (
    "# Netscape HTTP Cookie File\n"
    "test.local\tFALSE\t/\tFALSE\t0\tsession\tabc123\n"
    ".test.local\tTRUE\t/\tFALSE\t2147483647\ttheme\tdark\n"
)


def build_framework(options=None, transport=None, pages=None, **kwargs):
    return Framework(
        options or ScanOptions(url="http://test.local/"),
        transport or FakeTransport(),
        lambda options: FakeSpider(pages or []),
        **kwargs
    )


class TestFrameworkSetup:
    """Test cases for framework construction."""

    def test_default_user_agent(self):
        framework = build_framework()

        assert framework.options.user_agent == f"webaudit/{VERSION}"
        assert framework.version == VERSION
        assert framework.revision == REVISION

    def test_user_agent_with_authorization(self):
        framework = build_framework(ScanOptions(authed_by="Jane Doe"))

        assert framework.options.user_agent == f"webaudit/{VERSION} (Scan authorized by: Jane Doe)"

    def test_missing_cookie_jar(self, tmp_path):
        with pytest.raises(NoCookieJarError):
            build_framework(ScanOptions(cookie_jar=str(tmp_path / "cookies.txt")))

    def test_cookie_jar_is_parsed(self, tmp_path):
        jar = tmp_path / "cookies.txt"
        jar.write_text(COOKIE_JAR)

        framework = build_framework(ScanOptions(cookie_jar=str(jar), cookies={"lang": "en"}))

        assert framework.options.cookies == {"lang": "en", "session": "abc123", "theme": "dark"}

    def test_unreadable_cookie_jar(self, tmp_path):
        jar = tmp_path / "cookies.txt"
        jar.write_text("this is not a cookie jar\n")

        with pytest.raises(ConfigurationError):
            build_framework(ScanOptions(cookie_jar=str(jar)))

    def test_unknown_module(self):
        with pytest.raises(ConfigurationError):
            build_framework(ScanOptions(mods=["does_not_exist"]))

    def test_modules_loaded_from_options(self, module_registry):
        module_registry.register(make_module("xss"))
        module_registry.register(make_module("sqli"))

        framework = build_framework(ScanOptions(mods=["sqli"]), modules=module_registry)

        assert framework.modules.keys() == ["sqli"]


class TestFrameworkControls:
    """Test cases for pause, stats and reset."""

    def test_pause_and_resume(self):
        framework = build_framework()

        assert not framework.paused
        framework.pause()
        assert framework.paused
        framework.resume()
        assert not framework.paused

    def test_stats_before_run(self):
        """No elapsed time yet: the average is zero instead of a crash."""
        transport = FakeTransport()
        transport.request_count = 7
        framework = build_framework(transport=transport)

        stats = framework.stats()

        assert stats["requests"] == 7
        assert stats["time"] is None
        assert stats["avg"] == 0

    def test_stats_with_zero_elapsed(self):
        transport = FakeTransport()
        transport.request_count = 3
        framework = build_framework(transport=transport)
        framework.options.start_datetime = datetime.utcnow()
        framework.options.delta_time = 0.0

        assert framework.stats()["avg"] == 0

    def test_stats_average(self):
        transport = FakeTransport()
        transport.request_count = 50
        transport.response_count = 49
        framework = build_framework(transport=transport)
        framework.options.start_datetime = datetime.utcnow()
        framework.options.delta_time = 4.0

        stats = framework.stats()

        assert stats["avg"] == 12
        assert stats["responses"] == 49

    def test_not_running_outside_run(self):
        assert build_framework().running is False

    def test_reset(self, module_registry):
        transport = FakeTransport()
        module_registry.register(make_module("xss"))
        framework = build_framework(ScanOptions(mods=["xss"]), transport=transport, modules=module_registry)

        framework.reset()

        assert len(framework.modules) == 0
        assert transport.reset_calls == 1

    def test_lsmod_uses_option_filters(self, module_registry):
        module_registry.register(make_module("xss"))
        framework = build_framework(ScanOptions(mods=["*"], lsmod=["fakes"]), modules=module_registry)

        listing = framework.lsmod()

        assert [entry["mod_name"] for entry in listing] == ["xss"]
        assert len(framework.modules) == 0
