"""Unit tests for scan option loading."""

import pytest
import yaml

from webaudit.audit.config import (
    ConfigLoadError,
    create_default_scan_config,
    load_scan_options,
    save_default_config
)


@pytest.fixture
def config_file(tmp_path):
    """Scan config with development and test overrides."""
    path = tmp_path / "scan.yaml"
    path.write_text(yaml.safe_dump({
        "url": "http://test.local/",
        "audit_headers": False,
        "mods": ["xss"],
        "redundant": [{"pattern": "calendar", "count": 5}],
        "environments": {
            "development": {"audit_headers": True, "max_audit_iterations": 10},
            "test": {"http_harvest_last": True},
        }
    }))
    return path


class TestLoadScanOptions:
    """Test cases for load_scan_options."""

    def test_base_values(self, config_file):
        options = load_scan_options(str(config_file), environment="production")

        assert options.url == "http://test.local/"
        assert options.audit_headers is False
        assert options.mods == ["xss"]
        assert options.redundant[0].count == 5

    def test_environment_overrides(self, config_file):
        options = load_scan_options(str(config_file), environment="development")

        assert options.audit_headers is True
        assert options.max_audit_iterations == 10

    def test_environment_from_env_var(self, config_file, monkeypatch):
        monkeypatch.setenv("WEBAUDIT_ENV", "test")

        assert load_scan_options(str(config_file)).http_harvest_last is True

    def test_explicit_overrides_win(self, config_file):
        options = load_scan_options(
            str(config_file),
            environment="development",
            overrides={"audit_headers": False}
        )

        assert options.audit_headers is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigLoadError, match="not found"):
            load_scan_options(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("mods: [unclosed")

        with pytest.raises(ConfigLoadError):
            load_scan_options(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigLoadError, match="mapping"):
            load_scan_options(str(path))

    def test_validation_failure(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"lsmod": ["[unclosed"]}))

        with pytest.raises(ConfigLoadError):
            load_scan_options(str(path))


class TestDefaultConfig:
    """Test cases for the default configuration."""

    def test_default_config_round_trips(self, tmp_path):
        path = tmp_path / "default.yaml"
        save_default_config(str(path))

        options = load_scan_options(str(path), environment="test")

        assert options.mods == ["*"]
        assert options.max_audit_iterations == 20

    def test_default_has_environments(self):
        config = create_default_scan_config()

        assert set(config["environments"]) == {"development", "test"}
