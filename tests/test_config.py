"""Tests for store path resolution and environment variable validation."""

import pytest

from invoicedesk.config import settings
from invoicedesk.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "INVOICEDESK_CONFIG_DIR", tmp_path / "config")
    monkeypatch.delenv("INVOICEDESK_STORE", raising=False)
    monkeypatch.delenv("INVOICEDESK_LOG_LEVEL", raising=False)


class TestStorePath:
    def test_default_lives_in_config_dir(self, tmp_path):
        path = settings.get_store_path()
        assert path == tmp_path / "config" / "invoices.json"
        assert path.parent.is_dir()

    def test_environment_overrides_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVOICEDESK_STORE", str(tmp_path / "env.json"))
        assert settings.get_store_path() == tmp_path / "env.json"

    def test_explicit_override_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INVOICEDESK_STORE", str(tmp_path / "env.json"))
        assert settings.get_store_path(tmp_path / "cli.json") == tmp_path / "cli.json"

    def test_directory_is_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            settings.get_store_path(tmp_path)
        assert exc_info.value.context["setting"] == str(tmp_path)


class TestEnvValidation:
    def test_valid_log_level(self, monkeypatch):
        monkeypatch.setenv("INVOICEDESK_LOG_LEVEL", "DEBUG")
        assert settings.validate_all_env_vars() == []
        assert settings.get_env_var("INVOICEDESK_LOG_LEVEL") == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("INVOICEDESK_LOG_LEVEL", "loud")
        errors = settings.validate_all_env_vars()
        assert len(errors) == 1
        assert "INVOICEDESK_LOG_LEVEL" in errors[0]
        with pytest.raises(ValueError):
            settings.get_env_var("INVOICEDESK_LOG_LEVEL")

    def test_default_when_unset(self):
        assert settings.get_env_var("INVOICEDESK_LOG_LEVEL") == "info"
        assert settings.get_env_var("INVOICEDESK_STORE") is None
