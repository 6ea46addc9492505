"""CLI tests using typer's CliRunner against a temporary store."""

import json
import logging

import pytest
from typer.testing import CliRunner

from invoicedesk import __version__
from invoicedesk.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep log files and the default store out of the real home directory."""
    monkeypatch.setattr("invoicedesk.config.settings.INVOICEDESK_CONFIG_DIR", tmp_path / "config")
    monkeypatch.delenv("INVOICEDESK_STORE", raising=False)
    monkeypatch.delenv("INVOICEDESK_LOG_LEVEL", raising=False)
    yield
    for handler in list(logging.getLogger("invoicedesk").handlers):
        handler.close()
    logging.getLogger("invoicedesk").handlers.clear()


class TestCLIBasics:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Usage:" in result.output
        for command in ("list", "show", "edit", "version"):
            assert command in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"invoicedesk version {__version__}" in result.output

    def test_verbose_and_quiet_conflict(self, store_path):
        result = runner.invoke(app, ["--verbose", "--quiet", "--store", str(store_path), "list"])
        assert result.exit_code == 1
        assert "mutually exclusive" in result.output

    def test_invalid_log_level_warns(self, store_path, monkeypatch):
        monkeypatch.setenv("INVOICEDESK_LOG_LEVEL", "chatty")
        result = runner.invoke(app, ["--store", str(store_path), "version"])
        assert result.exit_code == 0
        assert "chatty" in result.output


class TestListCommand:
    def test_empty_store(self, tmp_path):
        result = runner.invoke(app, ["--store", str(tmp_path / "empty.json"), "list"])
        assert result.exit_code == 0
        assert "No invoices" in result.output

    def test_lists_invoices(self, store_path):
        result = runner.invoke(app, ["--store", str(store_path), "list"])
        assert result.exit_code == 0
        assert "inv-1" in result.output
        assert "Weekly" in result.output

    def test_store_from_environment(self, store_path, monkeypatch):
        monkeypatch.setenv("INVOICEDESK_STORE", str(store_path))
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "inv-1" in result.output

    def test_malformed_store_exits_with_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nope")
        result = runner.invoke(app, ["--store", str(path), "list"])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output


class TestShowCommand:
    def test_show_panel(self, store_path):
        result = runner.invoke(app, ["--store", str(store_path), "show", "inv-1"])
        assert result.exit_code == 0
        assert "Weekly groceries" in result.output
        assert "Mega Image" in result.output

    def test_show_json(self, store_path, invoice_dict):
        result = runner.invoke(app, ["--store", str(store_path), "show", "inv-1", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == invoice_dict

    def test_show_missing_invoice(self, store_path):
        result = runner.invoke(app, ["--store", str(store_path), "show", "inv-404"])
        assert result.exit_code == 1
        assert "Invoice not found" in result.output

    def test_store_directory_is_rejected(self, tmp_path):
        result = runner.invoke(app, ["--store", str(tmp_path), "list"])
        assert result.exit_code == 1
        assert "Invoice store path is a directory" in result.output
