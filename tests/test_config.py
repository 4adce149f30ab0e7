"""Tests for pydantic-settings configuration."""

import pytest
from pydantic import ValidationError

from khaatakitab.config import (
    AppSettings,
    LedgerSettings,
    SmsSettings,
    get_settings,
    validate_all_settings,
)
from khaatakitab.orchestrator import create_app_components
from khaatakitab.services.storage import InMemoryLedgerStorage, JsonFileLedgerStorage


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLedgerSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LEDGER_BACKEND", raising=False)
        monkeypatch.delenv("LEDGER_DATA_DIR", raising=False)
        settings = LedgerSettings()
        assert settings.backend == "memory"
        assert settings.ledger_file.name == "ledger.json"

    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEDGER_BACKEND", "json")
        monkeypatch.setenv("LEDGER_DATA_DIR", str(tmp_path))
        settings = LedgerSettings()
        assert settings.backend == "json"
        assert settings.notifications_file == tmp_path / "notifications.json"

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            LedgerSettings(backend="postgres")

    def test_data_dir_cannot_be_a_file(self, tmp_path):
        path = tmp_path / "file.txt"
        path.write_text("x")
        with pytest.raises(ValidationError):
            LedgerSettings(data_dir=str(path))


class TestSmsSettings:

    def test_trailing_slash_removed(self):
        assert SmsSettings(api_url="https://sms.example.com/").api_url == "https://sms.example.com"

    def test_blank_url_is_unconfigured(self):
        assert not SmsSettings(api_url="  ").is_configured

    def test_non_http_url_rejected(self):
        with pytest.raises(ValidationError):
            SmsSettings(api_url="ftp://sms.example.com")


class TestAppSettings:

    def test_default_categories_list(self):
        settings = AppSettings(default_categories="Sales, Rent,,Transport ")
        assert settings.default_categories_list == ["Sales", "Rent", "Transport"]


class TestValidateAllSettings:

    def test_reports_broken_section(self, monkeypatch):
        monkeypatch.setenv("LEDGER_BACKEND", "postgres")
        status = validate_all_settings()
        assert status["ledger"] is False
        assert "ledger_error" in status
        assert status["app"] is True


class TestCreateAppComponents:

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("LEDGER_BACKEND", "memory")
        components = create_app_components()
        assert isinstance(components.ledger_flow._ledger, InMemoryLedgerStorage)

    def test_json_backend(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEDGER_BACKEND", "json")
        monkeypatch.setenv("LEDGER_DATA_DIR", str(tmp_path))
        components = create_app_components()
        assert isinstance(components.ledger_flow._ledger, JsonFileLedgerStorage)
