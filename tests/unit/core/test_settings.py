"""Тесты загрузки конфигурации из окружения."""

import os

import pytest

from src.http_stub.core.exceptions import ConfigurationError
from src.http_stub.core.logging import LogFormat, LogLevel
from src.http_stub.core.settings import StubServerSettings, load_server_config_from_env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Изолировать тесты от HTTP_STUB_* и .env в рабочей директории."""
    for key in list(os.environ):
        if key.upper().startswith("HTTP_STUB_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestStubServerSettings:

    def test_defaults(self):
        config = load_server_config_from_env()
        assert config.host == "127.0.0.1"
        assert config.port == 0
        assert config.logging is None

    def test_env_variables(self, monkeypatch):
        monkeypatch.setenv("HTTP_STUB_PORT", "8089")
        monkeypatch.setenv("HTTP_STUB_MAX_JOURNAL_ENTRIES", "50")
        monkeypatch.setenv("HTTP_STUB_RECORD_REQUESTS", "false")

        config = load_server_config_from_env()

        assert config.port == 8089
        assert config.max_journal_entries == 50
        assert config.record_requests is False

    def test_logging_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HTTP_STUB_LOG_ENABLED", "true")
        monkeypatch.setenv("HTTP_STUB_LOG_LEVEL", "debug")
        monkeypatch.setenv("HTTP_STUB_LOG_FORMAT", "JSON")
        monkeypatch.setenv("HTTP_STUB_LOG_FILE_PATH", str(tmp_path / "stub.log"))

        config = load_server_config_from_env()

        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON
        assert config.logging.enable_file is True

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "stub.env"
        env_file.write_text("HTTP_STUB_HOST=0.0.0.0\nHTTP_STUB_MAX_JOURNAL_ENTRIES=25\n")

        config = load_server_config_from_env(env_file=str(env_file))

        assert config.host == "0.0.0.0"
        assert config.max_journal_entries == 25

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("HTTP_STUB_PORT", "8089")
        assert load_server_config_from_env(port=9000).port == 9000

    @pytest.mark.parametrize("name,value", [
        ("HTTP_STUB_PORT", "70000"),
        ("HTTP_STUB_LOG_LEVEL", "LOUD"),
        ("HTTP_STUB_MAX_JOURNAL_ENTRIES", "0"),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigurationError):
            load_server_config_from_env()

    def test_settings_model_directly(self):
        settings = StubServerSettings(log_enabled=False)
        assert settings.to_logging_config() is None
