"""Тесты конфигурации."""

import pytest
from dataclasses import FrozenInstanceError

from src.http_stub.core.config import HTTPClientConfig, StubServerConfig, TimeoutConfig
from src.http_stub.core.logging import LoggingConfig


class TestTimeoutConfig:
    """Тесты TimeoutConfig."""

    def test_defaults_are_unlimited(self):
        config = TimeoutConfig()
        assert config.connect is None
        assert config.read is None
        assert config.as_tuple() == (None, None)

    @pytest.mark.parametrize("kwargs,message", [
        ({"connect": 0}, "connect timeout must be positive"),
        ({"read": -1}, "read timeout must be positive"),
    ])
    def test_validation(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            TimeoutConfig(**kwargs)

    def test_immutable(self):
        config = TimeoutConfig()
        with pytest.raises(FrozenInstanceError):
            config.connect = 10


class TestHTTPClientConfig:
    """Тесты HTTPClientConfig."""

    def test_base_url_trailing_slash_stripped(self):
        assert HTTPClientConfig(base_url="http://127.0.0.1:8080/").base_url == "http://127.0.0.1:8080"

    def test_headers_are_frozen(self):
        config = HTTPClientConfig(headers={"Accept": "application/json"})
        with pytest.raises(TypeError):
            config.headers["X-New"] = "value"

    @pytest.mark.parametrize("timeout,expected", [
        (10, (10, 10)),
        ((2, 8), (2, 8)),
        (TimeoutConfig(connect=1, read=2), (1, 2)),
    ])
    def test_create_timeout_forms(self, timeout, expected):
        assert HTTPClientConfig.create(timeout=timeout).timeout.as_tuple() == expected

    def test_create_connect_and_read_override(self):
        config = HTTPClientConfig.create(timeout=60, connect_timeout=3)
        assert config.timeout.as_tuple() == (3, 60)

    def test_create_read_timeout_only(self):
        config = HTTPClientConfig.create(read_timeout=15)
        assert config.timeout == TimeoutConfig(read=15)

    def test_no_timeout_by_default(self):
        assert HTTPClientConfig().timeout is None
        assert HTTPClientConfig.create().timeout is None

    def test_with_timeout_returns_new_config(self):
        config = HTTPClientConfig.create(base_url="http://x", timeout=30, raise_for_status=True)
        updated = config.with_timeout(90)

        assert updated is not config
        assert updated.timeout.read == 90
        assert updated.base_url == "http://x"
        assert updated.raise_for_status is True
        assert config.timeout.read == 30

    def test_with_headers_merges(self):
        config = HTTPClientConfig.create(headers={"A": "1"})
        updated = config.with_headers({"B": "2"})

        assert dict(updated.headers) == {"A": "1", "B": "2"}
        assert dict(config.headers) == {"A": "1"}


class TestStubServerConfig:
    """Тесты StubServerConfig."""

    def test_defaults(self):
        config = StubServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 0
        assert config.record_requests is True
        assert config.max_journal_entries is None
        assert config.logging is None

    @pytest.mark.parametrize("kwargs,message", [
        ({"host": ""}, "host must not be empty"),
        ({"port": -1}, "port must be in range"),
        ({"port": 70000}, "port must be in range"),
        ({"max_journal_entries": 0}, "max_journal_entries must be positive"),
    ])
    def test_validation(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            StubServerConfig(**kwargs)

    def test_accepts_logging_config(self):
        logging_config = LoggingConfig.create(level="debug")
        config = StubServerConfig(logging=logging_config)
        assert config.logging is logging_config
