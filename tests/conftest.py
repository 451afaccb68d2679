"""
Pytest configuration and fixtures for http-stub tests.
"""

import pytest

from src.http_stub.core.logging.config import LoggingConfig
from src.http_stub.testing.fixtures import (  # noqa: F401
    stub_server_config,
    stub_server,
    http_client,
    async_http_client,
)


@pytest.fixture
def logging_config():
    """Console-only DEBUG logging in text format."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """JSON logging into a temporary file."""
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(tmp_path / "stub.log")
    )
