"""
pytest fixtures for tests that talk to a stub server.

Every test gets a fresh server on a free loopback port and a client pointed
at it. The server is stopped when the test finishes, pass or fail.

Usage (conftest.py):
    from src.http_stub.testing.fixtures import (  # noqa: F401
        stub_server_config,
        stub_server,
        http_client,
        async_http_client,
    )

Override ``stub_server_config`` in a conftest to change host, port or logging.
"""

import pytest
import pytest_asyncio

from ..client.async_client import AsyncHTTPClient
from ..client.http_client import HTTPClient
from ..core.config import StubServerConfig
from ..server.stub_server import StubServer


@pytest.fixture
def stub_server_config():
    """Default server config: 127.0.0.1, OS-assigned port."""
    return StubServerConfig()


@pytest.fixture
def stub_server(stub_server_config):
    """A started StubServer, stopped on teardown."""
    server = StubServer(stub_server_config).start()
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def http_client(stub_server):
    """requests-based client whose base URL is the stub server."""
    client = HTTPClient(base_url=stub_server.url)
    yield client
    client.close()


@pytest_asyncio.fixture
async def async_http_client(stub_server):
    """httpx-based client whose base URL is the stub server."""
    async with AsyncHTTPClient(base_url=stub_server.url) as client:
        yield client
