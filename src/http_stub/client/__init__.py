"""HTTP clients: requests-based ``HTTPClient`` and httpx-based ``AsyncHTTPClient``."""

from .async_client import AsyncHTTPClient
from .http_client import HTTPClient

__all__ = ["HTTPClient", "AsyncHTTPClient"]
