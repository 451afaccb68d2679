"""Core модули: конфигурация, исключения, логирование."""

from .config import TimeoutConfig, HTTPClientConfig, StubServerConfig
from .exceptions import (
    HTTPStubException,
    ConfigurationError,
    StubServerError,
    ServerNotStartedError,
    ServerAlreadyStartedError,
    MappingNotFoundError,
    InvalidMappingError,
    HTTPClientException,
    NetworkError,
    TimeoutError,
    ConnectionError,
    ServerError,
    HTTPError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    InvalidResponseError,
    error_for_status,
    classify_requests_exception,
    classify_httpx_exception,
)

__all__ = [
    # Config
    "TimeoutConfig",
    "HTTPClientConfig",
    "StubServerConfig",
    # Exceptions
    "HTTPStubException",
    "ConfigurationError",
    "StubServerError",
    "ServerNotStartedError",
    "ServerAlreadyStartedError",
    "MappingNotFoundError",
    "InvalidMappingError",
    "HTTPClientException",
    "NetworkError",
    "TimeoutError",
    "ConnectionError",
    "ServerError",
    "HTTPError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "InvalidResponseError",
    "error_for_status",
    "classify_requests_exception",
    "classify_httpx_exception",
]
