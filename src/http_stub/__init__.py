"""http-stub - in-process HTTP stub server with matching HTTP clients."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .server import (
    StubServer,
    RequestPattern,
    ResponseTemplate,
    RequestMessage,
    ResponseMessage,
    Mapping,
    LogEntry,
    NO_MATCH_STATUS,
    NO_MATCH_MESSAGE,
)
from .client import HTTPClient, AsyncHTTPClient
from .core.config import TimeoutConfig, HTTPClientConfig, StubServerConfig
from .core.exceptions import (
    HTTPStubException,
    StubServerError,
    ServerNotStartedError,
    ServerAlreadyStartedError,
    MappingNotFoundError,
    InvalidMappingError,
    HTTPClientException,
    TimeoutError,
    ConnectionError,
    HTTPError,
    NotFoundError,
    ServerError,
    InvalidResponseError,
)
from .core.logging import LoggingConfig
from .models import User, NewUser, UserList

# Users configure output via logging.getLogger('http_stub') or LoggingConfig
logging.getLogger('http_stub').addHandler(logging.NullHandler())

try:
    __version__ = version("http-stub-core")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    # Server
    "StubServer",
    "RequestPattern",
    "ResponseTemplate",
    "RequestMessage",
    "ResponseMessage",
    "Mapping",
    "LogEntry",
    "NO_MATCH_STATUS",
    "NO_MATCH_MESSAGE",

    # Clients
    "HTTPClient",
    "AsyncHTTPClient",

    # Config
    "TimeoutConfig",
    "HTTPClientConfig",
    "StubServerConfig",
    "LoggingConfig",

    # Exceptions
    "HTTPStubException",
    "StubServerError",
    "ServerNotStartedError",
    "ServerAlreadyStartedError",
    "MappingNotFoundError",
    "InvalidMappingError",
    "HTTPClientException",
    "TimeoutError",
    "ConnectionError",
    "HTTPError",
    "NotFoundError",
    "ServerError",
    "InvalidResponseError",

    # Models
    "User",
    "NewUser",
    "UserList",

    # Version
    "__version__",
]
