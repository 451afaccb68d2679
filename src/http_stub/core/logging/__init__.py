"""
Logging system for http-stub.

Example:
    >>> from src.http_stub.core.logging import HTTPStubLogger, LoggingConfig
    >>> config = LoggingConfig.create(level="DEBUG", format="json")
    >>> logger = HTTPStubLogger(config, name="http_stub.server")
    >>> logger.info("Mapping added", guid="...", path="/api/users")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import HTTPStubLogger
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    RequestIdFilter,
    ExtraFieldsFilter,
    set_request_id,
    get_request_id,
    clear_request_id,
)
from .handlers import build_handlers, create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "HTTPStubLogger",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "RequestIdFilter",
    "ExtraFieldsFilter",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    # Handlers
    "build_handlers",
    "create_console_handler",
    "create_file_handler",
]
