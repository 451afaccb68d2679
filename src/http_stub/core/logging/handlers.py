"""
Handlers installed by a configured HTTPStubLogger.

Console output goes to stdout so pytest's ``capsys`` sees it; file output
rotates by size.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

from .config import LoggingConfig
from .filters import ExtraFieldsFilter, RequestIdFilter
from .formatters import get_formatter


def _filters_for(config: LoggingConfig) -> List[logging.Filter]:
    filters: List[logging.Filter] = []
    if config.enable_request_id:
        filters.append(RequestIdFilter())
    if config.extra_fields:
        filters.append(ExtraFieldsFilter(config.extra_fields))
    return filters


def create_console_handler(config: LoggingConfig) -> logging.StreamHandler:
    """stdout handler with the configured level, format and filters."""
    return _prepare(logging.StreamHandler(sys.stdout), config)


def create_file_handler(config: LoggingConfig) -> RotatingFileHandler:
    """
    Rotating file handler for ``config.file_path``.

    Missing parent directories are created. Rotation keeps
    ``config.backup_count`` files of up to ``config.max_bytes`` each:
        stub.log, stub.log.1, stub.log.2, ...

    Raises:
        ValueError: config has no file_path
    """
    if not config.file_path:
        raise ValueError("file_path is required for a file handler")

    Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=config.file_path,
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    return _prepare(handler, config)


def _prepare(handler: logging.Handler, config: LoggingConfig):
    handler.setLevel(config.level.to_logging())
    handler.setFormatter(get_formatter(config.format.value))
    for f in _filters_for(config):
        handler.addFilter(f)
    return handler


def build_handlers(config: LoggingConfig) -> List[logging.Handler]:
    """
    All handlers ``config`` asks for, in console-then-file order.

    Example:
        >>> config = LoggingConfig.create(enable_file=True, file_path="/tmp/stub.log")
        >>> [type(h).__name__ for h in build_handlers(config)]
        ['StreamHandler', 'RotatingFileHandler']
    """
    handlers: List[logging.Handler] = []
    if config.enable_console:
        handlers.append(create_console_handler(config))
    if config.enable_file:
        handlers.append(create_file_handler(config))
    return handlers
