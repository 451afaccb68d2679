"""
Main logger for http-stub.

Wraps a stdlib logger with keyword-style structured fields.
"""

import logging
from typing import Any, List, Optional

from .config import LoggingConfig
from .handlers import build_handlers


class HTTPStubLogger:
    """
    Structured logger used by the stub server and the clients.

    With a ``LoggingConfig`` each instance logs through its own child logger
    (``<name>.<instance id>``) with its own handlers (console and/or rotating
    file) and no propagation; concurrent instances never share handlers.
    Without one it leaves the named logger untouched, so records reach
    whatever the application (or pytest's ``caplog``) has configured.

    Example:
        >>> logger = HTTPStubLogger(LoggingConfig.create(level="DEBUG"), name="http_stub.server")
        >>> logger.info("Request served", method="GET", path="/api/users", status_code=200)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "http_stub"):
        self.config = config
        self.name = name if config is None else f"{name}.{id(self):x}"
        self._closed = False
        self._handlers: List[logging.Handler] = []
        self._logger = logging.getLogger(self.name)

        if config is None:
            return

        self._logger.setLevel(config.level.to_logging())
        self._logger.propagate = False
        self._handlers = build_handlers(config)
        for handler in self._handlers:
            self._logger.addHandler(handler)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, extra=kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log with traceback. Call from an exception handler."""
        self._logger.exception(message, extra=kwargs)

    def close(self) -> None:
        """
        Flush and close handlers installed by this logger.

        Idempotent. The stdlib logger goes back to propagating at NOTSET.
        A logger created without config owns no handlers and leaves the
        stdlib logger alone.
        """
        if self._closed:
            return
        self._closed = True

        if self.config is None:
            return

        for handler in self._handlers:
            self._logger.removeHandler(handler)
            handler.flush()
            handler.close()
        self._handlers = []
        self._logger.setLevel(logging.NOTSET)
        self._logger.propagate = True

    def __enter__(self) -> "HTTPStubLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
