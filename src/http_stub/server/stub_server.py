"""
In-process HTTP stub server.

Real HTTP over loopback. The socket and HTTP/1.x handling is werkzeug's
threaded WSGI server on a daemon thread; this module only matches requests
against the registered mappings and journals the exchange. Port 0 lets the
OS pick a free port.

Example:
    >>> with StubServer() as server:
    ...     server.given(
    ...         RequestPattern.create().with_path("/api/users").using_get()
    ...     ).respond_with(
    ...         ResponseTemplate.create().with_status_code(200).with_body('{"Users":[]}')
    ...     )
    ...     requests.get(f"{server.url}/api/users").text
    '{"Users":[]}'
"""

import json
import threading
import time
import uuid
from typing import List, Optional

from werkzeug.serving import BaseWSGIServer, WSGIRequestHandler, make_server
from werkzeug.wrappers import Request, Response

from ..core.config import StubServerConfig
from ..core.exceptions import (
    ServerAlreadyStartedError,
    ServerNotStartedError,
    StubServerError,
)
from ..core.logging import HTTPStubLogger, clear_request_id, set_request_id
from .journal import LogEntry, RequestJournal
from .mappings import Mapping, MappingBuilder, MappingRegistry
from .matchers import RequestPattern
from .messages import RequestMessage, ResponseMessage

NO_MATCH_STATUS = 404
NO_MATCH_MESSAGE = "No matching mapping found"
MALFORMED_REQUEST_STATUS = 400


def _status_response(status_code: int, message: str) -> ResponseMessage:
    return ResponseMessage(
        status_code=status_code,
        headers={"Content-Type": "application/json"},
        body=json.dumps({"Status": message}, separators=(",", ":")).encode("utf-8"),
    )


class _StubResponse(Response):
    # Only headers from the template; no implied text/plain.
    default_mimetype = None


def _to_wsgi_response(message: ResponseMessage) -> Response:
    return _StubResponse(
        response=message.body,
        status=message.status_code,
        headers=list(message.headers.items()),
    )


class _QuietRequestHandler(WSGIRequestHandler):
    """werkzeug handler without the per-request access log; StubServer logs requests itself."""

    def log_request(self, code="-", size="-"):
        pass


class StubServer:
    """
    WireMock-style stub server.

    Register mappings with ``given(...).respond_with(...)``; every request is
    answered by the best matching mapping or with a 404
    ``{"Status":"No matching mapping found"}``.

    Thread-safe: the registry and the journal are guarded by locks.
    """

    def __init__(self, config: Optional[StubServerConfig] = None):
        self._config = config or StubServerConfig()
        self._registry = MappingRegistry()
        self._journal = RequestJournal(self._config.max_journal_entries)
        self._logger = HTTPStubLogger(self._config.logging, name="http_stub.server")
        self._httpd: Optional[BaseWSGIServer] = None
        self._thread: Optional[threading.Thread] = None
        self._lifecycle_lock = threading.Lock()

    @classmethod
    def create_started(cls, config: Optional[StubServerConfig] = None) -> "StubServer":
        """Create a server and start it on a free port."""
        return cls(config).start()

    # ==================== Lifecycle ====================

    def start(self) -> "StubServer":
        """
        Bind and start serving.

        Raises:
            ServerAlreadyStartedError: start() on a running server
            StubServerError: the address could not be bound
        """
        with self._lifecycle_lock:
            if self._httpd is not None:
                raise ServerAlreadyStartedError(self._base_url(self._httpd))
            if self._logger.closed:
                self._logger = HTTPStubLogger(self._config.logging, name="http_stub.server")

            try:
                httpd = make_server(
                    self._config.host,
                    self._config.port,
                    self._application,
                    threaded=True,
                    request_handler=_QuietRequestHandler,
                )
            except SystemExit:
                # werkzeug exits the process when bind() fails
                raise StubServerError(
                    f"Could not bind {self._config.host}:{self._config.port}"
                ) from None

            thread = threading.Thread(
                target=httpd.serve_forever,
                kwargs={"poll_interval": 0.05},
                name=f"http-stub-{httpd.port}",
                daemon=True,
            )
            self._httpd = httpd
            thread.start()
            self._thread = thread

        self._logger.info("Stub server started", url=self.url)
        return self

    def stop(self) -> None:
        """Stop serving, close the listening socket and log handlers. Idempotent."""
        with self._lifecycle_lock:
            httpd, thread = self._httpd, self._thread
            self._httpd = None
            self._thread = None

        if httpd is None:
            return

        url = self._base_url(httpd)
        httpd.shutdown()
        httpd.server_close()
        if thread is not None:
            thread.join(timeout=5)
        self._logger.info("Stub server stopped", url=url)
        self._logger.close()

    def __enter__(self) -> "StubServer":
        if not self.is_started:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False

    # ==================== Addresses ====================

    @staticmethod
    def _base_url(httpd: BaseWSGIServer) -> str:
        return f"http://{httpd.host}:{httpd.port}"

    @property
    def is_started(self) -> bool:
        return self._httpd is not None

    @property
    def url(self) -> str:
        httpd = self._httpd
        if httpd is None:
            raise ServerNotStartedError("get url")
        return self._base_url(httpd)

    @property
    def urls(self) -> List[str]:
        return [self.url]

    @property
    def port(self) -> int:
        httpd = self._httpd
        if httpd is None:
            raise ServerNotStartedError("get port")
        return httpd.port

    @property
    def config(self) -> StubServerConfig:
        return self._config

    @property
    def logger(self) -> HTTPStubLogger:
        return self._logger

    # ==================== Mappings ====================

    def given(self, request: RequestPattern) -> MappingBuilder:
        """Start a mapping; finish it with ``respond_with()``."""
        return MappingBuilder(request, self._register)

    def _register(self, mapping: Mapping) -> Mapping:
        stored = self._registry.add(mapping)
        self._logger.debug(
            "Mapping added",
            mapping_guid=stored.guid,
            title=stored.title,
            priority=stored.priority,
            pattern=repr(stored.request),
        )
        return stored

    @property
    def mappings(self) -> List[Mapping]:
        return self._registry.all()

    def get_mapping(self, guid: str) -> Mapping:
        return self._registry.get(guid)

    def delete_mapping(self, guid: str) -> None:
        self._registry.remove(guid)

    def reset_mappings(self) -> None:
        self._registry.clear()

    # ==================== Journal ====================

    @property
    def log_entries(self) -> List[LogEntry]:
        return self._journal.entries()

    def find_log_entries(self, request: RequestPattern) -> List[LogEntry]:
        return self._journal.find(request)

    def unmatched_log_entries(self) -> List[LogEntry]:
        return self._journal.unmatched()

    def reset_log_entries(self) -> None:
        self._journal.clear()

    def reset(self) -> None:
        """Drop all mappings and journal entries."""
        self.reset_mappings()
        self.reset_log_entries()

    # ==================== Request handling ====================

    @Request.application
    def _application(self, request: Request) -> Response:
        httpd = self._httpd
        base_url = self._base_url(httpd) if httpd is not None else request.host_url.rstrip("/")
        try:
            body = request.get_data()
        except OSError as exc:
            # werkzeug raises OSError for broken chunked framing
            self._logger.warning(
                "Malformed request body",
                method=request.method,
                path=request.path,
                error=str(exc),
            )
            return _to_wsgi_response(_status_response(MALFORMED_REQUEST_STATUS, str(exc)))

        response = self.handle(RequestMessage.from_request(request, body, base_url))
        if response.delay:
            time.sleep(response.delay)
        return _to_wsgi_response(response)

    def handle(self, request: RequestMessage) -> ResponseMessage:
        """Match ``request``, render the response and journal the exchange."""
        entry_guid = str(uuid.uuid4())
        set_request_id(entry_guid)
        started = time.monotonic()
        try:
            outcome = self._registry.find(request)
            mapping = outcome.mapping

            if mapping is None:
                response = _status_response(NO_MATCH_STATUS, NO_MATCH_MESSAGE)
                self._logger.warning(
                    NO_MATCH_MESSAGE,
                    method=request.method,
                    path=request.path,
                    closest_mapping=outcome.closest.guid if outcome.closest else None,
                )
            else:
                try:
                    response = mapping.response.render(request)
                except Exception as exc:
                    self._logger.exception(
                        "Response template failed",
                        mapping_guid=mapping.guid,
                        method=request.method,
                        path=request.path,
                    )
                    response = _status_response(500, str(exc) or exc.__class__.__name__)

            if self._config.record_requests:
                self._journal.record(LogEntry(
                    request=request,
                    response=response,
                    mapping_guid=mapping.guid if mapping else None,
                    partial_mapping_guid=outcome.closest.guid if outcome.closest else None,
                    guid=entry_guid,
                ))

            self._logger.info(
                "Request served",
                method=request.method,
                path=request.path,
                status_code=response.status_code,
                mapping_guid=mapping.guid if mapping else None,
                duration_ms=round((time.monotonic() - started) * 1000, 2),
            )
            return response
        finally:
            clear_request_id()

    def __repr__(self) -> str:
        state = self.url if self.is_started else "stopped"
        return f"<StubServer {state} mappings={len(self._registry)}>"
