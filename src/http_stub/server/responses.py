"""
Response templates: the "respond with" half of a mapping.

Example:
    >>> template = (
    ...     ResponseTemplate.create()
    ...     .with_status_code(201)
    ...     .with_body('{"Id":1,"Name":"John Doe","Email":"johndoe@example.com"}')
    ... )
"""

import json
from datetime import timedelta
from http import HTTPStatus
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..core.exceptions import InvalidMappingError
from .messages import RequestMessage, ResponseMessage

ResponseCallback = Callable[[RequestMessage], ResponseMessage]


class ResponseTemplate:
    """Fluent builder for a canned response. Status defaults to 200."""

    def __init__(self):
        self._status_code: int = 200
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""
        self._delay: float = 0.0
        self._callback: Optional[ResponseCallback] = None

    @classmethod
    def create(cls) -> "ResponseTemplate":
        return cls()

    @property
    def status_code(self) -> int:
        return self._status_code

    def with_status_code(self, status_code: Union[int, HTTPStatus]) -> "ResponseTemplate":
        code = int(status_code)
        if not 100 <= code <= 599:
            raise InvalidMappingError(f"Invalid status code: {code}")
        self._status_code = code
        return self

    def with_header(self, name: str, value: str) -> "ResponseTemplate":
        self._headers[name] = value
        return self

    def with_headers(self, headers: Mapping[str, str]) -> "ResponseTemplate":
        self._headers.update(headers)
        return self

    def with_body(self, body: Union[str, bytes], encoding: str = "utf-8") -> "ResponseTemplate":
        """Body is sent byte-for-byte; no Content-Type is implied."""
        self._body = body.encode(encoding) if isinstance(body, str) else bytes(body)
        return self

    def with_body_as_json(self, body: Any, indented: bool = False) -> "ResponseTemplate":
        if indented:
            text = json.dumps(body, indent=2, ensure_ascii=False)
        else:
            text = json.dumps(body, separators=(",", ":"), ensure_ascii=False)
        self._body = text.encode("utf-8")
        self._headers.setdefault("Content-Type", "application/json")
        return self

    def with_delay(self, delay: Union[float, timedelta]) -> "ResponseTemplate":
        seconds = delay.total_seconds() if isinstance(delay, timedelta) else float(delay)
        if seconds < 0:
            raise InvalidMappingError("Delay must be non-negative")
        self._delay = seconds
        return self

    def with_callback(self, callback: ResponseCallback) -> "ResponseTemplate":
        """Build the response dynamically; static status/headers/body are ignored."""
        self._callback = callback
        return self

    def render(self, request: RequestMessage) -> ResponseMessage:
        if self._callback is not None:
            response = self._callback(request)
            if not isinstance(response, ResponseMessage):
                raise InvalidMappingError(
                    f"Response callback returned {type(response).__name__}, "
                    f"expected ResponseMessage"
                )
            if self._delay and not response.delay:
                response.delay = self._delay
            return response

        return ResponseMessage(
            status_code=self._status_code,
            headers=dict(self._headers),
            body=self._body,
            delay=self._delay,
        )

    def __repr__(self) -> str:
        return f"ResponseTemplate(status_code={self._status_code}, body={self._body[:40]!r})"
