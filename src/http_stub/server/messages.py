"""Request and response messages exchanged inside the stub server."""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from requests.structures import CaseInsensitiveDict
from werkzeug.wrappers import Request


@dataclass(frozen=True)
class RequestMessage:
    """
    An HTTP request as received by the stub server.

    Attributes:
        method: Upper-case HTTP method
        path: URL path without the query string
        query: Query parameters, name -> all values in arrival order
        headers: Case-insensitive header mapping
        body_bytes: Raw request body
        client_address: (host, port) of the peer
        base_url: Scheme and authority the server listens on
        timestamp: Arrival time (epoch seconds)
    """

    method: str
    path: str
    query: Mapping[str, List[str]] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    body_bytes: bytes = b""
    client_address: Optional[Tuple[str, int]] = None
    base_url: str = ""
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def from_raw(
        cls,
        method: str,
        raw_path: str,
        headers: Mapping[str, str],
        body: bytes = b"",
        client_address: Optional[Tuple[str, int]] = None,
        base_url: str = "",
    ) -> "RequestMessage":
        """Build a message from the request line target and header pairs."""
        parts = urlsplit(raw_path)
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            query=parse_qs(parts.query, keep_blank_values=True),
            headers=CaseInsensitiveDict(headers),
            body_bytes=body,
            client_address=client_address,
            base_url=base_url,
        )

    @classmethod
    def from_request(cls, request: Request, body: bytes, base_url: str) -> "RequestMessage":
        """Build a message from a werkzeug request whose body was already read."""
        port = request.environ.get("REMOTE_PORT")
        return cls(
            method=request.method.upper(),
            path=request.path or "/",
            query=request.args.to_dict(flat=False),
            headers=CaseInsensitiveDict(request.headers.items()),
            body_bytes=body,
            client_address=(request.remote_addr, int(port)) if port else None,
            base_url=base_url,
        )

    @property
    def body(self) -> str:
        """Body decoded as UTF-8; undecodable bytes are replaced."""
        return self.body_bytes.decode("utf-8", errors="replace")

    @property
    def url(self) -> str:
        if not self.query:
            return f"{self.base_url}{self.path}"
        pairs = "&".join(f"{k}={v}" for k, values in self.query.items() for v in values)
        return f"{self.base_url}{self.path}?{pairs}"

    def json(self) -> Any:
        """Parse the body as JSON. Raises ``ValueError`` on invalid JSON."""
        return json.loads(self.body_bytes)


@dataclass
class ResponseMessage:
    """A rendered response, handed to werkzeug to be written to the socket."""

    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    delay: float = 0.0

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
