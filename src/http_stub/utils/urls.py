"""URL helpers."""

from typing import Optional


def build_url(base_url: Optional[str], endpoint: str) -> str:
    """
    Join ``endpoint`` onto ``base_url``.

    Absolute endpoints are returned unchanged.

    Examples:
        >>> build_url("http://127.0.0.1:8080", "/api/users")
        'http://127.0.0.1:8080/api/users'
        >>> build_url("http://127.0.0.1:8080/", "api/users")
        'http://127.0.0.1:8080/api/users'
        >>> build_url(None, "http://example.com/x")
        'http://example.com/x'
    """
    if endpoint.startswith(("http://", "https://")):
        return endpoint

    if not base_url:
        return endpoint

    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"
