"""Serialization and URL helpers."""

from .serialization import JSON_CONTENT_TYPE, json_content, read_model, to_json
from .urls import build_url

__all__ = [
    "JSON_CONTENT_TYPE",
    "json_content",
    "read_model",
    "to_json",
    "build_url",
]
