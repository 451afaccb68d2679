"""
JSON serialization helpers shared by the clients and the tests.

Request bodies are compact JSON (no whitespace between tokens) so that stubs
registered with an exact body string match what the client sends.
"""

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.exceptions import InvalidResponseError

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

ModelT = TypeVar("ModelT", bound=BaseModel)


def to_json(payload: Any) -> str:
    """
    Serialize ``payload`` to compact JSON.

    Pydantic models are dumped by alias, dataclasses via ``asdict``; anything
    else goes straight to ``json.dumps``. Key order is preserved.

    Examples:
        >>> to_json({"Name": "John Doe", "Email": "johndoe@example.com"})
        '{"Name":"John Doe","Email":"johndoe@example.com"}'
    """
    if isinstance(payload, BaseModel):
        return payload.model_dump_json(by_alias=True)
    if is_dataclass(payload) and not isinstance(payload, type):
        payload = asdict(payload)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def json_content(payload: Any) -> Tuple[bytes, Dict[str, str]]:
    """
    Encode ``payload`` as a UTF-8 JSON request body.

    Returns:
        (body, headers) where headers carries the JSON Content-Type

    Example:
        >>> body, headers = json_content({"Name": "John Doe"})
        >>> body
        b'{"Name":"John Doe"}'
        >>> headers["Content-Type"]
        'application/json; charset=utf-8'
    """
    return to_json(payload).encode("utf-8"), {"Content-Type": JSON_CONTENT_TYPE}


def read_model(model: Type[ModelT], content: Any, url: str = "") -> ModelT:
    """
    Parse a JSON body (``str`` or ``bytes``) into ``model``.

    Raises:
        InvalidResponseError: the body is not valid JSON or does not fit the model
    """
    try:
        return model.model_validate_json(content)
    except ValidationError as e:
        where = f" from {url}" if url else ""
        raise InvalidResponseError(
            f"Cannot read {model.__name__}{where}: {e.error_count()} validation error(s)"
        ) from e
