# src/http_stub/client/async_client.py
"""
Асинхронный HTTP клиент на базе httpx.

Тот же контракт, что у HTTPClient, но с async/await API.
"""

import time
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from ..core.config import HTTPClientConfig, TimeoutConfig
from ..core.exceptions import classify_httpx_exception, error_for_status
from ..core.logging import HTTPStubLogger
from ..utils.serialization import json_content, read_model
from ..utils.urls import build_url

ModelT = TypeVar("ModelT", bound=BaseModel)


def _httpx_timeout(timeout: TimeoutConfig) -> httpx.Timeout:
    # write and pool phases stay unlimited
    return httpx.Timeout(None, connect=timeout.connect, read=timeout.read)


class AsyncHTTPClient:
    """
    Асинхронный HTTP клиент.

    Example:
        >>> async with AsyncHTTPClient(base_url=server.url) as client:
        ...     response = await client.get("/api/users")
        ...     response.text
        '{"Users":[]}'

        >>> # Или без context manager
        >>> client = AsyncHTTPClient(base_url=server.url)
        >>> response = await client.get("/api/users")
        >>> await client.close()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[HTTPClientConfig] = None,
        **kwargs: Any,
    ):
        """
        Args:
            base_url: Базовый URL для всех запросов
            config: HTTPClientConfig (если указан, остальные параметры игнорируются)
            **kwargs: Параметры для HTTPClientConfig.create (timeout, headers, ...)
        """
        if config is None:
            config = HTTPClientConfig.create(base_url=base_url, **kwargs)

        self._config = config
        self._timeout = _httpx_timeout(config.timeout) if config.timeout is not None else None
        self._logger = HTTPStubLogger(config.logging, name="http_stub.client")

        # Клиент создаётся лениво или при входе в context manager
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            client_options: Dict[str, Any] = {}
            if self._timeout is not None:
                client_options["timeout"] = self._timeout
            self._client = httpx.AsyncClient(
                headers=dict(self._config.headers),
                follow_redirects=self._config.follow_redirects,
                **client_options,
            )
        return self._client

    async def __aenter__(self) -> "AsyncHTTPClient":
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Закрыть клиент и освободить соединения."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._logger.close()

    # ==================== HTTP методы ====================

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        """
        Выполнить HTTP запрос.

        Raises:
            TimeoutError: Таймаут запроса
            ConnectionError: Сервер недоступен
            HTTPError: Статус >= 400 при raise_for_status=True
        """
        client = await self._get_client()
        url = build_url(self._config.base_url, endpoint)

        self._logger.debug("Request started", method=method, url=url)
        start_time = time.monotonic()

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            error = classify_httpx_exception(e, url)
            self._logger.warning("Request failed", method=method, url=url, error=str(error))
            raise error from e

        self._logger.info(
            "Request completed",
            method=method,
            url=url,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - start_time) * 1000, 2),
        )

        if self._config.raise_for_status and response.status_code >= 400:
            raise error_for_status(response.status_code, url, response.text[:200])

        return response

    async def get(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        """GET запрос."""
        return await self.request("GET", endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        """POST запрос."""
        return await self.request("POST", endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        """PUT запрос."""
        return await self.request("PUT", endpoint, **kwargs)

    async def patch(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        """PATCH запрос."""
        return await self.request("PATCH", endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        """DELETE запрос."""
        return await self.request("DELETE", endpoint, **kwargs)

    async def head(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        """HEAD запрос."""
        return await self.request("HEAD", endpoint, **kwargs)

    async def options(self, endpoint: str, **kwargs: Any) -> httpx.Response:
        """OPTIONS запрос."""
        return await self.request("OPTIONS", endpoint, **kwargs)

    # ==================== JSON ====================

    async def post_json(self, endpoint: str, payload: Any, **kwargs: Any) -> httpx.Response:
        """POST с телом в виде компактного JSON (UTF-8, application/json)."""
        body, headers = json_content(payload)
        headers.update(kwargs.pop('headers', None) or {})
        return await self.post(endpoint, content=body, headers=headers, **kwargs)

    async def get_model(self, endpoint: str, model: Type[ModelT], **kwargs: Any) -> ModelT:
        """GET и разбор тела ответа в pydantic модель."""
        response = await self.get(endpoint, **kwargs)
        return read_model(model, response.content, url=str(response.url))

    # ==================== Properties ====================

    @property
    def base_url(self) -> Optional[str]:
        """Базовый URL."""
        return self._config.base_url

    @property
    def config(self) -> HTTPClientConfig:
        return self._config
