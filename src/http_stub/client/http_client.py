# src/http_stub/client/http_client.py
"""
Синхронный HTTP клиент на базе requests.

Тонкая обёртка: base_url, таймауты из конфига (если заданы), классификация
ошибок транспорта. Без retry - ответы возвращаются как есть.
"""

import time
from typing import Any, Optional, Type, TypeVar

import requests
from requests.adapters import HTTPAdapter
from pydantic import BaseModel

from ..core.config import HTTPClientConfig
from ..core.exceptions import classify_requests_exception, error_for_status
from ..core.logging import HTTPStubLogger
from ..utils.serialization import json_content, read_model
from ..utils.urls import build_url

ModelT = TypeVar("ModelT", bound=BaseModel)


class HTTPClient:
    """
    HTTP клиент для обращения к stub серверу (или любому другому).

    Example:
        >>> with HTTPClient(base_url=server.url) as client:
        ...     response = client.get("/api/users")
        ...     response.status_code
        200

    Features:
        - Connection pooling (requests.Session)
        - Ответы 4xx/5xx возвращаются, если не включён raise_for_status
        - Ошибки соединения/таймауты -> ConnectionError / TimeoutError
        - Контекстный менеджер для освобождения соединений
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        config: Optional[HTTPClientConfig] = None,
        **kwargs: Any
    ):
        """
        Args:
            base_url: Базовый URL
            config: HTTPClientConfig (если указан, остальные параметры игнорируются)
            **kwargs: Параметры для HTTPClientConfig.create (timeout, headers, ...)
        """
        if config is None:
            config = HTTPClientConfig.create(base_url=base_url, **kwargs)

        self._config = config
        self._session: Optional[requests.Session] = None
        self._logger = HTTPStubLogger(config.logging, name="http_stub.client")

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # Ретраев нет: один запрос - одна попытка
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        if self._config.headers:
            session.headers.update(self._config.headers)
        return session

    @property
    def session(self) -> requests.Session:
        """Сессия, создаётся лениво."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    # ==================== Управление жизненным циклом ====================

    def close(self) -> None:
        """Закрыть сессию и освободить соединения. Идемпотентно."""
        if self._session is not None:
            self._session.close()
            self._session = None
        self._logger.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ==================== HTTP методы ====================

    def request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """
        Выполнить HTTP запрос.

        Args:
            method: HTTP метод
            endpoint: Путь относительно base_url или абсолютный URL
            **kwargs: Параметры requests (params, headers, data, json, ...)

        Raises:
            TimeoutError: Таймаут запроса
            ConnectionError: Сервер недоступен
            HTTPError: Статус >= 400 при raise_for_status=True
        """
        url = build_url(self._config.base_url, endpoint)
        if self._config.timeout is not None:
            kwargs.setdefault('timeout', self._config.timeout.as_tuple())
        kwargs.setdefault('allow_redirects', self._config.follow_redirects)

        self._logger.debug("Request started", method=method, url=url)
        start_time = time.monotonic()

        try:
            response = self.session.request(method=method, url=url, **kwargs)
        except requests.exceptions.RequestException as e:
            error = classify_requests_exception(e, url)
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

    def get(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """GET запрос."""
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """POST запрос."""
        return self.request("POST", endpoint, **kwargs)

    def put(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """PUT запрос."""
        return self.request("PUT", endpoint, **kwargs)

    def patch(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """PATCH запрос."""
        return self.request("PATCH", endpoint, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """DELETE запрос."""
        return self.request("DELETE", endpoint, **kwargs)

    def head(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """HEAD запрос."""
        return self.request("HEAD", endpoint, **kwargs)

    def options(self, endpoint: str, **kwargs: Any) -> requests.Response:
        """OPTIONS запрос."""
        return self.request("OPTIONS", endpoint, **kwargs)

    # ==================== JSON ====================

    def post_json(self, endpoint: str, payload: Any, **kwargs: Any) -> requests.Response:
        """
        POST с телом в виде компактного JSON (UTF-8, application/json).

        Example:
            >>> client.post_json("/api/users", NewUser(name="John Doe", email="johndoe@example.com"))
        """
        body, headers = json_content(payload)
        headers.update(kwargs.pop('headers', None) or {})
        return self.post(endpoint, data=body, headers=headers, **kwargs)

    def get_model(self, endpoint: str, model: Type[ModelT], **kwargs: Any) -> ModelT:
        """GET и разбор тела ответа в pydantic модель."""
        response = self.get(endpoint, **kwargs)
        return read_model(model, response.content, url=response.url)

    # ==================== Properties ====================

    @property
    def base_url(self) -> Optional[str]:
        """Базовый URL."""
        return self._config.base_url

    @property
    def config(self) -> HTTPClientConfig:
        return self._config
