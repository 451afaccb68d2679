"""
Иерархия исключений http-stub.

Две ветки:
- StubServerError - ошибки stub сервера и регистрации маппингов
- HTTPClientException - ошибки клиентов: NetworkError (транспорт),
  HTTPError (статус >= 400 при raise_for_status), InvalidResponseError
"""

from typing import Optional

import httpx
import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPStubException(Exception):
    """Базовое исключение пакета."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

class ConfigurationError(HTTPStubException):
    """Ошибка конфигурации."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# STUB SERVER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class StubServerError(HTTPStubException):
    """Базовая ошибка stub сервера."""
    pass

class ServerNotStartedError(StubServerError):
    """Операция требует запущенного сервера."""

    def __init__(self, operation: str = ""):
        msg = "Stub server is not started"
        if operation:
            msg += f" (cannot {operation})"
        super().__init__(msg)

class ServerAlreadyStartedError(StubServerError):
    """Повторный start() на уже запущенном сервере."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Stub server is already running at {url}")

class MappingNotFoundError(StubServerError):
    """Маппинг с таким guid не зарегистрирован."""

    def __init__(self, guid: str):
        self.guid = guid
        super().__init__(f"Mapping {guid} not found")

class InvalidMappingError(StubServerError):
    """
    Некорректный маппинг.

    Примеры:
    - respond_with() без шаблона ответа
    - статус код вне диапазона 100..599
    """
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT: BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(HTTPStubException):
    """Базовое исключение HTTP клиента."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NetworkError(HTTPClientException):
    """Сетевая ошибка."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class TimeoutError(NetworkError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_type: Тип таймаута ('connect' или 'read')
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_type: Optional[str] = None
    ):
        self.timeout_type = timeout_type

        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout)"

        super().__init__(msg, url)

class ConnectionError(NetworkError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused (сервер остановлен)
    - Connection reset
    """
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP СТАТУСЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPError(HTTPClientException):
    """
    Базовая HTTP ошибка.

    Args:
        status_code: HTTP статус
        url: URL
        message: Сообщение (обычно тело ответа)
    """

    def __init__(self, status_code: int, url: str, message: str = ""):
        self.status_code = status_code
        self.url = url

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)

class BadRequestError(HTTPError):
    """400 Bad Request."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(400, url, message)

class UnauthorizedError(HTTPError):
    """401 Unauthorized."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(401, url, message)

class ForbiddenError(HTTPError):
    """403 Forbidden."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(403, url, message)

class NotFoundError(HTTPError):
    """404 Not Found. Так stub сервер отвечает на запрос без маппинга."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(404, url, message)

class ServerError(HTTPError):
    """5xx ошибка сервера."""
    pass

class InvalidResponseError(HTTPClientException):
    """
    Невалидный ответ.

    Примеры:
    - Битый JSON
    - Тело не совпадает со схемой модели
    """
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}

def error_for_status(status_code: int, url: str, message: str = "") -> HTTPClientException:
    """
    Построить исключение по HTTP статусу.

    Examples:
        >>> error_for_status(404, "http://127.0.0.1/api")
        NotFoundError('HTTP 404 error for http://127.0.0.1/api')
        >>> isinstance(error_for_status(503, "http://x"), ServerError)
        True
    """
    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code](url, message)
    if 500 <= status_code < 600:
        return ServerError(status_code, url, message)
    return HTTPError(status_code, url, message)

def classify_requests_exception(
    exc: Exception,
    url: str
) -> HTTPClientException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Examples:
        >>> exc = requests.exceptions.Timeout()
        >>> our_exc = classify_requests_exception(exc, "http://127.0.0.1:1")
        >>> assert isinstance(our_exc, TimeoutError)
    """
    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError("Request timeout", url, timeout_type="connect")

    elif isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, timeout_type="read")

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError("Connection error", url)

    elif isinstance(exc, requests.exceptions.HTTPError):
        response = exc.response
        status_code = response.status_code if response is not None else 0
        return error_for_status(status_code, url)

    else:
        # Неизвестная ошибка - оборачиваем
        return HTTPClientException(str(exc))

def classify_httpx_exception(
    exc: Exception,
    url: str
) -> HTTPClientException:
    """
    Конвертировать httpx исключения в наши исключения.

    Examples:
        >>> exc = httpx.ConnectError("refused")
        >>> assert isinstance(classify_httpx_exception(exc, "http://x"), ConnectionError)
    """
    if isinstance(exc, httpx.ConnectTimeout):
        return TimeoutError("Request timeout", url, timeout_type="connect")

    elif isinstance(exc, httpx.TimeoutException):
        return TimeoutError("Request timeout", url, timeout_type="read")

    elif isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.ReadError)):
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, httpx.HTTPStatusError):
        return error_for_status(exc.response.status_code, url)

    else:
        return HTTPClientException(str(exc))
