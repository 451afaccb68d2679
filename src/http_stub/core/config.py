"""
Система конфигурации для stub сервера и HTTP клиентов.

Все конфиги immutable (frozen dataclasses) для потокобезопасности.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Union, TYPE_CHECKING, Mapping
from types import MappingProxyType

if TYPE_CHECKING:
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов клиента.

    None в поле = без лимита для этой фазы.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
        >>> TimeoutConfig(read=60)
    """
    connect: Optional[float] = None
    read: Optional[float] = None

    def __post_init__(self):
        """Валидация."""
        if self.connect is not None and self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read is not None and self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[Optional[float], Optional[float]]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Dict[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"Accept": "application/json"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))

@dataclass(frozen=True)
class HTTPClientConfig:
    """
    Конфигурация HTTPClient / AsyncHTTPClient.

    Args:
        base_url: Базовый URL (обычно адрес stub сервера)
        headers: Дефолтные заголовки
        timeout: Конфигурация таймаутов (None = дефолты requests / httpx)
        raise_for_status: Превращать 4xx/5xx ответы в исключения
        follow_redirects: Следовать редиректам
        logging: Конфигурация логирования (None = без логов)

    Examples:
        >>> config = HTTPClientConfig(base_url="http://127.0.0.1:54321")
        >>> config = HTTPClientConfig.create(timeout=60, raise_for_status=True)
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: Optional[TimeoutConfig] = None
    raise_for_status: bool = False
    follow_redirects: bool = True
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Normalize base_url and freeze mutable dicts."""
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: Union[None, int, float, Tuple[float, float], TimeoutConfig] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        raise_for_status: bool = False,
        follow_redirects: bool = True,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'HTTPClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            timeout: Таймаут (число, (connect, read), TimeoutConfig или None)
            connect_timeout: Таймаут подключения (переопределяет timeout)
            read_timeout: Таймаут чтения (переопределяет timeout)
            headers: Заголовки
            raise_for_status: Бросать исключения на 4xx/5xx
            follow_redirects: Следовать редиректам
            logging: Конфигурация логирования

        Examples:
            >>> config = HTTPClientConfig.create(timeout=60)
            >>> config = HTTPClientConfig.create(timeout=(5, 60))
        """
        return cls(
            base_url=base_url,
            headers=headers or {},
            timeout=_timeout_from(timeout, connect_timeout, read_timeout),
            raise_for_status=raise_for_status,
            follow_redirects=follow_redirects,
            logging=logging,
        )

    def with_timeout(
        self,
        timeout: Union[None, int, float, Tuple[float, float], TimeoutConfig]
    ) -> 'HTTPClientConfig':
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return HTTPClientConfig(
            base_url=self.base_url,
            headers=self.headers,
            timeout=_timeout_from(timeout),
            raise_for_status=self.raise_for_status,
            follow_redirects=self.follow_redirects,
            logging=self.logging,
        )

    def with_headers(self, headers: Dict[str, str]) -> 'HTTPClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"Accept": "application/json"})
        """
        merged = dict(self.headers)
        merged.update(headers)

        return HTTPClientConfig(
            base_url=self.base_url,
            headers=merged,
            timeout=self.timeout,
            raise_for_status=self.raise_for_status,
            follow_redirects=self.follow_redirects,
            logging=self.logging,
        )

def _timeout_from(
    timeout: Union[None, int, float, Tuple[float, float], TimeoutConfig],
    connect_timeout: Optional[float] = None,
    read_timeout: Optional[float] = None,
) -> Optional[TimeoutConfig]:
    if isinstance(timeout, TimeoutConfig):
        base = timeout
    elif isinstance(timeout, tuple):
        base = TimeoutConfig(connect=timeout[0], read=timeout[1])
    elif timeout is not None:
        base = TimeoutConfig(connect=timeout, read=timeout)
    elif connect_timeout is None and read_timeout is None:
        return None
    else:
        base = TimeoutConfig()

    if connect_timeout is not None or read_timeout is not None:
        return TimeoutConfig(
            connect=base.connect if connect_timeout is None else connect_timeout,
            read=base.read if read_timeout is None else read_timeout,
        )
    return base

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# STUB SERVER CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class StubServerConfig:
    """
    Конфигурация stub сервера.

    Args:
        host: Адрес для bind (по умолчанию loopback)
        port: Порт (0 = выбирает ОС)
        record_requests: Записывать запросы в журнал
        max_journal_entries: Максимум записей в журнале (None = без лимита)
        logging: Конфигурация логирования (None = без логов)

    Examples:
        >>> StubServerConfig()
        >>> StubServerConfig(port=8089, max_journal_entries=100)
    """
    host: str = "127.0.0.1"
    port: int = 0
    record_requests: bool = True
    max_journal_entries: Optional[int] = None
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация."""
        if not self.host:
            raise ValueError("host must not be empty")
        if not 0 <= self.port <= 65535:
            raise ValueError("port must be in range 0..65535")
        if self.max_journal_entries is not None and self.max_journal_entries <= 0:
            raise ValueError("max_journal_entries must be positive")
