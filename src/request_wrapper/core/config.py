"""
Система конфигурации для request-wrapper.

Конфиг экземпляра immutable (frozen dataclasses). Конфиг отдельного вызова
(RequestConfig) изменяемый: его передают через interceptor'ы и в нём живёт
счётчик retry.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union, TYPE_CHECKING
from types import MappingProxyType

import httpx

from .exceptions import ConfigurationError
from .interceptors import Interceptors

if TYPE_CHECKING:
    from .abort import AbortSignal
    from .logging import LoggingConfig

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов (секунды).

    Args:
        connect: Таймаут подключения
        read: Таймаут чтения данных
        total: Лимит ожидания соединения из пула (опционально)

    Examples:
        >>> TimeoutConfig(connect=5, read=30)
        >>> TimeoutConfig(connect=3, read=60, total=90)
    """
    connect: float = 5
    read: float = 10
    total: Optional[float] = None

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ConfigurationError("connect timeout must be positive")
        if self.read <= 0:
            raise ConfigurationError("read timeout must be positive")
        if self.total is not None and self.total <= 0:
            raise ConfigurationError("total timeout must be positive")

    @classmethod
    def coerce(cls, timeout: Union[int, float, Tuple[float, float], 'TimeoutConfig']) -> 'TimeoutConfig':
        """Привести число, (connect, read) или TimeoutConfig к TimeoutConfig."""
        if isinstance(timeout, TimeoutConfig):
            return timeout
        if isinstance(timeout, tuple):
            return cls(connect=timeout[0], read=timeout[1])
        return cls(connect=timeout, read=timeout)

    def to_httpx(self) -> httpx.Timeout:
        """Вернуть как httpx.Timeout."""
        return httpx.Timeout(
            connect=self.connect,
            read=self.read,
            write=self.read,  # Используем read для write
            pool=self.total,
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

DEFAULT_RETRY_DELAY = 0.05
DEFAULT_BLOCKLISTED_CODES = frozenset({"417"})

@dataclass(frozen=True)
class RetryConfig:
    """
    Конфигурация retry.

    Args:
        retry: Количество повторных попыток (не включая первую). 0 - без retry
        retry_delay: Фиксированная задержка между попытками (сек)
        blocklisted_codes: Коды ошибок, которые никогда не ретраятся

    Examples:
        >>> RetryConfig(retry=2, retry_delay=1.0)
        >>> RetryConfig(retry=3, blocklisted_codes=frozenset({"417", "404"}))
    """
    retry: int = 0
    retry_delay: float = DEFAULT_RETRY_DELAY
    blocklisted_codes: FrozenSet[str] = DEFAULT_BLOCKLISTED_CODES

    def __post_init__(self):
        """Валидация и нормализация кодов в строки."""
        if self.retry < 0:
            raise ConfigurationError("retry must be non-negative")
        if self.retry_delay < 0:
            raise ConfigurationError("retry_delay must be non-negative")
        object.__setattr__(
            self, 'blocklisted_codes', frozenset(str(code) for code in self.blocklisted_codes)
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST CONFIG (per call)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass
class RequestConfig:
    """
    Конфигурация одного вызова Request.request().

    Передаётся через interceptor'ы без изменений структуры, поэтому
    изменяемая. ``retry``/``retry_delay``/``timeout`` переопределяют
    настройки экземпляра, None - взять настройки экземпляра.

    Args:
        url: URL (относительный к base_url или абсолютный)
        method: HTTP метод
        headers: Заголовки вызова (поверх заголовков экземпляра)
        params: Query параметры
        data: Form/raw тело
        json: JSON тело
        timeout: Таймаут вызова
        retry: Количество повторных попыток для вызова
        retry_delay: Задержка между попытками для вызова
        interceptors: Interceptor'ы уровня вызова
        extra: Произвольные данные приложения (например, флаг loading)
        retry_count: Счётчик выполненных повторных попыток
        signal: AbortSignal, выставляется при отправке

    Examples:
        >>> RequestConfig(url="/users", params={"page": 1})
        >>> RequestConfig(url="/users", method="POST", json={"name": "alice"}, retry=2)
    """
    url: str
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Mapping[str, Any]] = None
    data: Any = None
    json: Any = None
    timeout: Optional[Union[int, float, Tuple[float, float], TimeoutConfig]] = None
    retry: Optional[int] = None
    retry_delay: Optional[float] = None
    interceptors: Optional[Interceptors] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    retry_count: int = 0
    signal: Optional['AbortSignal'] = field(default=None, repr=False)

    def __post_init__(self):
        self.method = self.method.upper()
        if self.headers is None:
            self.headers = {}

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))

@dataclass(frozen=True)
class RequestWrapperConfig:
    """
    Главная конфигурация Request.

    Args:
        base_url: Базовый URL (опционально)
        headers: Дефолтные заголовки
        timeout: Конфигурация таймаутов
        retry: Конфигурация retry
        with_credentials: Сохранять cookies между запросами
        interceptors: Interceptor'ы экземпляра
        success_status_codes: Статусы, при которых payload возвращается вызывающему
        verify_ssl: Проверять SSL сертификаты
        logging: Конфигурация логирования (None = без структурного логирования)

    Examples:
        >>> config = RequestWrapperConfig(base_url="https://api.example.com")
        >>> config = RequestWrapperConfig.create(timeout=10, retry=2, retry_delay=1.0)
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    with_credentials: bool = False
    interceptors: Interceptors = field(default_factory=Interceptors)
    success_status_codes: FrozenSet[int] = frozenset({200})
    verify_ssl: bool = True
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Normalize base_url and freeze mutable containers."""
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        object.__setattr__(
            self, 'success_status_codes', frozenset(int(s) for s in self.success_status_codes)
        )
        if not self.success_status_codes:
            raise ConfigurationError("success_status_codes must not be empty")

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: Union[int, float, Tuple[float, float], TimeoutConfig] = 10,
        retry: int = 0,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        blocklisted_codes: Iterable[Union[str, int]] = DEFAULT_BLOCKLISTED_CODES,
        headers: Optional[Dict[str, str]] = None,
        with_credentials: bool = False,
        interceptors: Optional[Interceptors] = None,
        success_status_codes: Iterable[int] = (200,),
        verify_ssl: bool = True,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'RequestWrapperConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            timeout: Таймаут (число, (connect, read) или TimeoutConfig)
            retry: Количество повторных попыток
            retry_delay: Задержка между попытками (сек)
            blocklisted_codes: Коды ошибок без retry
            headers: Заголовки
            with_credentials: Сохранять cookies между запросами
            interceptors: Interceptor'ы экземпляра
            success_status_codes: Статусы, при которых возвращается payload
            verify_ssl: Проверять SSL
            logging: Конфигурация логирования

        Returns:
            RequestWrapperConfig instance

        Examples:
            >>> config = RequestWrapperConfig.create(timeout=10, retry=2, retry_delay=1.0)
            >>> config = RequestWrapperConfig.create(timeout=(3, 30), with_credentials=True)
        """
        return cls(
            base_url=base_url,
            headers=headers or {},
            timeout=TimeoutConfig.coerce(timeout),
            retry=RetryConfig(
                retry=retry,
                retry_delay=retry_delay,
                blocklisted_codes=frozenset(blocklisted_codes),
            ),
            with_credentials=with_credentials,
            interceptors=interceptors or Interceptors(),
            success_status_codes=frozenset(success_status_codes),
            verify_ssl=verify_ssl,
            logging=logging,
        )

    def _replace(self, **changes) -> 'RequestWrapperConfig':
        values = {
            'base_url': self.base_url,
            'headers': self.headers,
            'timeout': self.timeout,
            'retry': self.retry,
            'with_credentials': self.with_credentials,
            'interceptors': self.interceptors,
            'success_status_codes': self.success_status_codes,
            'verify_ssl': self.verify_ssl,
            'logging': self.logging,
        }
        values.update(changes)
        return RequestWrapperConfig(**values)

    def with_timeout(self, timeout: Union[int, float, Tuple[float, float], TimeoutConfig]) -> 'RequestWrapperConfig':
        """
        Создать новый конфиг с изменённым timeout.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return self._replace(timeout=TimeoutConfig.coerce(timeout))

    def with_retry(self, retry: int, retry_delay: Optional[float] = None) -> 'RequestWrapperConfig':
        """
        Создать новый конфиг с изменённым retry.

        Args:
            retry: Количество повторных попыток
            retry_delay: Новая задержка (None - оставить текущую)

        Example:
            >>> new_config = config.with_retry(3, retry_delay=0.5)
        """
        retry_cfg = RetryConfig(
            retry=retry,
            retry_delay=self.retry.retry_delay if retry_delay is None else retry_delay,
            blocklisted_codes=self.retry.blocklisted_codes,
        )
        return self._replace(retry=retry_cfg)

    def with_headers(self, headers: Dict[str, str]) -> 'RequestWrapperConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return self._replace(headers=merged)
