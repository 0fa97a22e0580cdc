"""
Иерархия исключений request-wrapper.

Классификация:
- retryable=True - ошибку можно повторить (сеть, таймаут, не-2xx статус)
- fatal=True - НЕ ретраить никогда (отмена, ошибка конфигурации)

Каждая ошибка несёт ``code`` (аналог кода ошибки транспорта), по которому
работает blocklist в RetryConfig.
"""

from typing import Any, Optional

import httpx

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RequestWrapperException(Exception):
    """Базовое исключение request-wrapper."""

    retryable: bool = False
    fatal: bool = False
    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        url: Optional[str] = None,
        config: Any = None,
    ):
        self.message = message
        self.code = code if code is not None else self.default_code
        self.url = url
        # RequestConfig запроса, в котором произошла ошибка
        self.config = config
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(RequestWrapperException):
    """
    Ошибка транспорта - запрос не получил ответа.

    Примеры: обрыв соединения, ошибка протокола.
    """
    retryable = True
    default_code = "ERR_TRANSPORT"

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message, url=url, **kwargs)

class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_type: Тип таймаута ('connect', 'read', 'write', 'pool')
    """
    default_code = "ETIMEDOUT"

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_type: Optional[str] = None,
        **kwargs
    ):
        self.timeout_type = timeout_type
        if timeout_type:
            message += f" ({timeout_type} timeout)"
        super().__init__(message, url, **kwargs)

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - DNS resolution failed
    """
    default_code = "ERR_NETWORK"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СТАТУСЫ ОТВЕТА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPStatusError(RequestWrapperException):
    """
    Сервер ответил статусом вне 2xx.

    ``code`` равен статусу строкой ("404", "417", ...), поэтому конкретные
    статусы можно исключить из retry через blocklisted_codes.

    Args:
        status_code: HTTP статус
        url: URL
        payload: Распакованное тело ответа
        response: httpx.Response
    """
    retryable = True

    def __init__(
        self,
        status_code: int,
        url: str,
        payload: Any = None,
        response: Optional[httpx.Response] = None,
        **kwargs
    ):
        self.status_code = status_code
        self.payload = payload
        self.response = response
        super().__init__(
            f"HTTP {status_code} error for {url}",
            code=str(status_code),
            url=url,
            **kwargs
        )

class UnexpectedStatusError(RequestWrapperException):
    """
    Успешный на уровне транспорта ответ со статусом вне success_status_codes.

    Несёт распакованный payload - вызывающий код получает тело ответа
    вместе с ошибкой. НЕ ретраится.
    """

    def __init__(self, status_code: int, url: str, payload: Any = None, **kwargs):
        self.status_code = status_code
        self.payload = payload
        super().__init__(
            f"Unexpected status {status_code} for {url}",
            code=str(status_code),
            url=url,
            **kwargs
        )

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ФАТАЛЬНЫЕ ОШИБКИ (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RequestCancelledError(RequestWrapperException):
    """
    Запрос отменён через cancel_request / cancel_all_requests.

    Args:
        url: URL отменённого запроса
        reason: Причина отмены (если передана в abort())
    """
    fatal = True
    default_code = "ERR_CANCELED"

    def __init__(self, url: str, reason: Optional[str] = None, **kwargs):
        self.reason = reason
        msg = f"Request cancelled: {url}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, url=url, **kwargs)

class ConfigurationError(RequestWrapperException, ValueError):
    """
    Ошибка конфигурации: невалидные значения конфига или interceptor,
    вернувший не RequestConfig. Наследует ValueError.
    """
    fatal = True
    default_code = "ERR_CONFIG"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_httpx_exception(
    exc: Exception,
    url: str,
    config: Any = None,
) -> RequestWrapperException:
    """
    Конвертировать httpx исключения в наши.

    Args:
        exc: Исключение из httpx
        url: URL запроса
        config: RequestConfig запроса

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = httpx.ReadTimeout("timed out")
        >>> our_exc = classify_httpx_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.code == "ETIMEDOUT"
    """
    if isinstance(exc, httpx.TimeoutException):
        if isinstance(exc, httpx.ConnectTimeout):
            timeout_type = "connect"
        elif isinstance(exc, httpx.ReadTimeout):
            timeout_type = "read"
        elif isinstance(exc, httpx.WriteTimeout):
            timeout_type = "write"
        elif isinstance(exc, httpx.PoolTimeout):
            timeout_type = "pool"
        else:
            timeout_type = None
        return TimeoutError("Request timeout", url, timeout_type=timeout_type, config=config)

    elif isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        return ConnectionError(str(exc) or "Connection error", url, config=config)

    elif isinstance(exc, httpx.TransportError):
        return TransportError(str(exc) or exc.__class__.__name__, url, config=config)

    else:
        # Неизвестная ошибка - оборачиваем
        return RequestWrapperException(str(exc), url=url, config=config)
