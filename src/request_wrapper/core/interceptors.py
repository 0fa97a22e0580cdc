"""
Interceptor pipeline.

Четыре необязательные стадии вокруг каждого запроса, в фиксированном порядке:

    request -> (request_error) -> транспорт -> response | response_error

Каждая стадия может быть обычной функцией или корутиной. Отсутствующая
стадия пропускается.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .config import RequestConfig

logger = logging.getLogger(__name__)

RequestInterceptor = Callable[
    ["RequestConfig"], Union["RequestConfig", Awaitable["RequestConfig"]]
]
ResponseInterceptor = Callable[[Any], Any]
ErrorInterceptor = Callable[[BaseException], Any]


@dataclass(frozen=True)
class Interceptors:
    """
    Набор interceptor'ов.

    Args:
        request: Трансформация RequestConfig перед отправкой
        request_error: Обработчик ошибки из ``request``. Вернул RequestConfig -
            запрос продолжается с ним, вернул None - ошибка пробрасывается
        response: Трансформация ответа (httpx.Response) до распаковки
        response_error: Обработчик ошибки запроса. Может бросить своё
            исключение, вернуть None (исходная ошибка пробрасывается) или
            вернуть ответ - тогда запрос считается восстановленным

    Examples:
        >>> def add_auth(config):
        ...     config.headers["Authorization"] = "token"
        ...     return config
        >>> Interceptors(request=add_auth)
    """
    request: Optional[RequestInterceptor] = None
    request_error: Optional[ErrorInterceptor] = None
    response: Optional[ResponseInterceptor] = None
    response_error: Optional[ErrorInterceptor] = None

    def __bool__(self) -> bool:
        return any((self.request, self.request_error, self.response, self.response_error))


async def call_interceptor(func: Callable[..., Any], value: Any) -> Any:
    """Вызвать interceptor, дождавшись результата если это корутина."""
    result = func(value)
    if inspect.isawaitable(result):
        result = await result
    return result


async def run_request_stage(
    interceptors: Optional[Interceptors],
    config: "RequestConfig",
) -> "RequestConfig":
    """
    Применить pre-request стадию.

    Args:
        interceptors: Набор interceptor'ов (может быть None)
        config: Конфигурация запроса

    Returns:
        Конфигурация после трансформации
    """
    if not interceptors or interceptors.request is None:
        return config

    try:
        result = await call_interceptor(interceptors.request, config)
    except Exception as exc:
        if interceptors.request_error is None:
            raise
        logger.debug(f"Request interceptor failed, handing over to request_error: {exc!r}")
        recovered = await call_interceptor(interceptors.request_error, exc)
        if recovered is None:
            raise
        return recovered

    # Interceptor, который ничего не вернул, оставляет конфиг как есть
    return config if result is None else result


async def run_response_stage(interceptors: Optional[Interceptors], response: Any) -> Any:
    """Применить post-response трансформацию."""
    if not interceptors or interceptors.response is None:
        return response
    result = await call_interceptor(interceptors.response, response)
    return response if result is None else result


async def run_response_error_stage(
    interceptors: Optional[Interceptors],
    error: BaseException,
) -> Any:
    """
    Передать ошибку в post-response обработчик.

    Returns:
        Ответ, которым обработчик восстановил запрос

    Raises:
        Исходную ошибку, если обработчика нет или он вернул None;
        любое исключение, брошенное самим обработчиком.
    """
    if not interceptors or interceptors.response_error is None:
        raise error
    recovered = await call_interceptor(interceptors.response_error, error)
    if recovered is None:
        raise error
    return recovered
