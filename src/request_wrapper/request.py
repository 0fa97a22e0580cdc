# src/request_wrapper/request.py
"""
Асинхронная обёртка запросов на базе httpx.

Добавляет к httpx.AsyncClient:
- четыре стадии interceptor'ов вокруг каждого запроса
- реестр отмены запросов по URL
- ограниченный retry с фиксированной задержкой
"""

import asyncio
import logging
import time
import uuid
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Union
from urllib.parse import urlparse

import httpx

from .core.abort import AbortRegistry, AbortSignal
from .core.config import RequestConfig, RequestWrapperConfig, TimeoutConfig
from .core.exceptions import (
    ConfigurationError,
    HTTPStatusError,
    RequestCancelledError,
    UnexpectedStatusError,
    classify_httpx_exception,
)
from .core.interceptors import (
    run_request_stage,
    run_response_error_stage,
    run_response_stage,
)
from .core.logging import RequestLogger, clear_correlation_id, set_correlation_id
from .core.retry_engine import RetryEngine

logger = logging.getLogger(__name__)


class Request:
    """
    Обёртка запросов с interceptor'ами, отменой и retry.

    Example:
        >>> async with Request(base_url="https://api.example.com", retry=2) as service:
        ...     users = await service.get("/users", params={"page": 1})

        >>> # Отмена
        >>> task = asyncio.create_task(service.get("/slow"))
        >>> service.cancel_request("/slow")

    Features:
        - Interceptor'ы экземпляра и вызова (sync или async)
        - Отмена по URL и отмена всех запросов
        - Retry с фиксированной задержкой и blocklist кодов ошибок
        - Возвращает распакованный payload, а не httpx.Response
    """

    def __init__(
        self,
        config: Optional[RequestWrapperConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        **kwargs: Any,
    ):
        """
        Инициализация обёртки.

        Args:
            config: RequestWrapperConfig (если указан, kwargs игнорируются)
            client: Готовый httpx.AsyncClient (обёртка не закрывает его в close())
            **kwargs: Параметры для RequestWrapperConfig.create()
        """
        if config is None:
            config = RequestWrapperConfig.create(**kwargs)

        self._config = config
        self._retry_engine = RetryEngine(config.retry)
        self._registry = AbortRegistry()

        self._logger: Optional[RequestLogger] = None
        if config.logging:
            logger_name = "request_wrapper"
            if config.base_url:
                domain = urlparse(config.base_url).netloc
                if domain:
                    logger_name = f"request_wrapper.{domain}"
            self._logger = RequestLogger(config.logging, name=logger_name)

        # Клиент создаётся лениво или при входе в context manager
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url or "",
                headers=dict(self._config.headers),
                timeout=self._config.timeout.to_httpx(),
                verify=self._config.verify_ssl,
            )
            self._owns_client = True
        return self._client

    async def __aenter__(self) -> "Request":
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Отменить in-flight запросы и закрыть клиент."""
        self._registry.abort_all("client closed")
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        if self._logger:
            self._logger.close()

    # ==================== Запрос ====================

    async def request(
        self,
        config: Union[RequestConfig, str],
        **fields: Any,
    ) -> Any:
        """
        Выполнить запрос.

        Args:
            config: RequestConfig или URL
            **fields: Поля RequestConfig, если передан URL

        Returns:
            Распакованное тело ответа (JSON, текст или None)

        Raises:
            HTTPStatusError: Статус вне 2xx после всех попыток
            UnexpectedStatusError: 2xx статус вне success_status_codes
            RequestCancelledError: Запрос отменён
            TimeoutError: Таймаут запроса
            ConnectionError: Ошибка соединения
        """
        if isinstance(config, RequestConfig):
            # Счётчик и сигнал принадлежат вызову, объект вызывающего не меняется
            config = replace(
                config,
                headers=dict(config.headers),
                extra=dict(config.extra),
                retry_count=0,
                signal=None,
            )
        else:
            config = RequestConfig(url=config, **fields)

        call_interceptors = config.interceptors
        config = self._check_staged(await run_request_stage(call_interceptors, config))

        url = config.url
        controller = self._registry.register(url)
        config.signal = controller.signal

        if self._logger:
            set_correlation_id(str(uuid.uuid4()))
            self._logger.info(
                "Request started",
                method=config.method,
                url=url,
                headers=config.headers,
                retry=self._retry_engine.budget(config),
            )

        start_time = time.monotonic()
        try:
            try:
                payload = await self._request_with_retry(config, controller.signal)
            except Exception as error:
                payload = await run_response_error_stage(call_interceptors, error)
            finally:
                self._registry.release(url, controller)

            if self._logger:
                self._logger.debug(
                    "Request resolved",
                    method=config.method,
                    url=url,
                    retry_count=config.retry_count,
                    duration_ms=round((time.monotonic() - start_time) * 1000, 2),
                )
        finally:
            if self._logger:
                clear_correlation_id()

        return await run_response_stage(call_interceptors, payload)

    async def _request_with_retry(self, config: RequestConfig, signal: AbortSignal) -> Any:
        """Цикл попыток: стадии interceptor'ов экземпляра, отправка, retry."""
        interceptors = self._config.interceptors

        while True:
            try:
                staged = self._check_staged(await run_request_stage(interceptors, config))
                if staged is not config:
                    # Interceptor вернул новый конфиг - счётчик retry переносим
                    staged.retry_count = config.retry_count
                    config = staged
                config.signal = signal
                response = await self._send(config, signal)
                response = await run_response_stage(interceptors, response)
            except Exception as error:
                try:
                    response = await run_response_error_stage(interceptors, error)
                except Exception as final_error:
                    if not self._retry_engine.should_retry(config, final_error):
                        self._log_failure(config, final_error)
                        raise

                    self._retry_engine.increment(config)
                    self._log_retry(config, final_error)
                    if await self._retry_engine.async_wait(config, signal):
                        raise RequestCancelledError(
                            config.url, signal.reason, config=config
                        ) from final_error
                    continue

            return self._resolve(config, response)

    @staticmethod
    def _check_staged(config: Any) -> RequestConfig:
        """Request interceptor должен вернуть RequestConfig (или None)."""
        if not isinstance(config, RequestConfig):
            raise ConfigurationError(
                f"request interceptor returned {type(config).__name__}, expected RequestConfig"
            )
        return config

    async def _send(self, config: RequestConfig, signal: AbortSignal) -> httpx.Response:
        """Отправить запрос через httpx, параллельно ожидая сигнал отмены."""
        if signal.aborted:
            raise RequestCancelledError(config.url, signal.reason, config=config)

        client = await self._get_client()
        send_task = asyncio.ensure_future(
            client.request(config.method, config.url, **self._build_kwargs(config))
        )
        abort_task = asyncio.ensure_future(signal.wait())

        try:
            done, _ = await asyncio.wait(
                {send_task, abort_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            abort_task.cancel()
            if not send_task.done():
                send_task.cancel()

        if send_task not in done:
            # Дождаться отмены httpx запроса, чтобы соединение вернулось в пул
            await asyncio.gather(send_task, return_exceptions=True)
            if self._logger:
                self._logger.info("Request cancelled", method=config.method, url=config.url)
            raise RequestCancelledError(config.url, signal.reason, config=config)

        try:
            response = send_task.result()
        except httpx.HTTPError as exc:
            raise classify_httpx_exception(exc, config.url, config) from exc

        if not self._config.with_credentials:
            client.cookies.clear()

        if not response.is_success:
            raise HTTPStatusError(
                response.status_code,
                str(response.url),
                payload=self._unwrap(response),
                response=response,
                config=config,
            )

        if self._logger:
            self._logger.info(
                "Request completed",
                method=config.method,
                url=config.url,
                status_code=response.status_code,
                attempt=config.retry_count + 1,
                response_size=len(response.content),
            )
        return response

    def _build_kwargs(self, config: RequestConfig) -> dict:
        """Собрать kwargs для httpx.AsyncClient.request()."""
        kwargs: dict = {}
        if config.headers:
            kwargs["headers"] = config.headers
        if config.params is not None:
            kwargs["params"] = config.params
        if config.json is not None:
            kwargs["json"] = config.json
        if config.data is not None:
            if isinstance(config.data, (str, bytes)):
                kwargs["content"] = config.data
            else:
                kwargs["data"] = config.data
        if config.timeout is not None:
            kwargs["timeout"] = TimeoutConfig.coerce(config.timeout).to_httpx()
        return kwargs

    def _resolve(self, config: RequestConfig, response: Any) -> Any:
        """
        Распаковать ответ.

        Payload возвращается только для статусов из success_status_codes.
        Если interceptor уже заменил ответ не-httpx объектом, он и есть payload.
        """
        if not isinstance(response, httpx.Response):
            return response

        payload = self._unwrap(response)
        if response.status_code in self._config.success_status_codes:
            return payload

        raise UnexpectedStatusError(
            response.status_code, str(response.url), payload=payload, config=config
        )

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        """JSON тело -> объект, иначе текст; пустое тело -> None."""
        if not response.content:
            return None
        if "json" in response.headers.get("content-type", ""):
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text

    def _log_retry(self, config: RequestConfig, error: BaseException) -> None:
        delay = self._retry_engine.delay(config)
        if self._logger:
            self._logger.warning(
                "Request error (will retry)",
                method=config.method,
                url=config.url,
                error=str(error),
                error_type=type(error).__name__,
                retry_count=config.retry_count,
                max_retries=self._retry_engine.budget(config),
                delay_s=delay,
            )
        else:
            logger.debug(
                f"Retry {config.retry_count}/{self._retry_engine.budget(config)} "
                f"for {config.method} {config.url} after {delay}s: {error}"
            )

    def _log_failure(self, config: RequestConfig, error: BaseException) -> None:
        if not self._logger:
            return
        self._logger.error(
            "Request failed",
            method=config.method,
            url=config.url,
            error=str(error),
            error_type=type(error).__name__,
            code=getattr(error, "code", None),
            retry_count=config.retry_count,
        )

    # ==================== Отмена ====================

    def cancel_all_requests(self, reason: Optional[str] = None) -> int:
        """
        Отменить все in-flight запросы и очистить реестр.

        Returns:
            Количество отменённых запросов
        """
        aborted = self._registry.abort_all(reason)
        if self._logger and aborted:
            self._logger.info("Cancelled all requests", count=aborted)
        return aborted

    def cancel_request(
        self,
        url: Union[str, Iterable[str]],
        reason: Optional[str] = None,
    ) -> int:
        """
        Отменить запросы к указанным URL.

        Args:
            url: URL или список URL (в том виде, в каком они переданы в request)
            reason: Причина отмены

        Returns:
            Количество отменённых запросов
        """
        aborted = self._registry.abort(url, reason)
        if self._logger and aborted:
            self._logger.info("Cancelled requests", url=url, count=aborted)
        return aborted

    # ==================== Удобные методы ====================

    async def get(self, url: str, **fields: Any) -> Any:
        """GET запрос."""
        return await self.request(RequestConfig(url=url, method="GET", **fields))

    async def post(self, url: str, **fields: Any) -> Any:
        """POST запрос."""
        return await self.request(RequestConfig(url=url, method="POST", **fields))

    async def put(self, url: str, **fields: Any) -> Any:
        """PUT запрос."""
        return await self.request(RequestConfig(url=url, method="PUT", **fields))

    async def patch(self, url: str, **fields: Any) -> Any:
        """PATCH запрос."""
        return await self.request(RequestConfig(url=url, method="PATCH", **fields))

    async def delete(self, url: str, **fields: Any) -> Any:
        """DELETE запрос."""
        return await self.request(RequestConfig(url=url, method="DELETE", **fields))

    async def head(self, url: str, **fields: Any) -> Any:
        """HEAD запрос."""
        return await self.request(RequestConfig(url=url, method="HEAD", **fields))

    async def options(self, url: str, **fields: Any) -> Any:
        """OPTIONS запрос."""
        return await self.request(RequestConfig(url=url, method="OPTIONS", **fields))

    # ==================== Properties ====================

    @property
    def config(self) -> RequestWrapperConfig:
        return self._config

    @property
    def registry(self) -> AbortRegistry:
        """Реестр отмены экземпляра."""
        return self._registry

    @property
    def base_url(self) -> Optional[str]:
        """Базовый URL."""
        return self._config.base_url

    def in_flight(self) -> List[str]:
        """URL запросов, которые сейчас выполняются."""
        return self._registry.urls()
