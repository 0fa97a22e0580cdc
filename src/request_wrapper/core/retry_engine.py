"""
Retry engine с фиксированной задержкой.

Включает:
- Ограниченный бюджет повторных попыток
- Blocklist кодов ошибок
- Задержку, которую прерывает отмена запроса
"""

import asyncio
import logging
from typing import Optional

from .abort import AbortSignal
from .config import RequestConfig, RetryConfig
from .exceptions import RequestWrapperException

logger = logging.getLogger(__name__)


class RetryEngine:
    """
    Решает, нужен ли retry, и ждёт задержку перед ним.

    Счётчик живёт в RequestConfig.retry_count, поэтому один RetryEngine
    обслуживает все параллельные вызовы экземпляра.

    Examples:
        >>> engine = RetryEngine(RetryConfig(retry=2, retry_delay=0.1))
        >>> if engine.should_retry(config, error):
        ...     engine.increment(config)
        ...     await engine.async_wait(config, signal)
    """

    def __init__(self, config: RetryConfig):
        """
        Args:
            config: Конфигурация retry экземпляра
        """
        self.config = config

    def budget(self, request: RequestConfig) -> int:
        """Количество повторных попыток для вызова."""
        if request.retry is not None:
            return request.retry
        return self.config.retry

    def delay(self, request: RequestConfig) -> float:
        """Задержка перед повторной попыткой (сек)."""
        if request.retry_delay is not None:
            return request.retry_delay
        return self.config.retry_delay

    def should_retry(self, request: RequestConfig, error: BaseException) -> bool:
        """
        Решить нужен ли retry.

        Args:
            request: Конфигурация вызова
            error: Исключение последней попытки

        Returns:
            True если нужен retry
        """
        budget = self.budget(request)
        if not budget:
            return False

        # Чужие исключения (например, из interceptor'а) не несут запроса
        if not isinstance(error, RequestWrapperException):
            return False

        # Фатальные ошибки НЕ ретраим
        if error.fatal:
            return False

        if error.code is not None and str(error.code) in self.config.blocklisted_codes:
            logger.debug(f"Error code {error.code} is blocklisted, not retrying")
            return False

        return request.retry_count < budget

    def increment(self, request: RequestConfig) -> None:
        """Увеличить счётчик попыток."""
        request.retry_count += 1

    async def async_wait(
        self,
        request: RequestConfig,
        signal: Optional[AbortSignal] = None,
    ) -> bool:
        """
        Подождать задержку перед retry.

        Args:
            request: Конфигурация вызова
            signal: Сигнал отмены, прерывающий ожидание

        Returns:
            True если ожидание прервано отменой
        """
        delay = self.delay(request)
        if signal is None:
            await asyncio.sleep(delay)
            return False

        try:
            await asyncio.wait_for(signal.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True
