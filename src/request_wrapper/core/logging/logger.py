"""
Структурный логгер Request.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .config import LoggingConfig
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_headers, mask_sensitive_data, mask_url


class RequestLogger:
    """
    Логгер с полями записи в kwargs.

    Поля маскируются до передачи в handler'ы: токены, которые добавил
    interceptor, в лог не попадают. Логгер не передаёт записи в root
    (propagate=False) и закрывается вместе с Request.

    Example:
        >>> logger = RequestLogger(LoggingConfig.create(format="json"), name="request_wrapper.api")
        >>> logger.info("Request started", method="GET", url="/users")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "request_wrapper"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = getattr(logging, self.config.level.value)
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        # Повторная инициализация с тем же именем заменяет handler'ы
        self._logger.handlers.clear()

        for handler in self._build_handlers(level):
            self._logger.addHandler(handler)

    def _build_handlers(self, level: int) -> List[logging.Handler]:
        filters: List[logging.Filter] = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)
        handlers: List[logging.Handler] = []
        if self.config.enable_console:
            handlers.append(create_console_handler(level, formatter, filters))
        if self.config.enable_file and self.config.file_path:
            handlers.append(create_file_handler(
                self.config.file_path,
                level,
                formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters,
            ))
        return handlers

    @staticmethod
    def _mask(fields: Dict[str, Any]) -> Dict[str, Any]:
        # url и headers маскируются по имени query параметра / заголовка
        url = fields.get("url")
        if isinstance(url, str):
            fields["url"] = mask_url(url)
        headers = fields.get("headers")
        if isinstance(headers, Mapping):
            fields["headers"] = mask_headers(headers)
        return mask_sensitive_data(fields)

    def _log(self, level: int, message: str, fields: Dict[str, Any], exc_info: bool = False) -> None:
        self._logger.log(level, message, extra=self._mask(fields), exc_info=exc_info)

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        """
        Example:
            >>> logger.info("Request completed", status_code=200, duration_ms=150)
        """
        self._log(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, fields)

    def exception(self, message: str, **fields: Any) -> None:
        """ERROR с traceback текущего исключения."""
        self._log(logging.ERROR, message, fields, exc_info=True)

    @property
    def handlers(self) -> List[logging.Handler]:
        return list(self._logger.handlers)

    def close(self) -> None:
        """Сбросить и закрыть handler'ы. Повторный вызов ничего не делает."""
        if self._closed:
            return
        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)
        self._closed = True

    def __enter__(self) -> "RequestLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
