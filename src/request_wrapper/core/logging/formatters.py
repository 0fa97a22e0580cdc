"""
Форматтеры записей: JSON (по строке на запись) и текст.

Поля, переданные в RequestLogger через kwargs, попадают в LogRecord как
атрибуты; форматтеры выводят их после сообщения.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

# Стандартные атрибуты LogRecord, всё остальное - поля записи
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class _FieldsMixin:

    @staticmethod
    def fields(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }


class JSONFormatter(_FieldsMixin, logging.Formatter):
    """
    Одна JSON строка на запись.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123+00:00", "level": "INFO",
         "logger": "request_wrapper.api.example.com", "message": "Request completed",
         "method": "GET", "url": "/users", "status_code": 200}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self.fields(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(_FieldsMixin, logging.Formatter):
    """
    [2024-01-15 10:30:45] [INFO] [request_wrapper] Request started method=GET url=/users
    """

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = " ".join(f"{key}={value}" for key, value in self.fields(record).items())
        return f"{line} {pairs}" if pairs else line


FORMATTERS = {
    "json": JSONFormatter,
    "text": TextFormatter,
}


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Форматтер по имени формата.

    Raises:
        ValueError: Неизвестный формат
    """
    try:
        return FORMATTERS[format_type.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown format type: {format_type}. Available: {', '.join(FORMATTERS)}"
        ) from None
