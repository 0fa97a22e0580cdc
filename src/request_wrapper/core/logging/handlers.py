"""
Console и файловые handler'ы для RequestLogger.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional, TypeVar

H = TypeVar("H", bound=logging.Handler)


def _prepare(
    handler: H,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Iterable[logging.Filter]],
) -> H:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for log_filter in filters or ():
        handler.addFilter(log_filter)
    return handler


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Iterable[logging.Filter]] = None,
) -> logging.StreamHandler:
    """Handler в stdout."""
    return _prepare(logging.StreamHandler(sys.stdout), level, formatter, filters)


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    filters: Optional[Iterable[logging.Filter]] = None,
) -> RotatingFileHandler:
    """
    Файловый handler с ротацией по размеру.

    Каталог лога создаётся, если его нет. Ротация: app.log -> app.log.1 -> ...
    до ``backup_count`` файлов.
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    return _prepare(handler, level, formatter, filters)
