"""
Конфигурация логирования request-wrapper.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..exceptions import ConfigurationError

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Настройки структурного логирования Request.

    Args:
        level: Уровень логирования
        format: json или text
        enable_console: Писать в stdout
        enable_file: Писать в файл (нужен file_path)
        file_path: Путь к файлу лога
        max_bytes: Размер файла до ротации
        backup_count: Сколько ротированных файлов хранить
        enable_correlation_id: Добавлять correlation_id вызова в каждую запись
        extra_fields: Статические поля для каждой записи (service, env, ...)

    Examples:
        >>> LoggingConfig.create(level="DEBUG", format="json")
        >>> LoggingConfig.create(enable_file=True, file_path="logs/requests.log")
    """
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ConfigurationError("file_path is required when enable_file=True")

    @classmethod
    def create(cls, level: str = "INFO", format: str = "text", **kwargs: Any) -> "LoggingConfig":
        """
        Конструктор со строковыми level/format.

        Остальные kwargs передаются в LoggingConfig как есть.

        Raises:
            ValueError: Неизвестный уровень или формат
        """
        if kwargs.get("extra_fields") is None:
            kwargs.pop("extra_fields", None)
        return cls(level=LogLevel(level.upper()), format=LogFormat(format.lower()), **kwargs)
