"""
Pydantic модели настроек из окружения.
"""

from typing import FrozenSet, Literal, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Level = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Format = Literal["json", "text"]


class LoggingSettings(BaseModel):
    """Логирование, собранное из REQUEST_WRAPPER_LOG_* переменных."""

    level: Level = "INFO"
    format: Format = "text"
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = True

    @model_validator(mode="after")
    def _file_needs_path(self) -> "LoggingSettings":
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        return self


class RequestWrapperSettings(BaseSettings):
    """
    Настройки Request из переменных окружения и .env.

    Переменные окружения важнее .env файла.

    Example .env:
        REQUEST_WRAPPER_BASE_URL=https://api.example.com
        REQUEST_WRAPPER_TIMEOUT_READ=10
        REQUEST_WRAPPER_RETRY=2
        REQUEST_WRAPPER_RETRY_DELAY=1.0
        REQUEST_WRAPPER_RETRY_BLOCKLISTED_CODES=417,404
        REQUEST_WRAPPER_WITH_CREDENTIALS=true
        REQUEST_WRAPPER_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="REQUEST_WRAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = ""

    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=10.0, gt=0)
    timeout_total: Optional[float] = Field(default=None, gt=0)

    retry: int = Field(default=0, ge=0, le=10)
    retry_delay: float = Field(default=0.05, ge=0)
    # Через запятую: "417,404,ETIMEDOUT"
    retry_blocklisted_codes: str = "417"

    with_credentials: bool = False
    verify_ssl: bool = True

    log_level: Level = "INFO"
    log_format: Format = "text"
    log_enable_console: bool = True
    log_enable_file: bool = False
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = True

    def blocklisted_codes(self) -> FrozenSet[str]:
        return frozenset(
            code.strip() for code in self.retry_blocklisted_codes.split(",") if code.strip()
        )

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """LoggingSettings из log_* полей; None если все выходы выключены."""
        if not (self.log_enable_console or self.log_enable_file):
            return None
        prefix = "log_"
        return LoggingSettings(**{
            name[len(prefix):]: value
            for name, value in self
            if name.startswith(prefix)
        })
