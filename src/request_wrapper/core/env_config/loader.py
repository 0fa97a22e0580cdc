"""
Configuration loader from environment variables and .env files.
"""

from typing import Any, Optional

from ..config import RequestWrapperConfig, RetryConfig, TimeoutConfig
from ..exceptions import ConfigurationError
from ..logging.config import LoggingConfig
from .validator import RequestWrapperSettings


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> RequestWrapperConfig:
    """
    Load RequestWrapperConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (REQUEST_WRAPPER_*)
    3. .env file
    4. Defaults

    Overrides go through the same pydantic validation as environment
    values, so ``retry_blocklisted_codes="417,404"`` is parsed like the
    variable would be. Interceptors and headers are not settings: pass
    them to ``RequestWrapperConfig`` / ``Request`` directly.

    Args:
        env_file: Custom .env file path (default: .env)
        **overrides: Explicit overrides (RequestWrapperSettings field names)

    Returns:
        RequestWrapperConfig instance

    Raises:
        ConfigurationError: Unknown override name
        pydantic.ValidationError: Invalid value

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(base_url="https://custom.api.com", retry=3)
    """
    unknown = sorted(set(overrides) - set(RequestWrapperSettings.model_fields))
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

    codes = overrides.get('retry_blocklisted_codes')
    if codes is not None and not isinstance(codes, str):
        overrides['retry_blocklisted_codes'] = ",".join(str(code) for code in codes)

    settings = RequestWrapperSettings(_env_file=env_file or '.env', **overrides)

    logging_config = None
    logging_settings = settings.to_logging_settings()
    if logging_settings:
        logging_config = LoggingConfig.create(**logging_settings.model_dump())

    return RequestWrapperConfig(
        base_url=settings.base_url or None,
        timeout=TimeoutConfig(
            connect=settings.timeout_connect,
            read=settings.timeout_read,
            total=settings.timeout_total,
        ),
        retry=RetryConfig(
            retry=settings.retry,
            retry_delay=settings.retry_delay,
            blocklisted_codes=settings.blocklisted_codes(),
        ),
        with_credentials=settings.with_credentials,
        verify_ssl=settings.verify_ssl,
        logging=logging_config,
    )
