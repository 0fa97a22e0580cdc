"""
Environment configuration for request-wrapper.

Load configuration from .env files and REQUEST_WRAPPER_* variables.

Example:
    >>> from request_wrapper.core.env_config import load_from_env
    >>>
    >>> config = load_from_env()
    >>> config = load_from_env(env_file=".env.production", retry=5)
"""

from .loader import load_from_env
from .validator import RequestWrapperSettings, LoggingSettings

__all__ = [
    "load_from_env",
    "RequestWrapperSettings",
    "LoggingSettings",
]
