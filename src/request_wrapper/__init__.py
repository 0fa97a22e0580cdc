"""request-wrapper - httpx request wrapper with interceptors, cancellation and retry."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .request import Request
from .core.config import (
    RequestWrapperConfig,
    RequestConfig,
    TimeoutConfig,
    RetryConfig,
)
from .core.abort import AbortController, AbortSignal, AbortRegistry
from .core.content_type import ContentType
from .core.interceptors import Interceptors
from .core.env_config import load_from_env
from .core.logging import LoggingConfig
from .core.exceptions import (
    RequestWrapperException,
    TransportError,
    TimeoutError,
    ConnectionError,
    HTTPStatusError,
    UnexpectedStatusError,
    RequestCancelledError,
    ConfigurationError,
)

# Users can configure logging themselves using logging.getLogger('request_wrapper')
logging.getLogger('request_wrapper').addHandler(logging.NullHandler())

try:
    __version__ = version("request-wrapper")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Core
    "Request",

    # Config
    "RequestWrapperConfig",
    "RequestConfig",
    "TimeoutConfig",
    "RetryConfig",
    "LoggingConfig",
    "load_from_env",

    # Pipeline
    "Interceptors",
    "ContentType",

    # Cancellation
    "AbortController",
    "AbortSignal",
    "AbortRegistry",

    # Exceptions
    "RequestWrapperException",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "HTTPStatusError",
    "UnexpectedStatusError",
    "RequestCancelledError",
    "ConfigurationError",

    "__version__",
]
