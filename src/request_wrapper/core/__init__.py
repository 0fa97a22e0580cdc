"""Core модули request-wrapper."""

from .config import (
    TimeoutConfig,
    RetryConfig,
    RequestConfig,
    RequestWrapperConfig,
)
from .abort import AbortController, AbortSignal, AbortRegistry
from .content_type import ContentType
from .interceptors import Interceptors
from .retry_engine import RetryEngine
from .exceptions import (
    RequestWrapperException,
    TransportError,
    TimeoutError,
    ConnectionError,
    HTTPStatusError,
    UnexpectedStatusError,
    RequestCancelledError,
    ConfigurationError,
    classify_httpx_exception,
)

__all__ = [
    # Config
    "TimeoutConfig",
    "RetryConfig",
    "RequestConfig",
    "RequestWrapperConfig",
    # Cancellation
    "AbortController",
    "AbortSignal",
    "AbortRegistry",
    # Pipeline
    "Interceptors",
    "RetryEngine",
    "ContentType",
    # Exceptions
    "RequestWrapperException",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "HTTPStatusError",
    "UnexpectedStatusError",
    "RequestCancelledError",
    "ConfigurationError",
    "classify_httpx_exception",
]
