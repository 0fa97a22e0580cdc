"""
Pytest configuration and fixtures for request-wrapper tests.
"""

import asyncio

import httpx
import pytest

from request_wrapper import Request, RequestWrapperConfig
from request_wrapper.core.logging.config import LoggingConfig


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def slow_transport():
    """
    MockTransport whose responses hang until released.

    Each request waits on ``release`` (an asyncio.Event), so tests can cancel
    requests while they are in flight. ``seen`` collects request paths.
    """
    release = asyncio.Event()
    seen = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        await release.wait()
        return httpx.Response(200, json={"path": request.url.path})

    transport = httpx.MockTransport(handler)
    transport.release = release
    transport.seen = seen
    return transport


@pytest.fixture
def slow_service(base_url, slow_transport):
    """Request instance backed by slow_transport."""
    client = httpx.AsyncClient(base_url=base_url, transport=slow_transport)
    return Request(RequestWrapperConfig(base_url=base_url), client=client)


@pytest.fixture
def logging_config():
    """Console-only DEBUG logging configuration."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
