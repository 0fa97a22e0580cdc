"""
Tests for Request cancellation: per-URL registry, cancel_request, cancel_all_requests.
"""

import asyncio

import pytest
import httpx
import respx

from request_wrapper import Request, RequestWrapperConfig
from request_wrapper.core.config import RetryConfig
from request_wrapper.core.exceptions import HTTPStatusError, RequestCancelledError


BASE = "https://api.example.com"


async def wait_for_requests(transport, count: int) -> None:
    """Wait until the slow transport has received ``count`` requests."""
    for _ in range(200):
        if len(transport.seen) >= count:
            return
        await asyncio.sleep(0.005)
    raise AssertionError(f"only {len(transport.seen)} request(s) reached the transport")


class TestRegistryLifecycle:
    """Handles are registered per call and released on completion."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_success_removes_handle(self):
        respx.get(f"{BASE}/users").mock(return_value=httpx.Response(200, json={}))

        async with Request(base_url=BASE) as service:
            await service.get("/users")
            assert "/users" not in service.registry
            assert len(service.registry) == 0

    @respx.mock
    @pytest.mark.asyncio
    async def test_failure_removes_handle(self):
        respx.get(f"{BASE}/users").mock(return_value=httpx.Response(500))

        async with Request(base_url=BASE, retry=1, retry_delay=0) as service:
            with pytest.raises(HTTPStatusError):
                await service.get("/users")
            assert len(service.registry) == 0

    @pytest.mark.asyncio
    async def test_handle_registered_while_in_flight(self, slow_service, slow_transport):
        task = asyncio.create_task(slow_service.get("/users"))
        await wait_for_requests(slow_transport, 1)

        assert "/users" in slow_service.registry
        assert slow_service.in_flight() == ["/users"]

        slow_transport.release.set()
        assert await task == {"path": "/users"}
        assert "/users" not in slow_service.registry
        await slow_service.close()


class TestCancelRequest:
    """cancel_request aborts only the named URLs."""

    @pytest.mark.asyncio
    async def test_cancel_one_url(self, slow_service, slow_transport):
        task_a = asyncio.create_task(slow_service.get("/a"))
        task_b = asyncio.create_task(slow_service.get("/b"))
        await wait_for_requests(slow_transport, 2)

        assert slow_service.cancel_request("/a") == 1
        assert "/a" not in slow_service.registry
        assert "/b" in slow_service.registry

        with pytest.raises(RequestCancelledError) as exc_info:
            await task_a
        assert exc_info.value.code == "ERR_CANCELED"

        slow_transport.release.set()
        assert await task_b == {"path": "/b"}
        await slow_service.close()

    @pytest.mark.asyncio
    async def test_cancel_list_of_urls(self, slow_service, slow_transport):
        tasks = [asyncio.create_task(slow_service.get(path)) for path in ("/a", "/b", "/c")]
        await wait_for_requests(slow_transport, 3)

        assert slow_service.cancel_request(["/a", "/c"], reason="navigation") == 2
        assert slow_service.in_flight() == ["/b"]

        slow_transport.release.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert isinstance(results[0], RequestCancelledError)
        assert results[0].reason == "navigation"
        assert results[1] == {"path": "/b"}
        assert isinstance(results[2], RequestCancelledError)
        await slow_service.close()

    @pytest.mark.asyncio
    async def test_cancel_unknown_url(self, slow_service):
        assert slow_service.cancel_request("/nothing") == 0

    @pytest.mark.asyncio
    async def test_same_url_concurrent_calls(self, slow_service, slow_transport):
        first = asyncio.create_task(slow_service.get("/users"))
        second = asyncio.create_task(slow_service.get("/users"))
        await wait_for_requests(slow_transport, 2)

        # Каждый вызов держит свой handle
        assert len(slow_service.registry.get("/users")) == 2

        assert slow_service.cancel_request("/users") == 2
        results = await asyncio.gather(first, second, return_exceptions=True)
        assert all(isinstance(r, RequestCancelledError) for r in results)
        await slow_service.close()

    @pytest.mark.asyncio
    async def test_cancelled_request_not_retried(self, base_url, slow_transport):
        client = httpx.AsyncClient(base_url=base_url, transport=slow_transport)
        config = RequestWrapperConfig(base_url=base_url, retry=RetryConfig(retry=3, retry_delay=0))
        service = Request(config, client=client)

        task = asyncio.create_task(service.get("/users"))
        await wait_for_requests(slow_transport, 1)
        service.cancel_request("/users")

        with pytest.raises(RequestCancelledError):
            await task
        assert len(slow_transport.seen) == 1
        await client.aclose()

    @respx.mock
    @pytest.mark.asyncio
    async def test_cancel_during_retry_delay(self):
        route = respx.get(f"{BASE}/flaky").mock(return_value=httpx.Response(500))

        async with Request(base_url=BASE, retry=3, retry_delay=30) as service:
            task = asyncio.create_task(service.get("/flaky"))
            for _ in range(200):
                if route.call_count:
                    break
                await asyncio.sleep(0.005)

            assert service.cancel_request("/flaky") == 1
            with pytest.raises(RequestCancelledError):
                await asyncio.wait_for(task, timeout=5)

        assert route.call_count == 1


class TestCancelAll:
    """cancel_all_requests aborts everything and empties the registry."""

    @pytest.mark.asyncio
    async def test_cancel_all(self, slow_service, slow_transport):
        tasks = [asyncio.create_task(slow_service.get(path)) for path in ("/a", "/b", "/b")]
        await wait_for_requests(slow_transport, 3)

        assert slow_service.cancel_all_requests() == 3
        assert len(slow_service.registry) == 0

        results = await asyncio.gather(*tasks, return_exceptions=True)
        assert all(isinstance(r, RequestCancelledError) for r in results)
        await slow_service.close()

    @pytest.mark.asyncio
    async def test_cancel_all_empty(self, slow_service):
        assert slow_service.cancel_all_requests() == 0

    @pytest.mark.asyncio
    async def test_close_cancels_in_flight(self, base_url, slow_transport):
        client = httpx.AsyncClient(base_url=base_url, transport=slow_transport)
        service = Request(base_url=base_url, client=client)

        task = asyncio.create_task(service.get("/users"))
        await wait_for_requests(slow_transport, 1)
        await service.close()

        with pytest.raises(RequestCancelledError):
            await task
        await client.aclose()
