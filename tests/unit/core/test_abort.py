"""Тесты AbortController и AbortRegistry."""

import asyncio

import pytest

from request_wrapper.core.abort import AbortController, AbortRegistry


class TestAbortController:

    def test_abort_sets_signal(self):
        controller = AbortController()
        assert controller.signal.aborted is False

        controller.abort("gone")
        assert controller.signal.aborted is True
        assert controller.signal.reason == "gone"

    def test_abort_is_idempotent(self):
        controller = AbortController()
        controller.abort("first")
        controller.abort("second")
        assert controller.signal.reason == "first"

    @pytest.mark.asyncio
    async def test_wait_wakes_on_abort(self):
        controller = AbortController()
        waiter = asyncio.create_task(controller.signal.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        controller.abort()
        await asyncio.wait_for(waiter, timeout=1)


class TestAbortRegistry:

    def test_register_and_release(self):
        registry = AbortRegistry()
        controller = registry.register("/users")

        assert "/users" in registry
        assert len(registry) == 1

        registry.release("/users", controller)
        assert "/users" not in registry
        assert len(registry) == 0

    def test_release_keeps_other_handles_of_same_url(self):
        registry = AbortRegistry()
        first = registry.register("/users")
        second = registry.register("/users")

        registry.release("/users", first)
        assert registry.get("/users") == [second]

    def test_release_unknown_is_noop(self):
        registry = AbortRegistry()
        registry.release("/users", AbortController())
        assert len(registry) == 0

    def test_abort_one_url(self):
        registry = AbortRegistry()
        users = registry.register("/users")
        posts = registry.register("/posts")

        assert registry.abort("/users") == 1
        assert users.signal.aborted
        assert not posts.signal.aborted
        assert registry.urls() == ["/posts"]

    def test_abort_many_urls(self):
        registry = AbortRegistry()
        handles = [registry.register(url) for url in ("/a", "/b", "/c")]

        assert registry.abort(["/a", "/c", "/missing"]) == 2
        assert [h.signal.aborted for h in handles] == [True, False, True]

    def test_abort_all(self):
        registry = AbortRegistry()
        handles = [registry.register(url) for url in ("/a", "/b", "/b")]

        assert registry.abort_all("shutdown") == 3
        assert len(registry) == 0
        assert all(h.signal.reason == "shutdown" for h in handles)

    def test_release_after_abort(self):
        registry = AbortRegistry()
        controller = registry.register("/users")
        registry.abort("/users")
        registry.release("/users", controller)
        assert len(registry) == 0
