"""
Basic Request Usage Examples

Demonstrates GET/POST requests, retry and cancellation.
"""

import asyncio

from request_wrapper import Request, RequestCancelledError


async def basic_get_request():
    """Simple GET request - returns the decoded body."""
    print("\n=== Basic GET Request ===")

    async with Request(base_url="https://jsonplaceholder.typicode.com") as service:
        post = await service.get("/posts/1")
        print(f"Title: {post['title']}")


async def post_with_json():
    """POST request with JSON body."""
    print("\n=== POST with JSON ===")

    async with Request(
        base_url="https://jsonplaceholder.typicode.com",
        success_status_codes=(200, 201),
    ) as service:
        created = await service.post(
            "/posts",
            json={"title": "My Post", "body": "This is the content", "userId": 1},
        )
        print(f"Created: {created}")


async def with_retry():
    """Retry twice with a fixed 1s delay."""
    print("\n=== Retry ===")

    async with Request(
        base_url="https://jsonplaceholder.typicode.com",
        retry=2,
        retry_delay=1.0,
    ) as service:
        users = await service.get("/users", params={"_limit": 3})
        print(f"Users: {[u['name'] for u in users]}")


async def cancel_by_url():
    """Cancel one in-flight request by URL."""
    print("\n=== Cancellation ===")

    async with Request(base_url="https://jsonplaceholder.typicode.com") as service:
        comments = asyncio.create_task(service.get("/comments"))
        albums = asyncio.create_task(service.get("/albums"))
        await asyncio.sleep(0)

        print(f"In flight: {service.in_flight()}")
        service.cancel_request("/comments", reason="not needed")

        try:
            await comments
        except RequestCancelledError as e:
            print(f"Cancelled: {e} (code={e.code})")
        print(f"Albums: {len(await albums)}")


async def main():
    await basic_get_request()
    await post_with_json()
    await with_retry()
    await cancel_by_url()


if __name__ == "__main__":
    asyncio.run(main())
