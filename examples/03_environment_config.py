"""
Environment Configuration Example

Run with, for example:

    REQUEST_WRAPPER_BASE_URL=https://jsonplaceholder.typicode.com \
    REQUEST_WRAPPER_RETRY=2 \
    REQUEST_WRAPPER_LOG_FORMAT=json \
    python examples/03_environment_config.py
"""

import asyncio

from request_wrapper import Request, load_from_env


async def main():
    config = load_from_env(retry_delay=0.5)
    print(f"Base URL: {config.base_url}")
    print(f"Retry: {config.retry.retry} x {config.retry.retry_delay}s")

    async with Request(config) as service:
        post = await service.get("/posts/1")
        print(f"Title: {post['title']}")


if __name__ == "__main__":
    asyncio.run(main())
