"""
Application service layer on top of Request.

The backend wraps every answer in ``{"error_info": {...}, "result": ...}``.
Interceptors add the auth header and surface business errors; the
``request`` helper moves GET data into the query string.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from request_wrapper import (
    ContentType,
    Interceptors,
    LoggingConfig,
    Request,
    RequestConfig,
    RequestWrapperConfig,
)

logger = logging.getLogger("app.api")


@dataclass
class ErrorInfo:
    error_code: Optional[Any] = None
    error_msg: Optional[str] = None


@dataclass
class AppResponseData:
    error_info: ErrorInfo
    result: Any = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AppResponseData":
        return cls(
            error_info=ErrorInfo(**(payload.get("error_info") or {})),
            result=payload.get("result"),
        )


# Interceptor'ы уровня приложения

def request_interceptor(config: RequestConfig) -> RequestConfig:
    # Заголовок авторизации
    config.headers["Authorization"] = "token"
    if config.extra.get("loading"):
        logger.info(f"loading {config.url}")
    return config


def request_interceptor_catch(error: Exception) -> None:
    logger.error(f"request interceptor failed: {error}")


def response_interceptor(response):
    body = response.json() if response.content else {}
    error_info = (body or {}).get("error_info") or {}
    if error_info.get("error_code"):
        logger.warning(f"business error {error_info.get('error_code')}: {error_info.get('error_msg')}")
    return response


def response_interceptor_catch(error: Exception) -> None:
    response = getattr(error, "response", None)
    if response is not None:
        logger.error(f"error {response.status_code}")


service = Request(RequestWrapperConfig.create(
    base_url="https://api.example.com",
    timeout=10,
    retry=2,
    retry_delay=1.0,
    with_credentials=True,
    headers={"Content-Type": ContentType.JSON.value},
    interceptors=Interceptors(
        request=request_interceptor,
        request_error=request_interceptor_catch,
        response=response_interceptor,
        response_error=response_interceptor_catch,
    ),
    logging=LoggingConfig.create(level="INFO"),
))


async def request(url: str, method: str = "GET", data: Any = None, **fields: Any) -> AppResponseData:
    """GET data уходит в query string, остальные методы - в JSON тело."""
    if method.upper() == "GET":
        fields["params"] = data
    else:
        fields["json"] = data
    payload = await service.request(RequestConfig(url=url, method=method, **fields))
    return AppResponseData.from_payload(payload or {})


async def api_a(data: Dict[str, Any]) -> Any:
    response = await request("/api/1", data=data, extra={"loading": True})
    return response.result


async def main():
    try:
        print(await api_a({"page": 1}))
    finally:
        await service.close()


if __name__ == "__main__":
    asyncio.run(main())
