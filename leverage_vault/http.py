from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from leverage_vault.config import Settings

logger = logging.getLogger(__name__)


class HttpClient:
    """Shared async HTTP client.

    ``attempts`` defaults to one: failures surface to the caller, which owns
    retrying the whole refresh.
    """

    def __init__(self, timeout: float = 15.0, attempts: int = 1, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._attempts = max(1, attempts)

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        logger.debug(f"HTTP GET {url} params={params}")
        return await self._send("GET", url, params=params, headers=headers)

    async def post(self, url: str, json: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        logger.debug(f"HTTP POST {url} json_keys={list(json.keys()) if json else None}")
        return await self._send("POST", url, json=json, headers=headers)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        async for attempt in AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type((httpx.TransportError, httpx.HTTPStatusError)),
        ):
            with attempt:
                resp = await self._client.request(method, url, **kwargs)
                resp.raise_for_status()
        return resp

    async def aclose(self) -> None:
        await self._client.aclose()


def client_from_settings(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> HttpClient:
    return HttpClient(
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        attempts=settings.HTTP_RETRY_ATTEMPTS,
        transport=transport,
    )
