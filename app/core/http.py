from __future__ import annotations

import logging
from typing import Optional

import httpx

from app.core.config import Settings


logger = logging.getLogger(__name__)

_client: Optional[httpx.AsyncClient] = None


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)
    timeout = httpx.Timeout(settings.http_timeout_seconds)
    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        headers={"User-Agent": "skycast-api/0.1"},
        follow_redirects=True,
    )


def set_http_client(client: httpx.AsyncClient | None) -> None:
    global _client
    _client = client


def get_http_client() -> httpx.AsyncClient:
    if _client is None:
        raise RuntimeError("HTTP client not initialized. Did you start the FastAPI app?")
    return _client


async def get_once(client: httpx.AsyncClient, *, url: str, **kwargs) -> httpx.Response:
    """Issue a single GET; the provider contract has no retry policy."""
    logger.debug("GET %s", url)
    return await client.get(url, **kwargs)
