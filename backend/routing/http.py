from __future__ import annotations

import asyncio

import httpx

from .settings import settings

# Pooled connections belong to the loop that opened them, so each running loop
# gets its own client.
_clients: dict[asyncio.AbstractEventLoop, httpx.AsyncClient] = {}


def _new_client() -> httpx.AsyncClient:
    timeout = httpx.Timeout(
        settings.PROVIDER_TIMEOUT_SECONDS,
        connect=settings.PROVIDER_CONNECT_TIMEOUT_SECONDS,
    )
    return httpx.AsyncClient(timeout=timeout)


def _drop_closed_loops() -> None:
    for loop in [loop for loop in _clients if loop.is_closed()]:
        del _clients[loop]


async def get_client() -> httpx.AsyncClient:
    """Return the pooled client shared by the routing providers on this loop."""
    _drop_closed_loops()
    loop = asyncio.get_running_loop()
    client = _clients.get(loop)
    if client is None or client.is_closed:
        client = _clients[loop] = _new_client()
    return client


async def close_async_client() -> None:
    client = _clients.pop(asyncio.get_running_loop(), None)
    if client is not None:
        await client.aclose()
    _drop_closed_loops()


__all__ = ["close_async_client", "get_client"]
