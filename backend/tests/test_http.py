"""Tests for the pooled provider client."""

import asyncio

import httpx
from backend.routing import http
from backend.routing.models import RouteRequest, TravelMode
from backend.routing.providers import ModernRouteProvider, ProviderSuccess
from conftest import SF_DESTINATION, SF_ORIGIN, modern_route


def test_client_is_reused_within_a_loop():
    async def run():
        first = await http.get_client()
        second = await http.get_client()
        await http.close_async_client()
        return first, second

    first, second = asyncio.run(run())
    assert first is second
    assert first.is_closed


def test_each_event_loop_gets_its_own_client():
    first = asyncio.run(http.get_client())

    async def run():
        client = await http.get_client()
        await http.close_async_client()
        return client

    second = asyncio.run(run())
    assert second is not first
    assert first not in http._clients.values()


def test_default_client_serves_repeated_event_loops(monkeypatch):
    created = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"routes": [modern_route()]})

    def new_client() -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        created.append(client)
        return client

    monkeypatch.setattr(http, "_new_client", new_client)
    provider = ModernRouteProvider(api_key="k")
    request = RouteRequest(SF_ORIGIN, SF_DESTINATION, TravelMode.DRIVE)

    first = asyncio.run(provider.compute(request))

    async def second_run():
        try:
            return await provider.compute(request)
        finally:
            await http.close_async_client()

    second = asyncio.run(second_run())

    assert isinstance(first, ProviderSuccess)
    assert isinstance(second, ProviderSuccess)
    assert len(created) == 2
