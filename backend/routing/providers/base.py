from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from ..errors import ProviderError, ProviderResponseInvalid, ProviderTransportError
from ..http import get_client
from ..metrics import route_provider_latency_seconds, route_provider_requests_total
from ..models import Coordinate, RouteAlternative, RouteRequest
from ..polyline import PolylineDecodeError, decode_polyline
from ..settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProviderSuccess:
    provider: str
    alternatives: tuple[RouteAlternative, ...]


@dataclass(frozen=True, slots=True)
class ProviderFailure:
    provider: str
    error: ProviderError


ProviderOutcome = ProviderSuccess | ProviderFailure


class RouteProvider(ABC):
    """One upstream routing API.

    Subclasses translate a RouteRequest into the provider's wire request and
    its response into RouteAlternatives, raising ProviderError subclasses for
    anything that goes wrong. ``compute`` bounds the attempt with a timeout and
    folds every failure into a ProviderFailure.
    """

    name: str = "provider"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        url: str | None = None,
        language: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key if api_key is not None else self._default_api_key()
        self.url = url or self._default_url()
        self.language = language or settings.ROUTE_LANGUAGE
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.PROVIDER_TIMEOUT_SECONDS
        )
        self._client = client

    @abstractmethod
    def _default_api_key(self) -> str: ...

    @abstractmethod
    def _default_url(self) -> str: ...

    @abstractmethod
    async def _fetch(
        self, client: httpx.AsyncClient, request: RouteRequest
    ) -> list[RouteAlternative]: ...

    async def compute(self, request: RouteRequest) -> ProviderOutcome:
        started = time.perf_counter()
        try:
            if not self.api_key:
                raise ProviderTransportError(self.name, "API key not configured")
            client = self._client or await get_client()
            alternatives = await asyncio.wait_for(
                self._fetch(client, request), timeout=self.timeout_seconds
            )
        except ProviderError as exc:
            outcome: ProviderOutcome = ProviderFailure(self.name, exc)
        except asyncio.TimeoutError:
            outcome = ProviderFailure(
                self.name,
                ProviderTransportError(
                    self.name, f"timed out after {self.timeout_seconds:.1f}s"
                ),
            )
        except Exception as exc:
            error = ProviderTransportError(self.name, f"Unexpected error: {exc}")
            error.__cause__ = exc
            outcome = ProviderFailure(self.name, error)
        else:
            outcome = ProviderSuccess(self.name, tuple(alternatives))

        elapsed = time.perf_counter() - started
        route_provider_latency_seconds.labels(provider=self.name).observe(elapsed)
        if isinstance(outcome, ProviderSuccess):
            route_provider_requests_total.labels(provider=self.name, outcome="ok").inc()
            logger.info(
                "Route provider %s mode=%s routes=%d latency=%.1fms",
                self.name,
                request.travel_mode.value,
                len(outcome.alternatives),
                elapsed * 1000,
            )
        else:
            route_provider_requests_total.labels(
                provider=self.name, outcome=outcome.error.code
            ).inc()
            logger.warning(
                "Route provider %s failed mode=%s kind=%s error=%s latency=%.1fms",
                self.name,
                request.travel_mode.value,
                outcome.error.code,
                outcome.error,
                elapsed * 1000,
            )
        return outcome

    async def _send(
        self, client: httpx.AsyncClient, method: str, **kwargs: Any
    ) -> dict[str, Any]:
        try:
            response = await client.request(method, self.url, **kwargs)
        except httpx.HTTPError as exc:
            raise ProviderTransportError(self.name, f"Request failed: {exc}") from exc
        if response.status_code >= 300:
            raise ProviderTransportError(
                self.name,
                self._error_message(response),
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderResponseInvalid(
                self.name, "Invalid JSON in response", status_code=response.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise ProviderResponseInvalid(
                self.name, "Response body is not a JSON object", status_code=response.status_code
            )
        return payload

    def _error_message(self, response: httpx.Response) -> str:
        return response.text[:200] or response.reason_phrase

    def _decode(self, encoded: str) -> tuple[Coordinate, ...]:
        try:
            return tuple(decode_polyline(encoded))
        except PolylineDecodeError as exc:
            raise ProviderResponseInvalid(self.name, f"Malformed polyline: {exc}") from exc


__all__ = [
    "ProviderFailure",
    "ProviderOutcome",
    "ProviderSuccess",
    "RouteProvider",
]
