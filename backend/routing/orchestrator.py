from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import BothProvidersFailed, ProviderError
from .metrics import route_fallbacks_total
from .models import RouteAlternative, RouteRequest
from .providers import (
    LegacyRouteProvider,
    ModernRouteProvider,
    ProviderSuccess,
    RouteProvider,
)

logger = logging.getLogger(__name__)


class FallbackOrchestrator:
    """
    Try each provider in order until one succeeds.

    Providers are attempted strictly one after another; the next provider is
    only contacted once the previous attempt has failed. The winning provider's
    alternatives are returned as-is and never merged with another provider's.
    """

    def __init__(self, providers: Sequence[RouteProvider] | None = None):
        self.providers = (
            list(providers)
            if providers is not None
            else [ModernRouteProvider(), LegacyRouteProvider()]
        )

    async def resolve(self, request: RouteRequest) -> tuple[str, list[RouteAlternative]]:
        """
        Resolve a request against the provider chain.

        Returns:
            (provider name, alternatives) of the first provider that succeeded

        Raises:
            BothProvidersFailed: if every provider failed
        """
        failures: list[ProviderError] = []
        for position, provider in enumerate(self.providers):
            if position:
                route_fallbacks_total.labels(kind="provider").inc()
                logger.info(
                    "Falling back to provider %s after %s",
                    provider.name,
                    ", ".join(str(err) for err in failures),
                )
            outcome = await provider.compute(request)
            if isinstance(outcome, ProviderSuccess):
                return outcome.provider, list(outcome.alternatives)
            failures.append(outcome.error)
        raise BothProvidersFailed(failures)


__all__ = ["FallbackOrchestrator"]
