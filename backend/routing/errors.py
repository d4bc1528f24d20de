"""Error taxonomy for route resolution.

Every failure a caller can observe is a ``RoutingError`` subclass with a stable
``code``. Provider errors are raised inside the adapters and travel to the
orchestrator wrapped in a ``ProviderFailure`` outcome; only
``BothProvidersFailed`` escapes past it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ModeSwitch


class RoutingError(Exception):
    """Base class for all route resolution failures."""

    code = "routing_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(RoutingError, ValueError):
    """Origin, destination, mode or avoid set is malformed."""

    code = "invalid_request"


class TooClose(RoutingError):
    """Origin and destination are too close together to be worth routing."""

    code = "too_close"

    def __init__(self, separation: float, threshold: float):
        super().__init__(
            f"Origin and destination are too close (separation {separation:.6f} "
            f"< {threshold:.6f} degrees)"
        )
        self.separation = separation
        self.threshold = threshold


class ProviderError(RoutingError):
    """A single provider attempt failed."""

    code = "provider_error"

    def __init__(self, provider: str, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.provider} ({self.status_code}): {self.message}"
        return f"{self.provider}: {self.message}"


class ProviderTransportError(ProviderError):
    """Network failure, timeout or non-2xx status."""

    code = "provider_transport"


class ProviderResponseInvalid(ProviderError):
    """2xx response that is missing required fields or carries no routes."""

    code = "provider_response_invalid"


class NoRouteForMode(ProviderResponseInvalid):
    """The provider explicitly found no route for the requested travel mode."""

    code = "no_route_for_mode"


class BothProvidersFailed(RoutingError):
    """Every provider failed; carries each provider's error in attempt order.

    When the failure comes from a driving retry, ``mode_switch`` records the
    switch that was attempted.
    """

    code = "providers_failed"

    def __init__(self, failures: Sequence[ProviderError]):
        self.failures = tuple(failures)
        self.mode_switch: ModeSwitch | None = None
        detail = "; ".join(str(err) for err in self.failures) or "no providers configured"
        super().__init__(f"All routing providers failed: {detail}")

    @property
    def no_route_for_mode(self) -> bool:
        return any(isinstance(err, NoRouteForMode) for err in self.failures)

    @property
    def messages(self) -> list[str]:
        return [str(err) for err in self.failures]


__all__ = [
    "BothProvidersFailed",
    "InvalidRequest",
    "NoRouteForMode",
    "ProviderError",
    "ProviderResponseInvalid",
    "ProviderTransportError",
    "RoutingError",
    "TooClose",
]
