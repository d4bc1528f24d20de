"""Routing provider adapters."""

from .base import ProviderFailure, ProviderOutcome, ProviderSuccess, RouteProvider
from .legacy import LegacyRouteProvider
from .modern import ModernRouteProvider

__all__ = [
    "LegacyRouteProvider",
    "ModernRouteProvider",
    "ProviderFailure",
    "ProviderOutcome",
    "ProviderSuccess",
    "RouteProvider",
]
