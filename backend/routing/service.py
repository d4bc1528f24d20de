"""Route resolution entry points.

``resolve_route`` is what callers use: it validates the request, applies the
distance guard, then runs the provider chain with travel-mode fallback and
returns the alternatives of whichever provider answered.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

from .guard import DistanceGuard
from .mode_fallback import ModeFallbackController, ModeSwitchListener
from .models import (
    AvoidFeature,
    CoordinateLike,
    RouteAlternative,
    RouteRequest,
    RouteResolution,
    TravelMode,
)
from .polyline import decode_polyline


class RouteResolver:
    def __init__(
        self,
        controller: ModeFallbackController | None = None,
        guard: DistanceGuard | None = None,
    ):
        self.controller = controller or ModeFallbackController()
        self.guard = guard or DistanceGuard()

    async def resolve(
        self,
        request: RouteRequest,
        *,
        on_mode_switch: ModeSwitchListener | None = None,
    ) -> RouteResolution:
        # Raises TooClose before any provider is contacted.
        self.guard.check(request)
        return await self.controller.resolve(request, on_mode_switch=on_mode_switch)


@lru_cache(maxsize=1)
def get_resolver() -> RouteResolver:
    return RouteResolver()


async def resolve_route(
    origin: CoordinateLike,
    destination: CoordinateLike,
    travel_mode: TravelMode | str = TravelMode.DRIVE,
    avoid_features: Iterable[AvoidFeature | str] = (),
    *,
    want_alternatives: bool = True,
    on_mode_switch: ModeSwitchListener | None = None,
    resolver: RouteResolver | None = None,
) -> list[RouteAlternative]:
    request = RouteRequest.build(
        origin,
        destination,
        travel_mode,
        avoid_features,
        want_alternatives=want_alternatives,
    )
    resolution = await (resolver or get_resolver()).resolve(
        request, on_mode_switch=on_mode_switch
    )
    return list(resolution.alternatives)


__all__ = ["RouteResolver", "decode_polyline", "get_resolver", "resolve_route"]
