from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import BothProvidersFailed
from .metrics import route_fallbacks_total
from .models import ModeSwitch, RouteRequest, RouteResolution, TravelMode
from .orchestrator import FallbackOrchestrator

logger = logging.getLogger(__name__)

FALLBACK_MODE = TravelMode.DRIVE

ModeSwitchListener = Callable[[ModeSwitch], None]


class ModeFallbackController:
    """
    Retry a failed resolution once in driving mode.

    Only a failure where a provider reported no route for the requested mode
    triggers the retry; transport and auth failures are returned unchanged.
    The driving attempt is final, whatever its outcome.
    """

    def __init__(
        self,
        orchestrator: FallbackOrchestrator | None = None,
        on_mode_switch: ModeSwitchListener | None = None,
    ):
        self.orchestrator = orchestrator or FallbackOrchestrator()
        self.on_mode_switch = on_mode_switch

    async def resolve(
        self,
        request: RouteRequest,
        *,
        on_mode_switch: ModeSwitchListener | None = None,
    ) -> RouteResolution:
        try:
            provider, alternatives = await self.orchestrator.resolve(request)
        except BothProvidersFailed as exc:
            if request.travel_mode is FALLBACK_MODE or not exc.no_route_for_mode:
                raise
            switch = ModeSwitch(
                requested_mode=request.travel_mode,
                applied_mode=FALLBACK_MODE,
                reason=(
                    f"No {request.travel_mode.legacy_name} route found; "
                    f"showing a {FALLBACK_MODE.legacy_name} route instead"
                ),
            )
        else:
            return RouteResolution(request, tuple(alternatives), provider)

        route_fallbacks_total.labels(kind="mode").inc()
        logger.info(
            "Retrying travel mode %s as %s",
            switch.requested_mode.value,
            switch.applied_mode.value,
        )
        retry = request.with_mode(FALLBACK_MODE)
        try:
            provider, alternatives = await self.orchestrator.resolve(retry)
        except BothProvidersFailed as exc:
            exc.mode_switch = switch
            raise

        # Listeners only hear about a switch that produced routes
        listener = on_mode_switch or self.on_mode_switch
        if listener is not None:
            listener(switch)
        return RouteResolution(retry, tuple(alternatives), provider, mode_switch=switch)


__all__ = ["FALLBACK_MODE", "ModeFallbackController", "ModeSwitchListener"]
