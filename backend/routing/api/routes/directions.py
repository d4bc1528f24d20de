from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...contracts import DirectionsResponse
from ...errors import RoutingError
from ...logging_config import get_logger, route_context
from ...models import RouteRequest
from ...service import RouteResolver, get_resolver
from ..utils import parse_avoid_list, parse_coordinate_string, routing_http_error

router = APIRouter(tags=["directions"])
logger = get_logger(__name__)


@router.get("/directions", response_model=DirectionsResponse)
async def directions(
    origin: str = Query(..., min_length=3, description="lat,lng"),
    destination: str = Query(..., min_length=3, description="lat,lng"),
    mode: str = Query("driving"),
    avoid: str | None = Query(None, description="comma-separated: tolls,highways,ferries"),
    alternatives: bool = True,
    resolver: RouteResolver = Depends(get_resolver),
):
    """Resolve route alternatives between two points."""
    try:
        request = RouteRequest.build(
            parse_coordinate_string(origin, context="origin"),
            parse_coordinate_string(destination, context="destination"),
            mode,
            parse_avoid_list(avoid),
            want_alternatives=alternatives,
        )
    except RoutingError as exc:
        logger.info("directions_rejected", code=exc.code, detail=exc.message)
        raise routing_http_error(exc) from exc

    with route_context(request):
        try:
            resolution = await resolver.resolve(request)
        except RoutingError as exc:
            logger.info("directions_failed", code=exc.code, detail=exc.message)
            raise routing_http_error(exc) from exc

        logger.info(
            "directions_resolved",
            provider=resolution.provider,
            applied_mode=resolution.request.travel_mode.value,
            routes=len(resolution.alternatives),
            mode_switched=resolution.mode_switch is not None,
        )
    return DirectionsResponse.from_resolution(resolution)


__all__ = ["router"]
