from __future__ import annotations

from fastapi import HTTPException

from ..contracts import ModeSwitchOut, RoutingErrorOut
from ..errors import BothProvidersFailed, InvalidRequest, RoutingError, TooClose
from ..models import to_coordinate


def parse_coordinate_string(raw: str, *, context: str = "coordinate") -> tuple[float, float]:
    payload = (raw or "").strip()
    parts = [p.strip() for p in payload.split(",", 1)]
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidRequest(f"Invalid {context} format. Use 'lat,lng'.")
    try:
        lat = float(parts[0])
        lng = float(parts[1])
    except ValueError as exc:
        raise InvalidRequest(f"Invalid {context} format. Use 'lat,lng'.") from exc
    point = to_coordinate((lat, lng), context=context)
    return point.latitude, point.longitude


def parse_avoid_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.replace("|", ",").split(",") if item.strip()]


def routing_http_error(exc: RoutingError) -> HTTPException:
    """Map a routing failure onto the HTTP status the client should see."""
    if isinstance(exc, (InvalidRequest, TooClose)):
        body = RoutingErrorOut(code=exc.code, detail=exc.message)
        return HTTPException(422, body.model_dump())
    if isinstance(exc, BothProvidersFailed):
        code = "no_route_for_mode" if exc.no_route_for_mode else "providers_failed"
        switch = ModeSwitchOut.from_switch(exc.mode_switch) if exc.mode_switch else None
        body = RoutingErrorOut(
            code=code, detail=exc.message, providers=exc.messages, mode_switch=switch
        )
        return HTTPException(404 if exc.no_route_for_mode else 502, body.model_dump())
    body = RoutingErrorOut(code="providers_failed", detail=exc.message)
    return HTTPException(502, body.model_dump())
