"""Directions provider (GET with query-string parameters)."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import NoRouteForMode, ProviderResponseInvalid
from ..models import RouteAlternative, RouteRequest, TravelMode
from ..settings import settings
from .base import RouteProvider

AVOID_SEPARATOR = "|"
NO_ROUTE_STATUSES = frozenset({"ZERO_RESULTS"})


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _TextValue(_WireModel):
    text: str
    value: int = Field(ge=0)


class _TrafficText(_WireModel):
    text: str


class _Leg(_WireModel):
    distance: _TextValue
    duration: _TextValue
    duration_in_traffic: _TrafficText | None = None


class _OverviewPolyline(_WireModel):
    points: str = Field(min_length=1)


class _Route(_WireModel):
    legs: list[_Leg] = Field(min_length=1)
    overview_polyline: _OverviewPolyline
    summary: str = ""


class _DirectionsResponse(_WireModel):
    status: str = ""
    error_message: str | None = None
    routes: list[_Route] = Field(default_factory=list)


def build_query_params(request: RouteRequest, api_key: str, language: str) -> dict[str, str]:
    params = {
        "origin": request.origin.as_query(),
        "destination": request.destination.as_query(),
        "mode": request.travel_mode.legacy_name,
        "alternatives": "true" if request.want_alternatives else "false",
        "key": api_key,
        "language": language,
    }
    if request.avoid_features:
        params["avoid"] = AVOID_SEPARATOR.join(
            sorted(feature.legacy_name for feature in request.avoid_features)
        )
    if request.travel_mode is TravelMode.DRIVE:
        params["departure_time"] = "now"
    return params


class LegacyRouteProvider(RouteProvider):
    name = "legacy"

    def _default_api_key(self) -> str:
        return settings.legacy_api_key

    def _default_url(self) -> str:
        return settings.DIRECTIONS_API_URL

    async def _fetch(
        self, client: httpx.AsyncClient, request: RouteRequest
    ) -> list[RouteAlternative]:
        payload = await self._send(
            client, "GET", params=build_query_params(request, self.api_key, self.language)
        )
        try:
            parsed = _DirectionsResponse.model_validate(payload)
        except ValidationError as exc:
            raise ProviderResponseInvalid(
                self.name, f"Malformed route in response: {exc.errors()[0]['msg']}"
            ) from exc

        # A non-empty routes array is the success predicate; status only explains failures.
        if not parsed.routes:
            detail = parsed.error_message or parsed.status or "No routes in response"
            if parsed.status in NO_ROUTE_STATUSES:
                raise NoRouteForMode(
                    self.name,
                    f"No routes found for travel mode {request.travel_mode.legacy_name} ({detail})",
                )
            raise ProviderResponseInvalid(self.name, detail)
        return [self._to_alternative(index, route) for index, route in enumerate(parsed.routes)]

    def _to_alternative(self, index: int, route: _Route) -> RouteAlternative:
        leg = route.legs[0]
        return RouteAlternative(
            geometry=self._decode(route.overview_polyline.points),
            distance_meters=leg.distance.value,
            distance_text=leg.distance.text,
            duration_seconds=leg.duration.value,
            duration_text=leg.duration.text,
            traffic_duration_text=(
                leg.duration_in_traffic.text if leg.duration_in_traffic else None
            ),
            summary=route.summary,
            index=index,
        )


__all__ = ["AVOID_SEPARATOR", "LegacyRouteProvider", "build_query_params"]
