"""Compute-routes provider (JSON POST with a response field mask)."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import NoRouteForMode, ProviderResponseInvalid
from ..formatting import format_distance, format_duration
from ..models import AvoidFeature, Coordinate, RouteAlternative, RouteRequest, TravelMode
from ..settings import settings
from .base import RouteProvider

FIELD_MASK = ",".join(
    (
        "routes.duration",
        "routes.distanceMeters",
        "routes.polyline.encodedPolyline",
        "routes.description",
    )
)


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class _Polyline(_WireModel):
    encoded_polyline: str = Field(alias="encodedPolyline", min_length=1)


class _Route(_WireModel):
    duration: str = Field(pattern=r"^\d+(\.\d+)?s$")
    distance_meters: int = Field(alias="distanceMeters", ge=0)
    polyline: _Polyline
    description: str = ""

    @property
    def duration_seconds(self) -> int:
        return int(round(float(self.duration[:-1])))


class _ComputeRoutesResponse(_WireModel):
    routes: list[_Route] = Field(default_factory=list)


def _waypoint(point: Coordinate) -> dict[str, Any]:
    return {"location": {"latLng": {"latitude": point.latitude, "longitude": point.longitude}}}


def build_request_body(request: RouteRequest, language: str) -> dict[str, Any]:
    body: dict[str, Any] = {
        "origin": _waypoint(request.origin),
        "destination": _waypoint(request.destination),
        "travelMode": request.travel_mode.value,
        "computeAlternativeRoutes": request.want_alternatives,
        "languageCode": language,
    }
    if request.travel_mode is TravelMode.DRIVE:
        body["routingPreference"] = "TRAFFIC_AWARE"
    if request.avoid_features:
        avoid = request.avoid_features
        body["routeModifiers"] = {
            "avoidTolls": AvoidFeature.TOLLS in avoid,
            "avoidHighways": AvoidFeature.HIGHWAYS in avoid,
            "avoidFerries": AvoidFeature.FERRIES in avoid,
        }
    return body


class ModernRouteProvider(RouteProvider):
    name = "modern"

    def _default_api_key(self) -> str:
        return settings.GOOGLE_MAPS_API_KEY

    def _default_url(self) -> str:
        return settings.ROUTES_API_URL

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }

    async def _fetch(
        self, client: httpx.AsyncClient, request: RouteRequest
    ) -> list[RouteAlternative]:
        payload = await self._send(
            client,
            "POST",
            json=build_request_body(request, self.language),
            headers=self.headers(),
        )
        try:
            parsed = _ComputeRoutesResponse.model_validate(payload)
        except ValidationError as exc:
            raise ProviderResponseInvalid(
                self.name, f"Malformed route in response: {exc.errors()[0]['msg']}"
            ) from exc
        if not parsed.routes:
            raise NoRouteForMode(
                self.name, f"No routes found for travel mode {request.travel_mode.value}"
            )
        return [self._to_alternative(index, route) for index, route in enumerate(parsed.routes)]

    def _to_alternative(self, index: int, route: _Route) -> RouteAlternative:
        seconds = route.duration_seconds
        return RouteAlternative(
            geometry=self._decode(route.polyline.encoded_polyline),
            distance_meters=route.distance_meters,
            distance_text=format_distance(route.distance_meters),
            duration_seconds=seconds,
            duration_text=format_duration(seconds),
            traffic_duration_text=None,
            summary=route.description,
            index=index,
        )

    def _error_message(self, response: httpx.Response) -> str:
        try:
            error = response.json().get("error") or {}
        except (ValueError, AttributeError):
            error = {}
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return super()._error_message(response)


__all__ = ["FIELD_MASK", "ModernRouteProvider", "build_request_body"]
