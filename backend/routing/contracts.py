from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .models import ModeSwitch, RouteAlternative, RouteResolution


class CoordinateOut(BaseModel):
    latitude: float
    longitude: float


class RouteAlternativeOut(BaseModel):
    index: int
    summary: str
    distance_meters: int
    distance_text: str
    duration_seconds: int
    duration_text: str
    traffic_duration_text: str | None = None
    geometry: list[CoordinateOut] = Field(default_factory=list)

    @classmethod
    def from_alternative(cls, alt: RouteAlternative) -> RouteAlternativeOut:
        return cls(
            index=alt.index,
            summary=alt.summary,
            distance_meters=alt.distance_meters,
            distance_text=alt.distance_text,
            duration_seconds=alt.duration_seconds,
            duration_text=alt.duration_text,
            traffic_duration_text=alt.traffic_duration_text,
            geometry=[
                CoordinateOut(latitude=p.latitude, longitude=p.longitude) for p in alt.geometry
            ],
        )


class ModeSwitchOut(BaseModel):
    requested_mode: str
    applied_mode: str
    reason: str

    @classmethod
    def from_switch(cls, switch: ModeSwitch) -> ModeSwitchOut:
        return cls(
            requested_mode=switch.requested_mode.value,
            applied_mode=switch.applied_mode.value,
            reason=switch.reason,
        )


class DirectionsResponse(BaseModel):
    provider: str
    mode: str
    mode_switch: ModeSwitchOut | None = None
    routes: list[RouteAlternativeOut] = Field(default_factory=list)

    @classmethod
    def from_resolution(cls, resolution: RouteResolution) -> DirectionsResponse:
        return cls(
            provider=resolution.provider,
            mode=resolution.request.travel_mode.value,
            mode_switch=(
                ModeSwitchOut.from_switch(resolution.mode_switch)
                if resolution.mode_switch
                else None
            ),
            routes=[RouteAlternativeOut.from_alternative(alt) for alt in resolution.alternatives],
        )


class RoutingErrorOut(BaseModel):
    code: Literal[
        "invalid_request", "too_close", "providers_failed", "no_route_for_mode"
    ]
    detail: str
    providers: list[str] = Field(default_factory=list)
    mode_switch: ModeSwitchOut | None = None
