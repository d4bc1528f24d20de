from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .errors import InvalidRequest


@dataclass(frozen=True, slots=True)
class Coordinate:
    latitude: float
    longitude: float

    def as_query(self) -> str:
        return f"{self.latitude},{self.longitude}"


class TravelMode(str, Enum):
    DRIVE = "DRIVE"
    WALK = "WALK"
    BICYCLE = "BICYCLE"
    TRANSIT = "TRANSIT"

    @property
    def legacy_name(self) -> str:
        return _LEGACY_MODE_NAMES[self]

    @classmethod
    def parse(cls, value: TravelMode | str) -> TravelMode:
        if isinstance(value, TravelMode):
            return value
        key = str(value or "").strip().lower()
        try:
            return _MODE_ALIASES[key]
        except KeyError:
            raise InvalidRequest(f"Unknown travel mode: {value!r}") from None


_LEGACY_MODE_NAMES = {
    TravelMode.DRIVE: "driving",
    TravelMode.WALK: "walking",
    TravelMode.BICYCLE: "bicycling",
    TravelMode.TRANSIT: "transit",
}

_MODE_ALIASES = {
    "drive": TravelMode.DRIVE,
    "driving": TravelMode.DRIVE,
    "walk": TravelMode.WALK,
    "walking": TravelMode.WALK,
    "bicycle": TravelMode.BICYCLE,
    "bicycling": TravelMode.BICYCLE,
    "cycling": TravelMode.BICYCLE,
    "transit": TravelMode.TRANSIT,
}


class AvoidFeature(str, Enum):
    TOLLS = "TOLLS"
    HIGHWAYS = "HIGHWAYS"
    FERRIES = "FERRIES"

    @property
    def legacy_name(self) -> str:
        return self.value.lower()

    @classmethod
    def parse(cls, value: AvoidFeature | str) -> AvoidFeature:
        if isinstance(value, AvoidFeature):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            raise InvalidRequest(f"Unknown avoid feature: {value!r}") from None


CoordinateLike = Coordinate | Sequence[float] | Mapping[str, Any]


def to_coordinate(value: CoordinateLike, *, context: str = "coordinate") -> Coordinate:
    """Coerce a Coordinate, (lat, lng) pair or lat/lng mapping and range-check it."""
    if isinstance(value, Coordinate):
        lat, lng = value.latitude, value.longitude
    elif isinstance(value, Mapping):
        lat = value.get("latitude", value.get("lat"))
        lng = value.get("longitude", value.get("lng", value.get("lon")))
    elif isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 2:
        lat, lng = value
    else:
        raise InvalidRequest(f"Invalid {context}: expected a latitude/longitude pair")

    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        raise InvalidRequest(f"Invalid {context}: latitude/longitude must be numbers") from None

    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidRequest(f"Invalid {context}: latitude/longitude must be finite")
    if not (-90 <= lat <= 90):
        raise InvalidRequest(f"Invalid {context}: latitude must be between -90 and 90, got {lat}")
    if not (-180 <= lng <= 180):
        raise InvalidRequest(
            f"Invalid {context}: longitude must be between -180 and 180, got {lng}"
        )
    return Coordinate(lat, lng)


@dataclass(frozen=True, slots=True)
class RouteRequest:
    origin: Coordinate
    destination: Coordinate
    travel_mode: TravelMode = TravelMode.DRIVE
    avoid_features: frozenset[AvoidFeature] = field(default_factory=frozenset)
    want_alternatives: bool = True

    @classmethod
    def build(
        cls,
        origin: CoordinateLike | None,
        destination: CoordinateLike | None,
        travel_mode: TravelMode | str = TravelMode.DRIVE,
        avoid_features: Iterable[AvoidFeature | str] = (),
        *,
        want_alternatives: bool = True,
    ) -> RouteRequest:
        if origin is None:
            raise InvalidRequest("Origin is required")
        if destination is None:
            raise InvalidRequest("Destination is required")
        return cls(
            origin=to_coordinate(origin, context="origin"),
            destination=to_coordinate(destination, context="destination"),
            travel_mode=TravelMode.parse(travel_mode),
            avoid_features=frozenset(AvoidFeature.parse(item) for item in avoid_features or ()),
            want_alternatives=bool(want_alternatives),
        )

    def with_mode(self, mode: TravelMode) -> RouteRequest:
        return replace(self, travel_mode=mode)


@dataclass(frozen=True, slots=True)
class RouteAlternative:
    """One candidate route.

    Alternatives are returned in the winning provider's order; index 0 is the
    provider's primary (fastest) route.
    """

    geometry: tuple[Coordinate, ...]
    distance_meters: int
    distance_text: str
    duration_seconds: int
    duration_text: str
    traffic_duration_text: str | None
    summary: str
    index: int


@dataclass(frozen=True, slots=True)
class ModeSwitch:
    requested_mode: TravelMode
    applied_mode: TravelMode
    reason: str


@dataclass(frozen=True, slots=True)
class RouteResolution:
    request: RouteRequest
    alternatives: tuple[RouteAlternative, ...]
    provider: str
    mode_switch: ModeSwitch | None = None


__all__ = [
    "AvoidFeature",
    "Coordinate",
    "CoordinateLike",
    "ModeSwitch",
    "RouteAlternative",
    "RouteRequest",
    "RouteResolution",
    "TravelMode",
    "to_coordinate",
]
