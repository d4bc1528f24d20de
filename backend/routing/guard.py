from __future__ import annotations

import logging
import math

from .errors import TooClose
from .metrics import route_guard_rejections_total
from .models import Coordinate, RouteRequest
from .settings import settings

logger = logging.getLogger(__name__)


def planar_separation(origin: Coordinate, destination: Coordinate) -> float:
    """Euclidean distance in raw degrees; a coarse knob, not a physical distance."""
    return math.sqrt(
        (destination.latitude - origin.latitude) ** 2
        + (destination.longitude - origin.longitude) ** 2
    )


class DistanceGuard:
    def __init__(self, threshold: float | None = None):
        self.threshold = threshold if threshold is not None else settings.MIN_SEPARATION_DEGREES

    def check(self, request: RouteRequest) -> None:
        separation = planar_separation(request.origin, request.destination)
        if separation < self.threshold:
            route_guard_rejections_total.inc()
            logger.info(
                "Route request rejected: separation=%.6f threshold=%.6f",
                separation,
                self.threshold,
            )
            raise TooClose(separation, self.threshold)


__all__ = ["DistanceGuard", "planar_separation"]
