import os
import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Provider keys must exist before settings are imported
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-key")
os.environ["SENTRY_DSN"] = ""

from backend.routing.models import Coordinate  # noqa: E402
from backend.routing.polyline import encode_polyline  # noqa: E402

SF_ORIGIN = Coordinate(37.7749, -122.4194)
SF_DESTINATION = Coordinate(37.7849, -122.4094)
SF_POLYLINE = encode_polyline([SF_ORIGIN, Coordinate(37.78, -122.415), SF_DESTINATION])


def modern_route(
    duration: str = "900s",
    distance: int = 1500,
    polyline: str = SF_POLYLINE,
    description: str = "Market St",
) -> dict:
    route: dict = {"duration": duration, "distanceMeters": distance, "description": description}
    if polyline is not None:
        route["polyline"] = {"encodedPolyline": polyline}
    return route


def legacy_route(
    distance_text: str = "1.6 km",
    distance_value: int = 1600,
    duration_text: str = "16 mins",
    duration_value: int = 960,
    traffic_text: str | None = None,
    summary: str = "Mission St",
) -> dict:
    leg: dict = {
        "distance": {"text": distance_text, "value": distance_value},
        "duration": {"text": duration_text, "value": duration_value},
    }
    if traffic_text is not None:
        leg["duration_in_traffic"] = {"text": traffic_text, "value": duration_value + 60}
    return {"legs": [leg], "overview_polyline": {"points": SF_POLYLINE}, "summary": summary}


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose transport is the given request handler."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory
