"""Tests for the HTTP directions surface."""

import pytest
from backend.routing.errors import (
    BothProvidersFailed,
    NoRouteForMode,
    ProviderTransportError,
    TooClose,
)
from backend.routing.main import app
from backend.routing.models import (
    Coordinate,
    ModeSwitch,
    RouteAlternative,
    RouteResolution,
    TravelMode,
)
from backend.routing.service import get_resolver
from fastapi.testclient import TestClient


class StubResolver:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.requests = []

    async def resolve(self, request, *, on_mode_switch=None):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result(request) if callable(self.result) else self.result


def _alternative(index=0) -> RouteAlternative:
    return RouteAlternative(
        geometry=(Coordinate(37.7749, -122.4194), Coordinate(37.7849, -122.4094)),
        distance_meters=1500,
        distance_text="1.5 km",
        duration_seconds=900,
        duration_text="15 mins",
        traffic_duration_text="17 mins",
        summary="Market St",
        index=index,
    )


@pytest.fixture
def client():
    return TestClient(app, base_url="http://api.testserver")


@pytest.fixture
def use_resolver():
    def _install(resolver):
        app.dependency_overrides[get_resolver] = lambda: resolver
        return resolver

    yield _install
    app.dependency_overrides.pop(get_resolver, None)


PARAMS = {"origin": "37.7749,-122.4194", "destination": "37.7849,-122.4094"}


def test_directions_returns_routes(client, use_resolver):
    resolver = use_resolver(
        StubResolver(
            lambda request: RouteResolution(
                request, (_alternative(0), _alternative(1)), "modern"
            )
        )
    )

    response = client.get(
        "/v1/directions", params={**PARAMS, "mode": "walking", "avoid": "tolls,ferries"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["provider"] == "modern"
    assert body["mode"] == "WALK"
    assert body["mode_switch"] is None
    assert [r["index"] for r in body["routes"]] == [0, 1]
    assert body["routes"][0]["geometry"][0] == {"latitude": 37.7749, "longitude": -122.4194}
    assert body["routes"][0]["traffic_duration_text"] == "17 mins"
    request = resolver.requests[0]
    assert request.travel_mode is TravelMode.WALK
    assert {f.value for f in request.avoid_features} == {"TOLLS", "FERRIES"}
    assert response.headers["X-Request-ID"]


def test_directions_reports_mode_switch(client, use_resolver):
    def result(request):
        switch = ModeSwitch(TravelMode.TRANSIT, TravelMode.DRIVE, "No transit route found")
        return RouteResolution(
            request.with_mode(TravelMode.DRIVE), (_alternative(),), "legacy", switch
        )

    use_resolver(StubResolver(result))
    response = client.get("/v1/directions", params={**PARAMS, "mode": "transit"})

    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "DRIVE"
    assert body["mode_switch"] == {
        "requested_mode": "TRANSIT",
        "applied_mode": "DRIVE",
        "reason": "No transit route found",
    }


@pytest.mark.parametrize(
    "params",
    [
        {**PARAMS, "origin": "not-a-point"},
        {**PARAMS, "destination": "95.0,10.0"},
        {**PARAMS, "mode": "teleport"},
        {**PARAMS, "avoid": "potholes"},
    ],
)
def test_invalid_input_is_422(client, use_resolver, params):
    resolver = use_resolver(StubResolver())
    response = client.get("/v1/directions", params=params)
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "invalid_request"
    assert resolver.requests == []


def test_too_close_is_422(client, use_resolver):
    use_resolver(StubResolver(error=TooClose(0.0, 0.001)))
    response = client.get("/v1/directions", params=PARAMS)
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "too_close"


def test_both_providers_failed_is_502(client, use_resolver):
    error = BothProvidersFailed(
        [ProviderTransportError("modern", "timeout"), ProviderTransportError("legacy", "denied")]
    )
    use_resolver(StubResolver(error=error))
    response = client.get("/v1/directions", params=PARAMS)
    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["code"] == "providers_failed"
    assert detail["providers"] == ["modern: timeout", "legacy: denied"]


def test_no_route_is_404(client, use_resolver):
    error = BothProvidersFailed(
        [NoRouteForMode("modern", "none"), NoRouteForMode("legacy", "ZERO_RESULTS")]
    )
    use_resolver(StubResolver(error=error))
    response = client.get("/v1/directions", params=PARAMS)
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "no_route_for_mode"


def test_failed_driving_retry_reports_attempted_switch(client, use_resolver):
    error = BothProvidersFailed(
        [NoRouteForMode("modern", "none"), NoRouteForMode("legacy", "ZERO_RESULTS")]
    )
    error.mode_switch = ModeSwitch(TravelMode.WALK, TravelMode.DRIVE, "No walking route found")
    use_resolver(StubResolver(error=error))

    response = client.get("/v1/directions", params={**PARAMS, "mode": "walking"})

    assert response.status_code == 404
    assert response.json()["detail"]["mode_switch"] == {
        "requested_mode": "WALK",
        "applied_mode": "DRIVE",
        "reason": "No walking route found",
    }


def test_health_reports_provider_keys(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["checks"]["modern"]["status"] == "ok"


def test_metrics_exposes_routing_counters(client):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "route_provider_requests_total" in response.text
