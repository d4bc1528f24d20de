"""Prometheus metrics for monitoring and observability."""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from functools import lru_cache

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# ==============================================================================
# HTTP METRICS
# ==============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# ==============================================================================
# ROUTING METRICS
# ==============================================================================

route_provider_requests_total = Counter(
    "route_provider_requests_total",
    "Routing provider attempts by outcome (ok or error code)",
    ["provider", "outcome"],
)

route_provider_latency_seconds = Histogram(
    "route_provider_latency_seconds",
    "Routing provider attempt latency in seconds",
    ["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 10.0),
)

route_fallbacks_total = Counter(
    "route_fallbacks_total",
    "Fallbacks taken during route resolution",
    ["kind"],
)

route_guard_rejections_total = Counter(
    "route_guard_rejections_total",
    "Route requests rejected because origin and destination are too close",
)


@lru_cache(maxsize=2048)
def normalize_endpoint(path: str) -> str:
    """Collapse numeric path segments to keep label cardinality bounded."""
    return re.sub(r"/\d+", "/{id}", path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = normalize_endpoint(request.url.path)
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            http_requests_total.labels(method=method, endpoint=endpoint, status="500").inc()
            raise
        finally:
            duration = time.time() - start_time
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

        http_requests_total.labels(
            method=method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        return response


def get_metrics() -> Response:
    """Generate Prometheus metrics response."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "PrometheusMiddleware",
    "get_metrics",
    "http_request_duration_seconds",
    "http_requests_total",
    "normalize_endpoint",
    "route_fallbacks_total",
    "route_guard_rejections_total",
    "route_provider_latency_seconds",
    "route_provider_requests_total",
]
