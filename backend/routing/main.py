from __future__ import annotations

from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration

from .api.routes import directions as directions_routes
from .http import close_async_client
from .logging_config import SERVICE_NAME, SERVICE_VERSION, configure_structlog, get_logger
from .metrics import PrometheusMiddleware, get_metrics
from .settings import settings
from .utils import add_cors, add_request_id_tracing

# Configure structured logging (must be done before any logging calls)
configure_structlog(json_logs=not settings.DEBUG)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        release=settings.SENTRY_RELEASE or f"{SERVICE_NAME}@dev",
        integrations=[FastApiIntegration()],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
    )

logger = get_logger(__name__)

API_PREFIX = "/v1"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    await close_async_client()


app = FastAPI(
    title="Route Resolver API",
    version=SERVICE_VERSION,
    description="Provider-agnostic route alternatives with provider and travel-mode fallback",
    lifespan=lifespan,
)
add_cors(app)
add_request_id_tracing(app)
app.add_middleware(PrometheusMiddleware)

app.include_router(directions_routes.router, prefix=API_PREFIX)


@app.get("/health")
async def health():
    """Report whether provider credentials are configured."""
    checks = {
        "modern": {"status": "ok" if settings.GOOGLE_MAPS_API_KEY.strip() else "unconfigured"},
        "legacy": {"status": "ok" if settings.legacy_api_key.strip() else "unconfigured"},
    }
    healthy = any(check["status"] == "ok" for check in checks.values())
    body = {
        "status": "healthy" if healthy else "degraded",
        "checks": checks,
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }
    return JSONResponse(content=body, status_code=200 if healthy else 503)


@app.get("/metrics")
def metrics():
    """Expose Prometheus metrics."""
    return get_metrics()
