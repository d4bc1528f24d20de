"""Structured logging configuration using structlog.

Route resolution binds its request context (travel mode, endpoints, avoid set)
through ``structlog.contextvars`` so every event logged while a request is in
flight carries it. Endpoints are coarsened before rendering; logs never hold a
caller's exact position.
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor

from .settings import settings
from .utils import request_id_ctx

if TYPE_CHECKING:
    from .models import RouteRequest

SERVICE_NAME = "route-resolver"
SERVICE_VERSION = "0.1.0"

# ~110 m at the equator
LOGGED_COORDINATE_DECIMALS = 3
COORDINATE_FIELDS = ("origin", "destination")


def add_request_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    request_id = request_id_ctx.get("")
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["service"] = SERVICE_NAME
    event_dict["environment"] = settings.SENTRY_ENVIRONMENT
    event_dict["version"] = SERVICE_VERSION
    return event_dict


def coarsen_coordinates(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Round ``origin``/``destination`` values ("lat,lng") to a few decimals.

    Values that do not parse as a coordinate pair are left untouched.
    """
    for field in COORDINATE_FIELDS:
        raw = event_dict.get(field)
        if not isinstance(raw, str):
            continue
        try:
            lat, lng = (float(part) for part in raw.split(","))
        except ValueError:
            continue
        event_dict[field] = (
            f"{lat:.{LOGGED_COORDINATE_DECIMALS}f},{lng:.{LOGGED_COORDINATE_DECIMALS}f}"
        )
    return event_dict


def route_context(request: RouteRequest) -> AbstractContextManager[Any]:
    """Bind a route request's fields to every log event inside the block.

    Usage:
        with route_context(request):
            resolution = await resolver.resolve(request)
    """
    return structlog.contextvars.bound_contextvars(
        travel_mode=request.travel_mode.value,
        origin=request.origin.as_query(),
        destination=request.destination.as_query(),
        avoid=sorted(feature.value for feature in request.avoid_features),
    )


def _renderer_chain(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    return [
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(),
    ]


def configure_structlog(json_logs: bool = False) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        json_logs: If True, output JSON logs. If False, use human-readable console format.
    """
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_request_id,
        add_app_context,
        coarsen_coordinates,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    structlog.configure(
        processors=[*shared, *_renderer_chain(json_logs)],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=logging.INFO)

    # Provider attempts are logged by the adapters; keep the HTTP client quiet
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["configure_structlog", "coarsen_coordinates", "get_logger", "route_context"]
