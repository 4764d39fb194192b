"""
Request correlation.

Each request gets a request id (the caller's X-Request-ID when it is sane,
otherwise a fresh one) and, for station-scoped paths, the station id. Both
are bound into structlog contextvars so the service and alerting log lines
emitted for the request can be joined back to it.
"""

import re
import time
import uuid
from typing import Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

_STATION_PATH = re.compile(r"^/api/v1/status/(?P<station_id>[^/]+)/?$")
_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Liveness polls are logged at debug level only
_QUIET_PATHS = frozenset({"/", "/health"})


def station_id_from_path(path: str) -> Optional[str]:
    match = _STATION_PATH.match(path)
    return match.group("station_id") if match else None


def resolve_request_id(header_value: Optional[str]) -> str:
    """Reuse the caller's id if it is a short token, else mint one."""
    if header_value and _REQUEST_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        request.state.request_id = request_id

        context = {"request_id": request_id}
        station_id = station_id_from_path(request.url.path)
        if station_id:
            context["station_id"] = station_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**context)

        started = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - started) * 1000, 1)

        response.headers["X-Request-ID"] = request_id
        log = logger.debug if request.url.path in _QUIET_PATHS else logger.info
        log(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
        )
        return response
