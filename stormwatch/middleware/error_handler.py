"""
Error responses.

Every error leaving the API has the shape ``{"error": "<message>"}``.
Domain errors (StormwatchError) map to a status code by type; anything
else is logged with an incident id and returned as a generic 500 carrying
that id, so operators can find the traceback without exposing it.
"""

import traceback
import uuid

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from stormwatch.exceptions import (
    DeliveryError,
    IntegrationNotConfiguredError,
    StationNotFoundError,
    StormwatchError,
)

logger = structlog.get_logger(__name__)

# Most specific first; unlisted StormwatchErrors are 500s.
DOMAIN_ERROR_STATUS: tuple[tuple[type[StormwatchError], int, str], ...] = (
    (StationNotFoundError, 404, "Station not found"),
    (IntegrationNotConfiguredError, 503, "Alert channel not configured"),
    (DeliveryError, 502, "Alert delivery failed"),
)


def domain_error_status(exc: StormwatchError) -> tuple[int, str]:
    """Status code and public message for a domain error."""
    for error_type, status_code, message in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code, message
    return 500, "Storm monitor error"


async def stormwatch_error_response(request: Request, exc: StormwatchError) -> JSONResponse:
    """Exception handler for StormwatchError and its subclasses."""
    status_code, message = domain_error_status(exc)
    log = logger.warning if status_code < 500 else logger.error
    log(
        "domain_error",
        error_type=type(exc).__name__,
        status=status_code,
        detail=str(exc),
    )
    return JSONResponse(status_code=status_code, content={"error": message})


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions no handler claimed into a 500 with an incident id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            incident_id = uuid.uuid4().hex[:12]
            logger.error(
                "request_crashed",
                incident_id=incident_id,
                error_type=type(exc).__name__,
                detail=str(exc),
                traceback=traceback.format_exc(),
            )

            content = {"error": "Internal server error", "incidentId": incident_id}
            if request.app.state.settings.debug:
                content["errorType"] = type(exc).__name__
            return JSONResponse(status_code=500, content=content)
