"""
Shared-secret checks for ingestion and the front-end access gate.

- X-API-Key header must equal API_KEY for ingestion
- Access code must equal ACCESS_CODE for the front-end gate

Comparisons are constant-time. An unset secret rejects every request.
"""

import secrets

import structlog
from fastapi import Depends, HTTPException, Request

from stormwatch.api.deps import get_settings
from stormwatch.config import Settings

logger = structlog.get_logger(__name__)


def _matches(provided: str | None, expected: str) -> bool:
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided.encode(), expected.encode())


async def require_api_key(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Validate the X-API-Key header.

    Raises HTTPException 401 if missing or wrong.
    """
    key = request.headers.get("X-API-Key")
    if not settings.api_key:
        logger.warning("api_key_not_configured", path=request.url.path)
    if not _matches(key, settings.api_key):
        logger.warning(
            "api_key_rejected",
            key_prefix=key[:4] if key else None,
            reason="missing" if not key else "mismatch",
        )
        raise HTTPException(status_code=401, detail="Unauthorized")


def verify_access_code(code: str, settings: Settings) -> bool:
    return _matches(code, settings.access_code)
