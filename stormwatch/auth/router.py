"""
Access gate endpoint.

POST /api/v1/verify-access — check the shared front-end access code
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from stormwatch.api.deps import get_settings
from stormwatch.auth.api_keys import verify_access_code
from stormwatch.config import Settings
from stormwatch.schemas.subscriber import AccessCodeRequest

router = APIRouter(prefix="/api/v1", tags=["auth"])


@router.post("/verify-access")
async def verify_access(
    body: AccessCodeRequest,
    settings: Settings = Depends(get_settings),
):
    """Return success when the code matches ACCESS_CODE."""
    if verify_access_code(body.code, settings):
        return {"success": True}
    return JSONResponse(
        status_code=401,
        content={"success": False, "error": "Invalid access code"},
    )
