"""
Reading Ingest Endpoint.

POST /api/v1/ingest

- Requires X-API-Key authentication
- Accepts {stationId, inches, timestamp?}; invalid bodies are rejected (422)
  before reaching the monitoring core
- Returns the station's status after the reading; alert delivery may still
  be in flight
"""

import structlog
from fastapi import APIRouter, Depends

from stormwatch.api.deps import get_monitor_service
from stormwatch.auth.api_keys import require_api_key
from stormwatch.monitoring.service import StormMonitorService
from stormwatch.schemas.ingest import IngestRequest, IngestResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["ingest"])


@router.post(
    "/ingest",
    response_model=IngestResponse,
    dependencies=[Depends(require_api_key)],
    summary="Ingest a rainfall reading",
    responses={
        401: {"description": "Missing or invalid X-API-Key"},
    },
)
async def ingest_reading(
    body: IngestRequest,
    service: StormMonitorService = Depends(get_monitor_service),
):
    status = await service.ingest(body.station_id, body.inches, body.timestamp)
    return IngestResponse(success=True, status=status)
