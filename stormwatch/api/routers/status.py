"""
Station Status Endpoints.

GET /api/v1/status/{station_id} — current storm status for a station
GET /api/v1/stations            — ids of stations with readings

Unknown stations raise StationNotFoundError, mapped to 404 by the app.
"""

from fastapi import APIRouter, Depends

from stormwatch.api.deps import get_monitor_service
from stormwatch.monitoring.schemas import StormStatus
from stormwatch.monitoring.service import StormMonitorService

router = APIRouter(prefix="/api/v1", tags=["status"])


@router.get(
    "/status/{station_id}",
    response_model=StormStatus,
    responses={404: {"description": "No readings yet for this station"}},
)
async def get_station_status(
    station_id: str,
    service: StormMonitorService = Depends(get_monitor_service),
):
    return service.query_status(station_id)


@router.get("/stations")
async def list_stations(
    service: StormMonitorService = Depends(get_monitor_service),
):
    stations = service.store.station_ids()
    return {"stations": stations, "total": len(stations)}
