"""Request/response models for the ingest and status endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from stormwatch.monitoring.schemas import StormStatus


class IngestRequest(BaseModel):
    """One reading pushed by a station or gateway."""
    model_config = ConfigDict(populate_by_name=True)

    station_id: str = Field(..., min_length=1, alias="stationId")
    inches: float = Field(..., ge=0, allow_inf_nan=False)
    timestamp: Optional[datetime] = None   # ISO-8601; defaults to now


class IngestResponse(BaseModel):
    success: bool = True
    status: StormStatus
