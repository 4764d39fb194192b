"""
Monitoring Schemas.

Readings, IDF thresholds, storm status, per-station monitor state and
delivery results.
"""

from datetime import datetime
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

NORMAL_CATEGORY = "Normal"


# ── Enums ──────────────────────────────────────────────────────────────


class AlertLevel(StrEnum):
    NONE = "None"
    MEDIUM = "Medium"           # 1-Year up to (not incl.) 10-Year
    CRITICAL = "Critical"       # 10-Year and above


# ── Readings & Thresholds ──────────────────────────────────────────────


class RainfallReading(BaseModel):
    """One accumulation reading from a station. Immutable once stored."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    inches: float


class IDFThreshold(BaseModel):
    """Minimum intensity (in/hr) reached by a storm of the given return period."""
    model_config = ConfigDict(frozen=True)

    return_period_years: int
    intensity_in_per_hr: float

    @property
    def category(self) -> str:
        return f"{self.return_period_years}-Year"


# ── Storm Status ───────────────────────────────────────────────────────


class StormStatus(BaseModel):
    """
    Severity evaluation for a station — derived on demand, never stored.

    Serialized with the camelCase field names the HTTP API has always used.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: str = Field(default=NORMAL_CATEGORY, alias="currentCategory")
    max_intensity: float = Field(default=0.0, alias="maxIntensity")     # in/hr
    triggering_duration_minutes: int = Field(default=0, alias="triggeringDuration")
    alert_level: AlertLevel = Field(default=AlertLevel.NONE, alias="alertLevel")

    @classmethod
    def normal(cls) -> "StormStatus":
        return cls()


# ── Alert State ────────────────────────────────────────────────────────


class StationMonitorState(BaseModel):
    """Debounce state for one station, owned by the alert state machine."""
    station_id: str
    is_under_monitoring: bool = False
    monitoring_start_time: Optional[datetime] = None
    last_category: Optional[str] = None


class DeliveryResult(BaseModel):
    """Outcome of handing one alert to one integration."""
    integration: str
    success: bool
    detail: str = ""
