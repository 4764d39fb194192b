"""
Test fixtures for Stormwatch.

Provides:
- A manual clock for deterministic time travel
- Recording / failing / slow integrations
- A monitoring service factory wired to those doubles
- Settings isolated from the process environment and .env
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from stormwatch.config import Settings
from stormwatch.monitoring.dispatcher import AlertDispatcher
from stormwatch.monitoring.schemas import StormStatus
from stormwatch.monitoring.service import StormMonitorService
from stormwatch.monitoring.state_machine import AlertStateMachine
from stormwatch.monitoring.store import StationStore

T0 = datetime(2026, 5, 14, 18, 0, tzinfo=timezone.utc)


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


class RecordingIntegration:
    """Remembers every alert it receives."""

    def __init__(self, name: str = "recorder"):
        self.name = name
        self.calls: list[dict] = []

    async def send_alert(
        self,
        message: str,
        station_id: str,
        intensity: float,
        category: str,
        details: Optional[StormStatus] = None,
    ) -> None:
        self.calls.append({
            "message": message,
            "station_id": station_id,
            "intensity": intensity,
            "category": category,
            "details": details,
        })


class FailingIntegration:
    name = "failing"

    def __init__(self):
        self.attempts = 0

    async def send_alert(self, message, station_id, intensity, category, details=None) -> None:
        self.attempts += 1
        raise ConnectionError("smtp relay unreachable")


class SlowIntegration:
    name = "slow"

    def __init__(self, delay: float = 5.0):
        self.delay = delay

    async def send_alert(self, message, station_id, intensity, category, details=None) -> None:
        await asyncio.sleep(self.delay)


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def recorder() -> RecordingIntegration:
    return RecordingIntegration()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        API_KEY="test-ingest-key",
        ACCESS_CODE="open-sesame",
        SUBSCRIBERS_FILE=str(tmp_path / "subscribers.json"),
        ALERT_DISPATCH_BACKGROUND=False,
        ALERT_LOG_ONLY=True,
    )


@pytest.fixture
def make_service(clock):
    """Build a service whose dispatch is awaited inline."""

    def _make(*integrations, timeout_seconds: float = 1.0) -> StormMonitorService:
        store = StationStore(clock=clock)
        dispatcher = AlertDispatcher(integrations, timeout_seconds=timeout_seconds)
        state_machine = AlertStateMachine(
            dispatcher,
            clock=clock,
            states=store.monitor_states,
        )
        return StormMonitorService(store, state_machine, dispatcher, clock=clock)

    return _make


@pytest.fixture
def failing() -> FailingIntegration:
    return FailingIntegration()


@pytest.fixture
def slow() -> SlowIntegration:
    return SlowIntegration()
