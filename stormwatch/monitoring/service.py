"""
Storm Monitor Service — ingest readings and report station status.

Pipeline per ingested reading (serialized per station):
1. Add the reading to the station's window (duplicates are dropped)
2. Classify the window
3. Feed the status to the alert state machine (may dispatch)
"""

from datetime import datetime, timedelta
from typing import Optional, Sequence

import structlog

from stormwatch.config import Settings
from stormwatch.exceptions import StationNotFoundError
from stormwatch.monitoring.classifier import OBSERVATION_CADENCE_HOURS, classify
from stormwatch.monitoring.clock import Clock, SystemClock, ensure_utc
from stormwatch.monitoring.dispatcher import AlertDispatcher
from stormwatch.monitoring.integrations import Integration
from stormwatch.monitoring.schemas import StationMonitorState, StormStatus
from stormwatch.monitoring.state_machine import AlertStateMachine
from stormwatch.monitoring.store import StationStore

logger = structlog.get_logger(__name__)


class StormMonitorService:
    def __init__(
        self,
        store: StationStore,
        state_machine: AlertStateMachine,
        dispatcher: AlertDispatcher,
        clock: Optional[Clock] = None,
        cadence_hours: float = OBSERVATION_CADENCE_HOURS,
    ):
        self._store = store
        self._state_machine = state_machine
        self._dispatcher = dispatcher
        self._clock = clock or SystemClock()
        self._cadence_hours = cadence_hours

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        integrations: Sequence[Integration] = (),
        clock: Optional[Clock] = None,
    ) -> "StormMonitorService":
        """Wire store, state machine and dispatcher from configuration."""
        clock = clock or SystemClock()
        store = StationStore(
            clock=clock,
            window_minutes=settings.window_minutes,
            grace_minutes=settings.grace_minutes,
        )
        dispatcher = AlertDispatcher(
            integrations,
            timeout_seconds=settings.alert_dispatch_timeout_seconds,
        )
        state_machine = AlertStateMachine(
            dispatcher,
            clock=clock,
            monitoring_duration=timedelta(minutes=settings.monitoring_duration_minutes),
            states=store.monitor_states,
            background_dispatch=settings.alert_dispatch_background,
        )
        return cls(
            store,
            state_machine,
            dispatcher,
            clock=clock,
            cadence_hours=settings.observation_cadence_hours,
        )

    @property
    def store(self) -> StationStore:
        return self._store

    @property
    def dispatcher(self) -> AlertDispatcher:
        return self._dispatcher

    async def ingest(
        self,
        station_id: str,
        inches: float,
        timestamp: Optional[datetime] = None,
    ) -> StormStatus:
        """
        Record a reading and run it through classification and alerting.

        Args:
            station_id: Non-empty station identifier
            inches: Accumulation for one observation interval (validated upstream)
            timestamp: Observation time; defaults to now, naive values are UTC

        Returns:
            The station's status after this reading
        """
        observed_at = ensure_utc(timestamp) if timestamp else self._clock.now()

        async with self._store.lock_for(station_id):
            window = self._store.window_for(station_id)
            accepted = window.add(inches, observed_at)
            status = classify(window, cadence_hours=self._cadence_hours)

            logger.info(
                "reading_ingested",
                station_id=station_id,
                inches=inches,
                accepted=accepted,
                category=status.category,
                alert_level=status.alert_level.value,
            )

            await self._state_machine.process(station_id, status)

        return status

    def query_status(self, station_id: str) -> StormStatus:
        """
        Current status of a known station.

        Raises:
            StationNotFoundError: no reading has been ingested for the station
        """
        window = self._store.get_window(station_id)
        if window is None:
            raise StationNotFoundError(station_id)
        return classify(window, cadence_hours=self._cadence_hours)

    def monitor_state(self, station_id: str) -> Optional[StationMonitorState]:
        return self._state_machine.state_for(station_id)

    async def aclose(self) -> None:
        """Let in-flight background alert deliveries finish."""
        await self._dispatcher.drain()
