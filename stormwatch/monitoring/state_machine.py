"""
Alert State Machine — debounces storm statuses into alerts.

Per station: Idle ↔ Monitoring.

    1. Expiry: Monitoring for longer than the monitoring duration → Idle
       (last category is kept).
    2. Status with alert level None → nothing else happens.
    3. Otherwise, alert when Idle or when the category differs from the last
       alerted one: enter Monitoring at `now`, remember the category, dispatch.
       Same category while Monitoring → suppressed.

A persistent condition therefore alerts at onset and again each time the
monitoring window lapses; a category change alerts immediately.
"""

from datetime import timedelta
from typing import Optional

import structlog

from stormwatch.monitoring.clock import Clock, SystemClock
from stormwatch.monitoring.dispatcher import AlertDispatcher
from stormwatch.monitoring.schemas import AlertLevel, StationMonitorState, StormStatus

logger = structlog.get_logger(__name__)

MONITORING_DURATION = timedelta(minutes=60)


class AlertStateMachine:
    """
    Owns StationMonitorState transitions.

    State is committed before dispatch, so a failed delivery never rolls it
    back or re-arms the debounce early.
    """

    def __init__(
        self,
        dispatcher: AlertDispatcher,
        clock: Optional[Clock] = None,
        monitoring_duration: timedelta = MONITORING_DURATION,
        states: Optional[dict[str, StationMonitorState]] = None,
        background_dispatch: bool = False,
    ):
        self._dispatcher = dispatcher
        self._clock = clock or SystemClock()
        self._monitoring_duration = monitoring_duration
        self._states = states if states is not None else {}
        self._background_dispatch = background_dispatch

    async def process(self, station_id: str, status: StormStatus) -> bool:
        """
        Apply one classifier evaluation for a station.

        Returns:
            True if an alert was dispatched (or scheduled), False otherwise.
        """
        if not self._transition(station_id, status):
            return False

        if self._background_dispatch:
            self._dispatcher.schedule_alert(station_id, status)
        else:
            await self._dispatcher.trigger_alert(station_id, status)
        return True

    def state_for(self, station_id: str) -> Optional[StationMonitorState]:
        """Snapshot of a station's state, or None if it was never processed."""
        state = self._states.get(station_id)
        return state.model_copy() if state else None

    def _transition(self, station_id: str, status: StormStatus) -> bool:
        state = self._states.get(station_id)
        if state is None:
            state = StationMonitorState(station_id=station_id)
            self._states[station_id] = state

        now = self._clock.now()

        if state.is_under_monitoring and state.monitoring_start_time is not None:
            if now - state.monitoring_start_time > self._monitoring_duration:
                state.is_under_monitoring = False
                state.monitoring_start_time = None
                logger.info("monitoring_period_ended", station_id=station_id)

        if status.alert_level == AlertLevel.NONE:
            return False

        severity_changed = status.category != state.last_category
        if state.is_under_monitoring and not severity_changed:
            logger.info(
                "alert_suppressed_monitoring",
                station_id=station_id,
                category=status.category,
                alert_level=status.alert_level.value,
                monitoring_since=state.monitoring_start_time.isoformat(),
            )
            return False

        if state.is_under_monitoring:
            logger.info(
                "alert_severity_changed",
                station_id=station_id,
                previous_category=state.last_category,
                category=status.category,
            )

        state.is_under_monitoring = True
        state.monitoring_start_time = now
        state.last_category = status.category

        logger.info(
            "alert_triggered",
            station_id=station_id,
            category=status.category,
            alert_level=status.alert_level.value,
            intensity=round(status.max_intensity, 2),
        )
        return True
