"""
Alert Dispatcher — fans one storm alert out to every registered integration.

Each integration is independent and fault-tolerant:
- runs concurrently with the others
- bounded by a per-integration timeout
- failures and timeouts are logged and reported, never raised
"""

import asyncio
from typing import Optional, Sequence

import structlog

from stormwatch.monitoring.integrations import Integration, integration_name
from stormwatch.monitoring.schemas import DeliveryResult, StormStatus

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def format_alert_message(station_id: str, status: StormStatus) -> str:
    """Human-readable alert text."""
    return (
        f"🚨 STORM ALERT ({status.alert_level.value}) 🚨\n"
        f"Station {station_id} has detected a {status.category} event!\n"
        f"Intensity: {status.max_intensity:.2f} in/hr\n"
        f"Duration: {status.triggering_duration_minutes} mins"
    )


class AlertDispatcher:
    """Delivers alerts to integrations without letting any one of them fail the rest."""

    def __init__(
        self,
        integrations: Sequence[Integration] = (),
        timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._integrations: list[Integration] = list(integrations)
        self._timeout = timeout_seconds
        self._pending: set[asyncio.Task] = set()

    @property
    def integrations(self) -> tuple[Integration, ...]:
        return tuple(self._integrations)

    def register(self, integration: Integration) -> None:
        self._integrations.append(integration)

    async def trigger_alert(self, station_id: str, status: StormStatus) -> list[DeliveryResult]:
        """
        Send an alert for the station to every integration.

        Returns:
            One DeliveryResult per integration, in registration order.
        """
        message = format_alert_message(station_id, status)
        logger.info(
            "alert_dispatching",
            station_id=station_id,
            category=status.category,
            alert_level=status.alert_level.value,
            integrations=len(self._integrations),
        )
        results = await asyncio.gather(
            *(self._deliver(i, message, station_id, status) for i in self._integrations)
        )
        return list(results)

    def schedule_alert(self, station_id: str, status: StormStatus) -> asyncio.Task:
        """Run trigger_alert in the background; the caller does not wait for delivery."""
        task = asyncio.create_task(self.trigger_alert(station_id, status))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled dispatch to settle."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _deliver(
        self,
        integration: Integration,
        message: str,
        station_id: str,
        status: StormStatus,
    ) -> DeliveryResult:
        name = integration_name(integration)
        try:
            await asyncio.wait_for(
                integration.send_alert(
                    message,
                    station_id,
                    status.max_intensity,
                    status.category,
                    details=status,
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                "integration_delivery_timeout",
                integration=name,
                station_id=station_id,
                timeout_seconds=self._timeout,
            )
            return DeliveryResult(
                integration=name,
                success=False,
                detail=f"Timed out after {self._timeout}s",
            )
        except Exception as e:
            logger.error(
                "integration_delivery_failed",
                integration=name,
                station_id=station_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return DeliveryResult(integration=name, success=False, detail=str(e))

        return DeliveryResult(integration=name, success=True, detail="Delivered")
