"""
Reading Window — per-station buffer of recent rainfall readings.

Storage only: duplicate suppression, time-based pruning and ordering.
Classification looks at the latest entry alone; the rest of the span is
retained for pruning and audit.
"""

from datetime import datetime, timedelta
from typing import Optional

import structlog

from stormwatch.monitoring.clock import Clock, SystemClock, ensure_utc
from stormwatch.monitoring.schemas import RainfallReading

logger = structlog.get_logger(__name__)

WINDOW_MINUTES = 60
GRACE_MINUTES = 30


class ReadingWindow:
    """
    Ascending-by-timestamp readings for one station.

    Invariants after every mutation:
    - sorted ascending by timestamp
    - nothing at or before now - (window + grace)
    - no reading shares the timestamp of the entry that was latest when it arrived
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        window_minutes: int = WINDOW_MINUTES,
        grace_minutes: int = GRACE_MINUTES,
    ):
        self._clock = clock or SystemClock()
        self._retention = timedelta(minutes=window_minutes + grace_minutes)
        self._readings: list[RainfallReading] = []

    def add(self, inches: float, timestamp: datetime) -> bool:
        """
        Append a reading, then prune and re-sort.

        Returns False (and changes nothing) when the timestamp equals the
        current latest entry's timestamp.
        """
        timestamp = ensure_utc(timestamp)
        if self._readings and self._readings[-1].timestamp == timestamp:
            logger.debug("reading_duplicate_ignored", timestamp=timestamp.isoformat())
            return False

        self._readings.append(RainfallReading(timestamp=timestamp, inches=inches))
        self._prune()
        return True

    def latest(self) -> Optional[RainfallReading]:
        """Most recent retained reading, or None when empty."""
        if not self._readings:
            return None
        return self._readings[-1]

    @property
    def readings(self) -> tuple[RainfallReading, ...]:
        return tuple(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    def _prune(self) -> None:
        cutoff = self._clock.now() - self._retention
        self._readings = [r for r in self._readings if r.timestamp > cutoff]
        self._readings.sort(key=lambda r: r.timestamp)
