"""
Station Store — the only shared mutable state of the monitoring core.

Owns, per station id:
- the ReadingWindow
- the StationMonitorState (mutated by the alert state machine only)
- an asyncio.Lock serializing ingest work for that station

Stations are created lazily and never evicted.
"""

import asyncio
from typing import Optional

from stormwatch.monitoring.clock import Clock, SystemClock
from stormwatch.monitoring.schemas import StationMonitorState
from stormwatch.monitoring.window import GRACE_MINUTES, WINDOW_MINUTES, ReadingWindow


class StationStore:
    def __init__(
        self,
        clock: Optional[Clock] = None,
        window_minutes: int = WINDOW_MINUTES,
        grace_minutes: int = GRACE_MINUTES,
    ):
        self._clock = clock or SystemClock()
        self._window_minutes = window_minutes
        self._grace_minutes = grace_minutes
        self.windows: dict[str, ReadingWindow] = {}
        self.monitor_states: dict[str, StationMonitorState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def window_for(self, station_id: str) -> ReadingWindow:
        """The station's window, created on first use."""
        window = self.windows.get(station_id)
        if window is None:
            window = ReadingWindow(
                clock=self._clock,
                window_minutes=self._window_minutes,
                grace_minutes=self._grace_minutes,
            )
            self.windows[station_id] = window
        return window

    def get_window(self, station_id: str) -> Optional[ReadingWindow]:
        return self.windows.get(station_id)

    def lock_for(self, station_id: str) -> asyncio.Lock:
        lock = self._locks.get(station_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[station_id] = lock
        return lock

    def station_ids(self) -> list[str]:
        return sorted(self.windows)
