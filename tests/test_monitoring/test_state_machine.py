"""
Tests for the Alert State Machine.

Covers:
- First alert on onset
- Debounce of unchanged severity
- Immediate alert on category change
- Expiry re-trigger after the monitoring duration
- None-level statuses never alert and do not clear monitoring early
- Dispatch failures do not roll back state
"""

import pytest

from stormwatch.monitoring.classifier import classify_intensity
from stormwatch.monitoring.dispatcher import AlertDispatcher
from stormwatch.monitoring.schemas import AlertLevel
from stormwatch.monitoring.state_machine import AlertStateMachine

CRITICAL_10Y = classify_intensity(3.2)
CRITICAL_25Y = classify_intensity(3.8)
MEDIUM_1Y = classify_intensity(2.0)
NORMAL = classify_intensity(0.5)


@pytest.fixture
def machine_for(clock):
    def _make(*integrations) -> AlertStateMachine:
        return AlertStateMachine(
            AlertDispatcher(integrations, timeout_seconds=1.0),
            clock=clock,
        )
    return _make


def test_fixture_statuses():
    assert CRITICAL_10Y.alert_level == AlertLevel.CRITICAL
    assert CRITICAL_25Y.category == "25-Year"
    assert MEDIUM_1Y.alert_level == AlertLevel.MEDIUM
    assert NORMAL.alert_level == AlertLevel.NONE


class TestOnset:
    @pytest.mark.asyncio
    async def test_first_alert_dispatches(self, machine_for, recorder, clock):
        machine = machine_for(recorder)
        assert await machine.process("S1", CRITICAL_10Y) is True

        assert len(recorder.calls) == 1
        state = machine.state_for("S1")
        assert state.is_under_monitoring is True
        assert state.monitoring_start_time == clock.now()
        assert state.last_category == "10-Year"

    @pytest.mark.asyncio
    async def test_normal_status_creates_idle_state(self, machine_for, recorder):
        machine = machine_for(recorder)
        assert await machine.process("S1", NORMAL) is False
        state = machine.state_for("S1")
        assert state.is_under_monitoring is False
        assert state.last_category is None
        assert recorder.calls == []

    def test_unknown_station_has_no_state(self, machine_for):
        assert machine_for().state_for("nope") is None


class TestDebounce:
    @pytest.mark.asyncio
    async def test_debounce_then_escalation(self, machine_for, recorder, clock):
        machine = machine_for(recorder)
        await machine.process("S", CRITICAL_10Y)

        clock.advance(minutes=10)
        assert await machine.process("S", CRITICAL_10Y) is False
        assert len(recorder.calls) == 1

        escalated_at = clock.advance(minutes=10)
        assert await machine.process("S", CRITICAL_25Y) is True
        assert len(recorder.calls) == 2
        assert recorder.calls[-1]["category"] == "25-Year"
        assert machine.state_for("S").monitoring_start_time == escalated_at

    @pytest.mark.asyncio
    async def test_downgrade_while_monitoring_also_alerts(self, machine_for, recorder, clock):
        machine = machine_for(recorder)
        await machine.process("S", CRITICAL_10Y)
        clock.advance(minutes=5)
        assert await machine.process("S", MEDIUM_1Y) is True
        assert machine.state_for("S").last_category == "1-Year"

    @pytest.mark.asyncio
    async def test_stations_are_independent(self, machine_for, recorder):
        machine = machine_for(recorder)
        await machine.process("A", CRITICAL_10Y)
        await machine.process("B", CRITICAL_10Y)
        assert [c["station_id"] for c in recorder.calls] == ["A", "B"]


class TestExpiry:
    @pytest.mark.asyncio
    async def test_persistent_condition_realerts_after_window(self, machine_for, recorder, clock):
        machine = machine_for(recorder)
        await machine.process("S", CRITICAL_10Y)

        clock.advance(minutes=30)
        await machine.process("S", CRITICAL_10Y)
        assert len(recorder.calls) == 1

        retriggered_at = clock.advance(minutes=31)  # t0 + 61min
        assert await machine.process("S", CRITICAL_10Y) is True
        assert len(recorder.calls) == 2
        state = machine.state_for("S")
        assert state.is_under_monitoring is True
        assert state.monitoring_start_time == retriggered_at

    @pytest.mark.asyncio
    async def test_exactly_sixty_minutes_still_monitoring(self, machine_for, recorder, clock):
        machine = machine_for(recorder)
        await machine.process("S", CRITICAL_10Y)
        clock.advance(minutes=60)
        assert await machine.process("S", CRITICAL_10Y) is False

    @pytest.mark.asyncio
    async def test_drop_to_none_keeps_monitoring_until_expiry(self, machine_for, recorder, clock):
        machine = machine_for(recorder)
        await machine.process("S", CRITICAL_10Y)

        clock.advance(minutes=20)
        await machine.process("S", NORMAL)
        assert machine.state_for("S").is_under_monitoring is True

        clock.advance(minutes=41)
        await machine.process("S", NORMAL)
        state = machine.state_for("S")
        assert state.is_under_monitoring is False
        assert state.monitoring_start_time is None
        assert state.last_category == "10-Year"
        assert len(recorder.calls) == 1

    @pytest.mark.asyncio
    async def test_return_within_window_same_category_suppressed(self, machine_for, recorder, clock):
        machine = machine_for(recorder)
        await machine.process("S", CRITICAL_10Y)
        clock.advance(minutes=10)
        await machine.process("S", NORMAL)
        clock.advance(minutes=10)
        assert await machine.process("S", CRITICAL_10Y) is False


class TestFailureIsolation:
    @pytest.mark.asyncio
    async def test_failed_dispatch_commits_state(self, machine_for, failing, recorder, clock):
        machine = machine_for(failing, recorder)
        assert await machine.process("S", CRITICAL_10Y) is True

        assert failing.attempts == 1
        assert len(recorder.calls) == 1
        state = machine.state_for("S")
        assert state.is_under_monitoring is True
        assert state.last_category == "10-Year"

        # Failure does not re-arm the debounce
        clock.advance(minutes=5)
        assert await machine.process("S", CRITICAL_10Y) is False
        assert failing.attempts == 1


class TestBackgroundDispatch:
    @pytest.mark.asyncio
    async def test_process_returns_before_delivery(self, recorder):
        dispatcher = AlertDispatcher([recorder], timeout_seconds=1.0)
        machine = AlertStateMachine(dispatcher, background_dispatch=True)

        assert await machine.process("S", CRITICAL_10Y) is True
        assert recorder.calls == []

        await dispatcher.drain()
        assert len(recorder.calls) == 1

    @pytest.mark.asyncio
    async def test_state_snapshot_is_a_copy(self, machine_for):
        machine = machine_for()
        await machine.process("S", CRITICAL_10Y)
        snapshot = machine.state_for("S")
        snapshot.is_under_monitoring = False
        assert machine.state_for("S").is_under_monitoring is True
