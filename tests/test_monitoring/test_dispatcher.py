"""
Tests for the Alert Dispatcher.

Covers:
- Message formatting
- Fan-out to every integration
- Failure isolation
- Per-integration timeout
- Background scheduling and drain
"""

import pytest

from stormwatch.monitoring.classifier import classify_intensity
from stormwatch.monitoring.dispatcher import AlertDispatcher, format_alert_message

STATUS = classify_intensity(3.2)


def test_message_contains_station_category_intensity_duration():
    message = format_alert_message("KTXMCKIN170", STATUS)
    assert "KTXMCKIN170" in message
    assert "10-Year" in message
    assert "3.20 in/hr" in message
    assert "30 mins" in message


@pytest.mark.asyncio
async def test_no_integrations_is_a_noop():
    results = await AlertDispatcher().trigger_alert("S", STATUS)
    assert results == []


@pytest.mark.asyncio
async def test_all_integrations_receive_alert(recorder):
    other = type(recorder)(name="second")
    dispatcher = AlertDispatcher([recorder, other])

    results = await dispatcher.trigger_alert("S", STATUS)

    assert [r.integration for r in results] == ["recorder", "second"]
    assert all(r.success for r in results)
    call = recorder.calls[0]
    assert call["station_id"] == "S"
    assert call["intensity"] == pytest.approx(3.2)
    assert call["category"] == "10-Year"
    assert call["details"] == STATUS
    assert other.calls[0]["message"] == call["message"]


@pytest.mark.asyncio
async def test_failure_does_not_stop_others(failing, recorder):
    dispatcher = AlertDispatcher([failing, recorder])

    results = await dispatcher.trigger_alert("S", STATUS)

    assert len(recorder.calls) == 1
    assert results[0].success is False
    assert "unreachable" in results[0].detail
    assert results[1].success is True


@pytest.mark.asyncio
async def test_slow_integration_times_out(slow, recorder):
    dispatcher = AlertDispatcher([slow, recorder], timeout_seconds=0.05)

    results = await dispatcher.trigger_alert("S", STATUS)

    assert results[0].integration == "slow"
    assert results[0].success is False
    assert "Timed out" in results[0].detail
    assert results[1].success is True


@pytest.mark.asyncio
async def test_register_adds_integration(recorder):
    dispatcher = AlertDispatcher()
    dispatcher.register(recorder)
    await dispatcher.trigger_alert("S", STATUS)
    assert len(recorder.calls) == 1
    assert dispatcher.integrations == (recorder,)


@pytest.mark.asyncio
async def test_schedule_and_drain(recorder):
    dispatcher = AlertDispatcher([recorder])
    task = dispatcher.schedule_alert("S", STATUS)
    assert recorder.calls == []

    await dispatcher.drain()

    assert task.done()
    assert len(recorder.calls) == 1
