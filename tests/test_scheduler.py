from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import async_fire_time_changed

from custom_components.quote_sync.quotes.scheduler import SyncTimer, hass_call_later


@pytest.mark.asyncio
async def test_timer_ticks_until_stopped(hass):
    engine = MagicMock()
    engine.async_sync = AsyncMock(return_value=True)
    timer = SyncTimer(hass, engine, timedelta(seconds=30))

    timer.start()
    timer.start()
    assert timer.running is True

    async_fire_time_changed(hass, dt_util.utcnow() + timedelta(seconds=31))
    await hass.async_block_till_done()
    assert engine.async_sync.await_count == 1

    timer.stop()
    assert timer.running is False
    async_fire_time_changed(hass, dt_util.utcnow() + timedelta(seconds=120))
    await hass.async_block_till_done()
    assert engine.async_sync.await_count == 1


@pytest.mark.asyncio
async def test_stop_without_start_is_harmless(hass):
    timer = SyncTimer(hass, MagicMock(), timedelta(seconds=5))

    timer.stop()

    assert timer.running is False


@pytest.mark.asyncio
async def test_hass_call_later_fires_and_cancels(hass):
    call_later = hass_call_later(hass)
    fired = []

    call_later(3, lambda: fired.append("first"))
    cancel = call_later(3, lambda: fired.append("second"))
    cancel()

    async_fire_time_changed(hass, dt_util.utcnow() + timedelta(seconds=4))
    await hass.async_block_till_done()

    assert fired == ["first"]
