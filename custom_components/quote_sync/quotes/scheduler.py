"""Home Assistant timers that drive the sync engine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_call_later, async_track_time_interval

from .engine import CallLater

if TYPE_CHECKING:
    from .engine import SyncEngine

_LOGGER = logging.getLogger(__name__)


def hass_call_later(hass: HomeAssistant) -> CallLater:
    """Return a ``call_later`` for :class:`SyncEngine` backed by HA's clock."""

    def _call_later(delay: float, action: Callable[[], None]) -> CALLBACK_TYPE:
        @callback
        def _fire(_now: datetime) -> None:
            action()

        return async_call_later(hass, delay, _fire)

    return _call_later


class SyncTimer:
    """Fixed-interval sync tick with explicit start and stop."""

    def __init__(self, hass: HomeAssistant, engine: SyncEngine, interval: timedelta) -> None:
        self.hass = hass
        self.engine = engine
        self.interval = interval
        self._unsub: CALLBACK_TYPE | None = None

    @property
    def running(self) -> bool:
        return self._unsub is not None

    @callback
    def start(self) -> None:
        if self._unsub is not None:
            return
        _LOGGER.debug("Starting quote sync every %s", self.interval)
        self._unsub = async_track_time_interval(
            self.hass,
            self._async_tick,
            self.interval,
            name="quote_sync tick",
            cancel_on_shutdown=True,
        )

    @callback
    def stop(self) -> None:
        if self._unsub is None:
            return
        self._unsub()
        self._unsub = None
        _LOGGER.debug("Stopped quote sync timer")

    async def _async_tick(self, _now: datetime) -> None:
        await self.engine.async_sync()


__all__ = ["SyncTimer", "hass_call_later"]
