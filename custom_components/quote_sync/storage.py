from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, MutableMapping
from copy import deepcopy
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.json import json_bytes
from homeassistant.helpers.storage import Store

from .const import DOMAIN, STORAGE_KEY_FMT, STORAGE_VERSION

_LOGGER = logging.getLogger(__name__)

SESSION_DATA_KEY = "session"


class QuoteStore:
    """Durable key/value document kept in Home Assistant's ``.storage`` folder."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        self.key = STORAGE_KEY_FMT.format(entry_id=entry_id)
        self._store: Store[dict[str, Any]] = Store(hass, STORAGE_VERSION, self.key)
        self._lock = asyncio.Lock()
        self.data: dict[str, Any] | None = None

    async def _async_document(self) -> dict[str, Any]:
        if self.data is not None:
            return self.data
        try:
            raw = await self._store.async_load()
        except HomeAssistantError as err:
            _LOGGER.warning("Stored quote data in %s is unreadable, starting empty: %s", self.key, err)
            raw = None
        if raw is not None and not isinstance(raw, Mapping):
            _LOGGER.warning("Stored quote data in %s is not a mapping; ignoring it", self.key)
            raw = None
        self.data = dict(raw or {})
        return self.data

    async def async_load(self, key: str) -> Any | None:
        """Return the value stored under ``key`` or ``None`` when absent."""

        document = await self._async_document()
        value = document.get(key)
        return deepcopy(value) if value is not None else None

    async def async_save(self, key: str, value: Any) -> bool:
        """Persist ``value`` under ``key``; ``False`` means it was rejected.

        The document is encoded up front so values ``Store`` cannot serialise
        are refused before anything changes. Disk errors during the write are
        logged by ``Store`` itself and do not reach the caller.
        """

        async with self._lock:
            current = await self._async_document()
            updated = {**current, key: deepcopy(value)}
            try:
                json_bytes(updated)
            except (TypeError, ValueError) as err:
                _LOGGER.warning("Refusing to write %s to %s: %s", key, self.key, err)
                return False
            await self._store.async_save(updated)
            self.data = updated
            return True

    async def async_remove(self) -> None:
        """Delete the backing file, used when the config entry is removed."""

        async with self._lock:
            await self._store.async_remove()
            self.data = None


class SessionCache:
    """Key/value cache that lives as long as the running Home Assistant instance.

    Values survive a reload of the config entry but not a restart.
    """

    def __init__(self, backing: MutableMapping[str, Any] | None = None) -> None:
        self._data: MutableMapping[str, Any] = backing if backing is not None else {}

    @classmethod
    def for_entry(cls, hass: HomeAssistant, entry_id: str) -> SessionCache:
        sessions = hass.data.setdefault(DOMAIN, {}).setdefault(SESSION_DATA_KEY, {})
        return cls(sessions.setdefault(entry_id, {}))

    def get(self, key: str) -> Any | None:
        value = self._data.get(key)
        return deepcopy(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = deepcopy(value)

    def pop(self, key: str) -> Any | None:
        return self._data.pop(key, None)


__all__ = ["QuoteStore", "SessionCache", "SESSION_DATA_KEY"]
