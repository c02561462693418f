"""Shared base class for Quote Sync entities."""

from __future__ import annotations

from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.entity import Entity

from .const import DOMAIN
from .utils.entry_helpers import QuoteSyncData


class QuoteSyncEntity(Entity):
    """Push-updated entity bound to one config entry."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(self, data: QuoteSyncData, key: str) -> None:
        self._data = data
        self._attr_unique_id = f"{DOMAIN}_{data.entry_id}_{key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, data.entry_id)},
            name=data.title,
            manufacturer="Quote Sync",
            entry_type=DeviceEntryType.SERVICE,
        )
        self._refresh()

    async def async_added_to_hass(self) -> None:
        await super().async_added_to_hass()
        self.async_on_remove(self._data.collection.async_add_listener(self._handle_change))

    @callback
    def _handle_change(self) -> None:
        self._refresh()
        self.async_write_ha_state()

    def _refresh(self) -> None:
        """Copy the latest runtime state into the entity attributes."""
