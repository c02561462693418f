from __future__ import annotations

import logging

from homeassistant.components.sensor import SensorDeviceClass, SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity import EntityCategory
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import NO_QUOTES_MESSAGE
from .entity import QuoteSyncEntity
from .quotes import SyncStatus
from .utils.entry_helpers import QuoteSyncData, get_entry_data

_LOGGER = logging.getLogger(__name__)

MAX_STATE_LENGTH = 255


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback) -> None:
    data = get_entry_data(hass, entry)
    if data is None:
        _LOGGER.debug("Quote Sync entry %s has no runtime data; skipping sensors", entry.entry_id)
        return
    async_add_entities([CurrentQuoteSensor(data), SyncStatusSensor(data)])


class CurrentQuoteSensor(QuoteSyncEntity, SensorEntity):
    """The quote currently on display."""

    _attr_icon = "mdi:format-quote-close"
    _attr_name = "Current quote"

    def __init__(self, data: QuoteSyncData) -> None:
        super().__init__(data, "current_quote")

    def _refresh(self) -> None:
        collection = self._data.collection
        current = collection.current
        self._attr_native_value = current.text[:MAX_STATE_LENGTH] if current else None
        attributes = {
            "category": current.category if current else None,
            "filter": collection.filter,
            "categories": list(collection.categories()),
            "quote_count": len(collection),
        }
        if not collection.filtered():
            attributes["message"] = NO_QUOTES_MESSAGE
        self._attr_extra_state_attributes = attributes


class SyncStatusSensor(QuoteSyncEntity, SensorEntity):
    """State of the last reconciliation with the quote server."""

    _attr_icon = "mdi:cloud-sync"
    _attr_name = "Sync status"
    _attr_translation_key = "sync_status"
    _attr_device_class = SensorDeviceClass.ENUM
    _attr_entity_category = EntityCategory.DIAGNOSTIC
    _attr_options = [status.value for status in SyncStatus]

    def __init__(self, data: QuoteSyncData) -> None:
        super().__init__(data, "sync_status")

    async def async_added_to_hass(self) -> None:
        await super().async_added_to_hass()
        self.async_on_remove(self._data.engine.async_add_listener(self._handle_change))

    def _refresh(self) -> None:
        status = self._data.engine.status()
        self._attr_native_value = status["state"]
        self._attr_extra_state_attributes = {
            "message": status["message"],
            "last_success_at": status["last_success_at"],
            "last_error": status["last_error"],
            "in_flight": status["in_flight"],
        }
