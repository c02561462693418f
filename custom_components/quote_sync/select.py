from __future__ import annotations

from homeassistant.components.select import SelectEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import ALL_CATEGORIES
from .entity import QuoteSyncEntity
from .quotes import QuoteSyncError
from .utils.entry_helpers import QuoteSyncData, get_entry_data


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback) -> None:
    data = get_entry_data(hass, entry)
    if data is None:
        return
    async_add_entities([CategoryFilterSelect(data)])


class CategoryFilterSelect(QuoteSyncEntity, SelectEntity):
    """Pick which category random quotes are drawn from."""

    _attr_icon = "mdi:filter-variant"
    _attr_name = "Category filter"

    def __init__(self, data: QuoteSyncData) -> None:
        super().__init__(data, "category_filter")

    def _refresh(self) -> None:
        collection = self._data.collection
        options = [ALL_CATEGORIES, *collection.categories()]
        # Keep a saved filter selectable even after its last quote is gone.
        if collection.filter not in options:
            options.append(collection.filter)
        self._attr_options = options
        self._attr_current_option = collection.filter

    async def async_select_option(self, option: str) -> None:
        collection = self._data.collection
        try:
            await collection.async_set_filter(option)
        except QuoteSyncError as err:
            raise HomeAssistantError(str(err)) from err
        collection.pick_random()
