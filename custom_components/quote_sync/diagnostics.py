from __future__ import annotations

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .utils.entry_helpers import get_entry_data


async def async_get_config_entry_diagnostics(hass: HomeAssistant, entry: ConfigEntry) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    payload: dict[str, Any] = {
        "entry": {
            "title": entry.title,
            "data": dict(entry.data),
            "options": dict(entry.options),
        },
        "loaded": False,
    }
    data = get_entry_data(hass, entry)
    if data is None:
        return payload

    collection = data.collection
    current = collection.current
    payload.update(
        {
            "loaded": True,
            "config": data.config.as_dict(),
            "quote_count": len(collection),
            "server_quote_count": len(collection.server_quotes()),
            "categories": list(collection.categories()),
            "filter": collection.filter,
            "current": current.to_dict() if current else None,
            "timer_running": data.timer.running,
            "sync": data.engine.status(),
        }
    )
    return payload
