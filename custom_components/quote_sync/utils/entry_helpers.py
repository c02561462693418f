"""Lookup helpers for per-entry runtime objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ServiceValidationError

from ..const import DOMAIN

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry

    from ..quotes import QuoteCollection, QuoteSyncConfig, SyncEngine
    from ..quotes.scheduler import SyncTimer
    from ..storage import QuoteStore


@dataclass(slots=True)
class QuoteSyncData:
    """Runtime objects owned by one loaded config entry."""

    entry_id: str
    title: str
    config: QuoteSyncConfig
    store: QuoteStore
    collection: QuoteCollection
    engine: SyncEngine
    timer: SyncTimer


def get_entry_data(hass: HomeAssistant, entry_or_id: ConfigEntry | str) -> QuoteSyncData | None:
    """Return the runtime data for a loaded entry or ``None``."""
    entry_id = getattr(entry_or_id, "entry_id", entry_or_id)
    stored = hass.data.get(DOMAIN, {}).get(entry_id)
    return stored if isinstance(stored, QuoteSyncData) else None


def loaded_entries(hass: HomeAssistant) -> list[QuoteSyncData]:
    return [value for value in hass.data.get(DOMAIN, {}).values() if isinstance(value, QuoteSyncData)]


def resolve_entry_data(hass: HomeAssistant, entry_id: str | None) -> QuoteSyncData:
    """Return the entry a service call targets.

    ``entry_id`` may be omitted when exactly one entry is loaded.
    """
    if entry_id:
        data = get_entry_data(hass, entry_id)
        if data is None:
            raise ServiceValidationError(f"Quote Sync entry {entry_id} is not loaded")
        return data
    entries = loaded_entries(hass)
    if not entries:
        raise ServiceValidationError("No Quote Sync entry is loaded")
    if len(entries) > 1:
        raise ServiceValidationError("Several Quote Sync entries are loaded; pass entry_id")
    return entries[0]


__all__ = ["QuoteSyncData", "get_entry_data", "loaded_entries", "resolve_entry_data"]
