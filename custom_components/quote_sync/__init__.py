"""The Quote Sync integration.

Keeps a local collection of categorised quotes in Home Assistant storage and
periodically reconciles it with a remote quote server.
"""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.typing import ConfigType
from homeassistant.util import dt as dt_util

from .const import DEFAULT_NAME, DOMAIN, PLATFORMS
from .quotes import QuoteCollection, QuoteSyncConfig, RemoteQuoteClient, SyncEngine
from .quotes.scheduler import SyncTimer, hass_call_later
from .services import async_register_services
from .storage import SESSION_DATA_KEY, QuoteStore, SessionCache
from .utils.entry_helpers import QuoteSyncData, get_entry_data

_LOGGER = logging.getLogger(__name__)

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


async def async_setup(hass: HomeAssistant, _config: ConfigType) -> bool:
    """Register services; YAML configuration is not supported."""

    async_register_services(hass)
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Quote Sync from a config entry."""

    config = QuoteSyncConfig.from_entry(entry)
    store = QuoteStore(hass, entry.entry_id)
    collection = QuoteCollection(store, SessionCache.for_entry(hass, entry.entry_id))
    await collection.async_initialize()
    if collection.current is None:
        collection.pick_random()

    client = RemoteQuoteClient(
        async_get_clientsession(hass),
        config.base_url,
        limit=config.fetch_limit,
    )
    engine = SyncEngine(collection, client, call_later=hass_call_later(hass), now=dt_util.utcnow)
    timer = SyncTimer(hass, engine, config.interval)

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = QuoteSyncData(
        entry_id=entry.entry_id,
        title=entry.title or DEFAULT_NAME,
        config=config,
        store=store,
        collection=collection,
        engine=engine,
        timer=timer,
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    if config.sync_enabled:
        timer.start()
    else:
        _LOGGER.debug("Quote sync disabled for %s", entry.entry_id)

    entry.async_on_unload(entry.add_update_listener(_async_update_listener))
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry and stop its sync timer."""

    data = get_entry_data(hass, entry)
    if data is not None:
        data.timer.stop()

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok and data is not None:
        hass.data[DOMAIN].pop(entry.entry_id, None)
        await data.engine.async_shutdown()
    elif not unload_ok and data is not None and data.config.sync_enabled:
        data.timer.start()
    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Delete stored quotes and session state for a removed entry."""

    await QuoteStore(hass, entry.entry_id).async_remove()
    hass.data.get(DOMAIN, {}).get(SESSION_DATA_KEY, {}).pop(entry.entry_id, None)
