"""Service handlers for Quote Sync.

Each service forwards one user action into the quote collection or the sync
engine and returns a small response payload for scripts and the UI.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import NoReturn

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse, callback
from homeassistant.exceptions import HomeAssistantError, ServiceValidationError, Unauthorized, UnknownUser
from homeassistant.helpers import config_validation as cv

from .const import (
    ATTR_CATEGORY,
    ATTR_DOCUMENT,
    ATTR_ENTRY_ID,
    ATTR_PATH,
    ATTR_TEXT,
    DEFAULT_EXPORT_PATH,
    DOMAIN,
    NO_QUOTES_MESSAGE,
    SERVICE_ADD_QUOTE,
    SERVICE_EXPORT_QUOTES,
    SERVICE_IMPORT_QUOTES,
    SERVICE_PICK_RANDOM,
    SERVICE_SET_FILTER,
    SERVICE_SYNC_NOW,
)
from .quotes import QuoteFormatError, QuoteSyncError, QuoteValidationError, export_document
from .utils.entry_helpers import resolve_entry_data
from .utils.json_io import read_document, write_document

_LOGGER = logging.getLogger(__name__)

_ENTRY = {vol.Optional(ATTR_ENTRY_ID): cv.string}

ADD_QUOTE_SCHEMA = vol.Schema(
    {
        **_ENTRY,
        vol.Required(ATTR_TEXT): cv.string,
        vol.Required(ATTR_CATEGORY): cv.string,
    }
)
PICK_RANDOM_SCHEMA = vol.Schema({**_ENTRY, vol.Optional(ATTR_CATEGORY): cv.string})
SET_FILTER_SCHEMA = vol.Schema({**_ENTRY, vol.Required(ATTR_CATEGORY): cv.string})
SYNC_NOW_SCHEMA = vol.Schema(_ENTRY)
EXPORT_SCHEMA = vol.Schema({**_ENTRY, vol.Optional(ATTR_PATH, default=DEFAULT_EXPORT_PATH): cv.string})
IMPORT_SCHEMA = vol.All(
    vol.Schema(
        {
            **_ENTRY,
            vol.Exclusive(ATTR_DOCUMENT, "source"): cv.string,
            vol.Exclusive(ATTR_PATH, "source"): cv.string,
        }
    ),
    cv.has_at_least_one_key(ATTR_DOCUMENT, ATTR_PATH),
)


def _raise_for(err: QuoteSyncError) -> NoReturn:
    if isinstance(err, QuoteValidationError | QuoteFormatError):
        raise ServiceValidationError(str(err)) from err
    raise HomeAssistantError(str(err)) from err


def _resolve_config_path(hass: HomeAssistant, raw: str) -> Path:
    """Return ``raw`` resolved inside the configuration directory.

    Absolute paths and ``..`` segments that leave the directory are rejected.
    """
    base = Path(hass.config.config_dir).resolve()
    target = Path(hass.config.path(raw)).resolve()
    try:
        target.relative_to(base)
    except ValueError as err:
        raise ServiceValidationError(f"Path {raw} is outside the configuration directory") from err
    return target


def _admin_only(
    hass: HomeAssistant, handler: Callable[[ServiceCall], Awaitable[ServiceResponse]]
) -> Callable[[ServiceCall], Awaitable[ServiceResponse]]:
    """Wrap ``handler`` so only administrators (or system calls) may run it."""

    async def _async_guarded(call: ServiceCall) -> ServiceResponse:
        if call.context.user_id:
            user = await hass.auth.async_get_user(call.context.user_id)
            if user is None:
                raise UnknownUser(context=call.context)
            if not user.is_admin:
                raise Unauthorized(context=call.context)
        return await handler(call)

    return _async_guarded


@callback
def async_register_services(hass: HomeAssistant) -> None:
    """Register the Quote Sync services once per Home Assistant instance."""

    if hass.services.has_service(DOMAIN, SERVICE_ADD_QUOTE):
        return

    async def _async_add_quote(call: ServiceCall) -> ServiceResponse:
        data = resolve_entry_data(hass, call.data.get(ATTR_ENTRY_ID))
        try:
            quote = await data.collection.async_add(call.data[ATTR_TEXT], call.data[ATTR_CATEGORY])
        except QuoteSyncError as err:
            _raise_for(err)
        published = False
        if data.config.publish_enabled:
            published = await data.engine.async_publish(quote)
        return {**quote.to_dict(), "published": published}

    async def _async_pick_random(call: ServiceCall) -> ServiceResponse:
        data = resolve_entry_data(hass, call.data.get(ATTR_ENTRY_ID))
        quote = data.collection.pick_random(call.data.get(ATTR_CATEGORY))
        if quote is None:
            return {"quote": None, "message": NO_QUOTES_MESSAGE}
        return {"quote": quote.to_dict()}

    async def _async_set_filter(call: ServiceCall) -> None:
        data = resolve_entry_data(hass, call.data.get(ATTR_ENTRY_ID))
        try:
            await data.collection.async_set_filter(call.data[ATTR_CATEGORY])
        except QuoteSyncError as err:
            _raise_for(err)
        data.collection.pick_random()

    async def _async_sync_now(call: ServiceCall) -> ServiceResponse:
        data = resolve_entry_data(hass, call.data.get(ATTR_ENTRY_ID))
        synced = await data.engine.async_sync()
        return {"synced": synced, "status": data.engine.status()}

    async def _async_export(call: ServiceCall) -> ServiceResponse:
        data = resolve_entry_data(hass, call.data.get(ATTR_ENTRY_ID))
        quotes = data.collection.quotes
        document = export_document(quotes)
        target = _resolve_config_path(hass, call.data[ATTR_PATH])
        try:
            written = await hass.async_add_executor_job(write_document, target, document)
        except OSError as err:
            raise HomeAssistantError(f"Could not write {target}: {err}") from err
        _LOGGER.info("Exported %d quotes to %s", len(quotes), written)
        return {"path": str(written), "count": len(quotes)}

    async def _async_import(call: ServiceCall) -> ServiceResponse:
        data = resolve_entry_data(hass, call.data.get(ATTR_ENTRY_ID))
        document = call.data.get(ATTR_DOCUMENT)
        if document is None:
            source = _resolve_config_path(hass, call.data[ATTR_PATH])
            try:
                document = await hass.async_add_executor_job(read_document, source)
            except OSError as err:
                raise HomeAssistantError(f"Could not read {source}: {err}") from err
        try:
            imported = await data.collection.async_import(document)
        except QuoteSyncError as err:
            _raise_for(err)
        return {"imported": len(imported), "total": len(data.collection)}

    register = hass.services.async_register
    register(DOMAIN, SERVICE_ADD_QUOTE, _async_add_quote, ADD_QUOTE_SCHEMA, SupportsResponse.OPTIONAL)
    register(DOMAIN, SERVICE_PICK_RANDOM, _async_pick_random, PICK_RANDOM_SCHEMA, SupportsResponse.OPTIONAL)
    register(DOMAIN, SERVICE_SET_FILTER, _async_set_filter, SET_FILTER_SCHEMA)
    register(DOMAIN, SERVICE_SYNC_NOW, _async_sync_now, SYNC_NOW_SCHEMA, SupportsResponse.OPTIONAL)
    register(DOMAIN, SERVICE_EXPORT_QUOTES, _admin_only(hass, _async_export), EXPORT_SCHEMA, SupportsResponse.OPTIONAL)
    register(DOMAIN, SERVICE_IMPORT_QUOTES, _admin_only(hass, _async_import), IMPORT_SCHEMA, SupportsResponse.OPTIONAL)


__all__ = ["async_register_services"]
