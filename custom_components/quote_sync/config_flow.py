from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult
from homeassistant.core import callback
from homeassistant.helpers import config_validation as cv

from .const import (
    CONF_BASE_URL,
    CONF_FETCH_LIMIT,
    CONF_PUBLISH_ENABLED,
    CONF_SYNC_ENABLED,
    CONF_SYNC_INTERVAL,
    DEFAULT_NAME,
    DOMAIN,
    MAX_FETCH_LIMIT,
    MAX_SYNC_INTERVAL,
    MIN_SYNC_INTERVAL,
)
from .quotes import QuoteSyncConfig

_LOGGER = logging.getLogger(__name__)


def _settings_schema(defaults: QuoteSyncConfig) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_BASE_URL, default=defaults.base_url): str,
            vol.Required(CONF_SYNC_ENABLED, default=defaults.sync_enabled): bool,
            vol.Required(CONF_SYNC_INTERVAL, default=defaults.sync_interval): vol.All(
                vol.Coerce(int), vol.Range(min=MIN_SYNC_INTERVAL, max=MAX_SYNC_INTERVAL)
            ),
            vol.Required(CONF_PUBLISH_ENABLED, default=defaults.publish_enabled): bool,
            vol.Required(CONF_FETCH_LIMIT, default=defaults.fetch_limit): vol.All(
                vol.Coerce(int), vol.Range(min=1, max=MAX_FETCH_LIMIT)
            ),
        }
    )


def _validate(user_input: dict[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    try:
        cv.url(str(user_input.get(CONF_BASE_URL, "")).strip())
    except vol.Invalid:
        errors[CONF_BASE_URL] = "invalid_url"
    return errors


class QuoteSyncConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Create the single Quote Sync entry."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None) -> ConfigFlowResult:
        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        errors: dict[str, str] = {}
        defaults = QuoteSyncConfig()
        if user_input is not None:
            errors = _validate(user_input)
            if not errors:
                config = QuoteSyncConfig.from_mapping(user_input)
                return self.async_create_entry(title=DEFAULT_NAME, data=config.as_dict())
            defaults = QuoteSyncConfig.from_mapping(user_input)

        return self.async_show_form(step_id="user", data_schema=_settings_schema(defaults), errors=errors)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: config_entries.ConfigEntry) -> QuoteSyncOptionsFlow:
        return QuoteSyncOptionsFlow()


class QuoteSyncOptionsFlow(config_entries.OptionsFlow):
    """Edit the sync settings of an existing entry."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None) -> ConfigFlowResult:
        errors: dict[str, str] = {}
        defaults = QuoteSyncConfig.from_entry(self.config_entry)
        if user_input is not None:
            errors = _validate(user_input)
            if not errors:
                _LOGGER.debug("Updating Quote Sync options for %s", self.config_entry.entry_id)
                return self.async_create_entry(title="", data=QuoteSyncConfig.from_mapping(user_input).as_dict())
            defaults = QuoteSyncConfig.from_mapping(user_input)

        return self.async_show_form(step_id="init", data_schema=_settings_schema(defaults), errors=errors)
