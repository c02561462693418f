from __future__ import annotations

import asyncio
from collections.abc import Callable
from copy import deepcopy
from typing import Any

import pytest
from homeassistant.config_entries import ConfigEntryState
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.quote_sync.const import DEFAULT_NAME, DOMAIN
from custom_components.quote_sync.quotes import Quote, QuoteCollection, QuoteNetworkError, QuoteSyncConfig
from custom_components.quote_sync.storage import SessionCache

ENTRY_ID = "quote_sync_test_entry"


class FakeStore:
    """In-memory stand-in for :class:`QuoteStore`."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = deepcopy(data) if data else {}
        self.fail_saves = False
        self.saves: list[tuple[str, Any]] = []

    async def async_load(self, key: str) -> Any | None:
        value = self.data.get(key)
        return deepcopy(value) if value is not None else None

    async def async_save(self, key: str, value: Any) -> bool:
        if self.fail_saves:
            return False
        self.saves.append((key, deepcopy(value)))
        self.data[key] = deepcopy(value)
        return True


class FakeClient:
    """Remote client double; set ``gate`` to hold fetches until released."""

    def __init__(self, batches: list[list[Quote]] | None = None) -> None:
        self.batches = list(batches or [])
        self.error: Exception | None = None
        self.publish_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.fetch_calls = 0
        self.published: list[Quote] = []

    async def async_fetch_candidates(self) -> list[Quote]:
        self.fetch_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.batches.pop(0) if self.batches else []

    async def async_publish(self, quote: Quote) -> None:
        if self.publish_error is not None:
            raise self.publish_error
        self.published.append(quote)


class FakeScheduler:
    """Collects delayed callbacks so tests decide when they fire."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def __call__(self, delay: float, action: Callable[[], None]) -> Callable[[], None]:
        call = {"delay": delay, "action": action, "cancelled": False}
        self.calls.append(call)

        def _cancel() -> None:
            call["cancelled"] = True

        return _cancel

    @property
    def pending(self) -> list[dict[str, Any]]:
        return [call for call in self.calls if not call["cancelled"] and "fired" not in call]

    def fire(self) -> None:
        for call in self.pending:
            call["fired"] = True
            call["action"]()


class FirstChoice:
    """RNG that always picks the first candidate."""

    def randrange(self, stop: int) -> int:
        return 0


def network_error() -> QuoteNetworkError:
    return QuoteNetworkError("server unreachable", reason="request_failed")


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def session_cache() -> SessionCache:
    return SessionCache()


@pytest.fixture
async def collection(fake_store, session_cache) -> QuoteCollection:
    quotes = QuoteCollection(fake_store, session_cache, rng=FirstChoice())
    await quotes.async_initialize()
    return quotes


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


def build_entry(config: QuoteSyncConfig | None = None) -> MockConfigEntry:
    return MockConfigEntry(
        domain=DOMAIN,
        title=DEFAULT_NAME,
        unique_id=DOMAIN,
        entry_id=ENTRY_ID,
        data=(config or QuoteSyncConfig(sync_enabled=False)).as_dict(),
    )


@pytest.fixture
def config_entry() -> MockConfigEntry:
    return build_entry()


@pytest.fixture
async def loaded_entry(hass, enable_custom_integrations, aioclient_mock, config_entry):
    """Set up the integration and unload it again after the test."""

    config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(config_entry.entry_id)
    await hass.async_block_till_done()
    yield config_entry
    if config_entry.state is ConfigEntryState.LOADED:
        assert await hass.config_entries.async_unload(config_entry.entry_id)
        await hass.async_block_till_done()
