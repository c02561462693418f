import types

import pytest
from homeassistant.exceptions import HomeAssistantError

from custom_components.quote_sync import storage
from custom_components.quote_sync.const import DOMAIN


class DummyStore:
    instances: list["DummyStore"] = []

    def __init__(self, hass, version, key) -> None:  # noqa: D401 - signature mirrors Store
        self.version = version
        self.key = key
        self._data = None
        self.load_error: Exception | None = None
        self.removed = False
        DummyStore.instances.append(self)

    async def async_load(self):
        if self.load_error is not None:
            raise self.load_error
        return self._data

    async def async_save(self, data):
        self._data = data

    async def async_remove(self):
        self.removed = True
        self._data = None


@pytest.fixture
def quote_store(monkeypatch):
    DummyStore.instances.clear()
    monkeypatch.setattr(storage, "Store", DummyStore)
    return storage.QuoteStore(types.SimpleNamespace(), "entry1")


@pytest.mark.asyncio
async def test_store_key_is_scoped_to_entry(quote_store):
    backing = DummyStore.instances[-1]

    assert quote_store.key == "quote_sync.entry1"
    assert backing.key == "quote_sync.entry1"
    assert backing.version == 1


@pytest.mark.asyncio
async def test_missing_key_loads_as_none(quote_store):
    assert await quote_store.async_load("quotes") is None


@pytest.mark.asyncio
async def test_save_then_load_returns_isolated_copy(quote_store):
    value = [{"text": "a", "category": "b"}]

    assert await quote_store.async_save("quotes", value) is True
    value.append({"text": "mutated", "category": "b"})
    loaded = await quote_store.async_load("quotes")
    loaded.clear()

    assert await quote_store.async_load("quotes") == [{"text": "a", "category": "b"}]
    assert DummyStore.instances[-1]._data == {"quotes": [{"text": "a", "category": "b"}]}


@pytest.mark.asyncio
async def test_saves_keep_other_keys(quote_store):
    await quote_store.async_save("quotes", [])
    await quote_store.async_save("lastFilter", "Motivation")

    assert DummyStore.instances[-1]._data == {"quotes": [], "lastFilter": "Motivation"}


@pytest.mark.asyncio
async def test_unencodable_value_is_refused_before_writing(quote_store):
    await quote_store.async_save("lastFilter", "old")
    backing = DummyStore.instances[-1]
    written = dict(backing._data)

    assert await quote_store.async_save("lastFilter", object()) is False
    assert await quote_store.async_load("lastFilter") == "old"
    assert backing._data == written


@pytest.mark.asyncio
async def test_tuples_are_encodable(quote_store):
    assert await quote_store.async_save("quotes", ({"text": "a", "category": "b"},)) is True


@pytest.mark.asyncio
async def test_unreadable_store_starts_empty(quote_store):
    DummyStore.instances[-1].load_error = HomeAssistantError("corrupt")

    assert await quote_store.async_load("quotes") is None


@pytest.mark.asyncio
async def test_non_mapping_document_is_ignored(quote_store):
    DummyStore.instances[-1]._data = ["not", "a", "mapping"]

    assert await quote_store.async_load("quotes") is None


@pytest.mark.asyncio
async def test_remove_clears_cached_document(quote_store):
    await quote_store.async_save("quotes", [])

    await quote_store.async_remove()

    assert DummyStore.instances[-1].removed is True
    assert await quote_store.async_load("quotes") is None


def test_session_cache_survives_new_instances_for_same_entry():
    hass = types.SimpleNamespace(data={})

    storage.SessionCache.for_entry(hass, "entry1").set("lastQuote", {"text": "a", "category": "b"})

    assert storage.SessionCache.for_entry(hass, "entry1").get("lastQuote") == {"text": "a", "category": "b"}
    assert storage.SessionCache.for_entry(hass, "entry2").get("lastQuote") is None
    assert "entry1" in hass.data[DOMAIN][storage.SESSION_DATA_KEY]


def test_session_cache_copies_values():
    cache = storage.SessionCache()
    value = {"text": "a", "category": "b"}

    cache.set("lastQuote", value)
    value["text"] = "changed"
    cache.get("lastQuote")["text"] = "changed again"

    assert cache.get("lastQuote") == {"text": "a", "category": "b"}
    assert cache.pop("lastQuote") == {"text": "a", "category": "b"}
    assert cache.get("lastQuote") is None
