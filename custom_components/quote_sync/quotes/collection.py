"""In-memory quote collection with write-through persistence."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator, Callable, Iterable, Iterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from ..const import (
    ALL_CATEGORIES,
    KEY_LAST_FILTER,
    KEY_LAST_QUOTE,
    KEY_QUOTES,
    SEED_QUOTES,
    SERVER_CATEGORY,
)
from .codec import import_document
from .errors import QuotePersistenceError, QuoteValidationError
from .model import Quote, serialise, validate_collection

if TYPE_CHECKING:
    from ..storage import QuoteStore, SessionCache

_LOGGER = logging.getLogger(__name__)


class CategoryView:
    """Distinct categories of a collection in first-seen order.

    Every iteration walks the collection afresh, so the view can be
    iterated repeatedly and always reflects the latest quotes.
    """

    def __init__(self, collection: QuoteCollection) -> None:
        self._collection = collection

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for quote in self._collection.quotes:
            if quote.category in seen:
                continue
            seen.add(quote.category)
            yield quote.category

    def __contains__(self, category: object) -> bool:
        return any(quote.category == category for quote in self._collection.quotes)

    def __repr__(self) -> str:
        return f"CategoryView({list(self)!r})"


class QuoteCollection:
    """Ordered quotes owned by one config entry."""

    def __init__(
        self,
        store: QuoteStore,
        session: SessionCache,
        *,
        rng: random.Random | None = None,
        server_category: str = SERVER_CATEGORY,
    ) -> None:
        self.store = store
        self.session = session
        self.server_category = server_category
        self._rng = rng or random.Random()
        self._quotes: list[Quote] = []
        self._filter = ALL_CATEGORIES
        self._lock = asyncio.Lock()
        self._listeners: list[Callable[[], None]] = []

    # ------------------------------------------------------------------
    @property
    def quotes(self) -> tuple[Quote, ...]:
        return tuple(self._quotes)

    @property
    def filter(self) -> str:
        return self._filter

    @property
    def current(self) -> Quote | None:
        """Return the quote last picked for display in this session."""

        return Quote.from_record(self.session.get(KEY_LAST_QUOTE))

    def __len__(self) -> int:
        return len(self._quotes)

    def __iter__(self) -> Iterator[Quote]:
        return iter(tuple(self._quotes))

    def categories(self) -> CategoryView:
        return CategoryView(self)

    def server_quotes(self) -> list[Quote]:
        return [quote for quote in self._quotes if quote.category == self.server_category]

    # ------------------------------------------------------------------
    def async_add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register ``listener`` for change notifications; returns an unsubscribe."""

        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:  # pragma: no cover - listener bugs must not break mutations
                _LOGGER.exception("Error in quote collection listener %s", listener)

    @asynccontextmanager
    async def _async_transaction(self) -> AsyncIterator[list[Quote]]:
        """Yield a working copy of the quotes and persist it on a clean exit.

        The copy only replaces the live collection once the store confirms
        the write, so a failure at any point leaves the last good state.
        """

        async with self._lock:
            working = list(self._quotes)
            yield working
            if not await self.store.async_save(KEY_QUOTES, serialise(working)):
                raise QuotePersistenceError("Could not save quotes", reason="store_write_failed")
            self._quotes = working
        self._notify()

    # ------------------------------------------------------------------
    async def async_initialize(self) -> None:
        """Load quotes and the saved filter from the store, seeding if needed."""

        payload = await self.store.async_load(KEY_QUOTES)
        quotes = validate_collection(payload) if payload is not None else None
        if quotes is None:
            if payload is not None:
                _LOGGER.warning("Stored quotes failed validation; restoring the default set")
            seed = [Quote(**item) for item in SEED_QUOTES]
            if not await self.store.async_save(KEY_QUOTES, serialise(seed)):
                _LOGGER.warning("Could not persist the default quote set")
            quotes = seed
        self._quotes = quotes

        stored_filter = await self.store.async_load(KEY_LAST_FILTER)
        if isinstance(stored_filter, str) and stored_filter.strip():
            self._filter = stored_filter.strip()
        else:
            self._filter = ALL_CATEGORIES
        _LOGGER.debug("Loaded %d quotes (filter=%s)", len(self._quotes), self._filter)

    async def async_add(self, text: Any, category: Any) -> Quote:
        quote = Quote.create(text, category)
        async with self._async_transaction() as working:
            working.append(quote)
        return quote

    async def async_extend(self, quotes: Iterable[Quote]) -> int:
        new_quotes = list(quotes)
        if not new_quotes:
            return 0
        async with self._async_transaction() as working:
            working.extend(new_quotes)
        return len(new_quotes)

    async def async_import(self, text: str | bytes) -> list[Quote]:
        """Append the valid quotes found in an exported document."""

        imported = import_document(text)
        await self.async_extend(imported)
        _LOGGER.debug("Imported %d quotes", len(imported))
        return imported

    async def async_replace_server_derived(self, candidates: Iterable[Quote]) -> tuple[Quote, ...]:
        """Swap every server-tagged quote for ``candidates``.

        User quotes keep their relative order and come first; the new server
        quotes follow in the order they were fetched. A displayed quote that
        the merge removed is replaced by a fresh pick, or cleared when nothing
        matches the filter.
        """

        fresh = list(candidates)
        async with self._async_transaction() as working:
            kept = [quote for quote in working if quote.category != self.server_category]
            dropped = len(working) - len(kept)
            working[:] = [*kept, *fresh]
        _LOGGER.debug("Replaced %d server quotes with %d fetched quotes", dropped, len(fresh))
        current = self.current
        if current is not None and current not in self._quotes and self.pick_random() is None:
            self.session.pop(KEY_LAST_QUOTE)
            self._notify()
        return self.quotes

    # ------------------------------------------------------------------
    def filtered(self, category: str | None = None) -> list[Quote]:
        selected = self._filter if category is None else category
        if selected == ALL_CATEGORIES:
            return list(self._quotes)
        return [quote for quote in self._quotes if quote.category == selected]

    def pick_random(self, category: str | None = None) -> Quote | None:
        """Return a random quote for ``category`` (default: the saved filter).

        ``None`` means nothing matches the filter.
        """

        candidates = self.filtered(category)
        if not candidates:
            return None
        quote = candidates[self._rng.randrange(len(candidates))]
        self.session.set(KEY_LAST_QUOTE, quote.to_dict())
        self._notify()
        return quote

    async def async_set_filter(self, category: Any) -> str:
        value = category.strip() if isinstance(category, str) else ""
        if not value:
            raise QuoteValidationError("Filter category must not be empty", reason="missing_category")
        if not await self.store.async_save(KEY_LAST_FILTER, value):
            raise QuotePersistenceError("Could not save the category filter", reason="store_write_failed")
        self._filter = value
        self._notify()
        return value


__all__ = ["CategoryView", "QuoteCollection"]
