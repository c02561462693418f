"""HTTP client for the remote quote source."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from aiohttp import ClientError, ClientSession

from ..const import DEFAULT_BASE_URL, DEFAULT_FETCH_LIMIT, DEFAULT_REQUEST_TIMEOUT, SERVER_CATEGORY
from .errors import QuoteNetworkError
from .model import Quote

_LOGGER = logging.getLogger(__name__)

POSTS_PATH = "/posts"


class RemoteQuoteClient:
    """Fetch server quotes from, and post new quotes to, a JSON endpoint.

    The endpoint speaks the JSONPlaceholder ``/posts`` dialect: ``GET``
    returns an array of objects with a ``title`` string and ``POST`` accepts
    a JSON object.
    """

    def __init__(
        self,
        session: ClientSession,
        base_url: str = DEFAULT_BASE_URL,
        *,
        limit: int = DEFAULT_FETCH_LIMIT,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        category: str = SERVER_CATEGORY,
    ) -> None:
        self.session = session
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.limit = max(1, int(limit))
        self.timeout = timeout
        self.category = category

    @property
    def posts_url(self) -> str:
        return f"{self.base_url}{POSTS_PATH}"

    async def async_fetch_candidates(self) -> list[Quote]:
        """Return the next batch of server quotes."""

        try:
            async with asyncio.timeout(self.timeout):
                async with self.session.get(self.posts_url, headers={"Accept": "application/json"}) as resp:
                    resp.raise_for_status()
                    payload = await resp.json(content_type=None)
        except (TimeoutError, ClientError) as err:
            raise QuoteNetworkError(
                f"Fetching quotes from {self.posts_url} failed: {err or type(err).__name__}",
                reason="request_failed",
            ) from err
        except ValueError as err:
            raise QuoteNetworkError(f"Quote server returned invalid JSON: {err}", reason="invalid_json") from err

        if not isinstance(payload, Sequence) or isinstance(payload, str | bytes | bytearray):
            raise QuoteNetworkError("Quote server returned an unexpected payload", reason="unexpected_payload")
        return self._to_quotes(payload[: self.limit])

    async def async_publish(self, quote: Quote) -> None:
        """Send ``quote`` to the server; the response body is not inspected."""

        try:
            async with asyncio.timeout(self.timeout):
                async with self.session.post(self.posts_url, json=quote.to_dict()) as resp:
                    resp.raise_for_status()
        except (TimeoutError, ClientError) as err:
            raise QuoteNetworkError(
                f"Posting quote to {self.posts_url} failed: {err or type(err).__name__}",
                reason="request_failed",
            ) from err

    def _to_quotes(self, records: Sequence[Any]) -> list[Quote]:
        quotes: list[Quote] = []
        for record in records:
            title = record.get("title") if isinstance(record, dict) else None
            if not isinstance(title, str) or not title.strip():
                _LOGGER.debug("Ignoring server record without a title: %r", record)
                continue
            quotes.append(Quote(text=title, category=self.category))
        return quotes


__all__ = ["RemoteQuoteClient", "POSTS_PATH"]
