"""Reconcile the local quote collection with the remote quote source."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..const import STATUS_DISPLAY_SECONDS
from ..utils.logging import clear_warning, warn_once
from .errors import QuoteSyncError
from .model import Quote

if TYPE_CHECKING:
    from .collection import QuoteCollection
    from .remote import RemoteQuoteClient

_LOGGER = logging.getLogger(__name__)

CallLater = Callable[[float, Callable[[], None]], Callable[[], None]]

_FETCH_WARNING = "quote_sync_fetch"
_PUBLISH_WARNING = "quote_sync_publish"


class SyncStatus(str, Enum):
    """Lifecycle of a sync cycle as shown to the user."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


STATUS_MESSAGES: dict[SyncStatus, str] = {
    SyncStatus.IDLE: "",
    SyncStatus.IN_PROGRESS: "Syncing with server...",
    SyncStatus.SUCCEEDED: "Sync complete. Server data synced.",
    SyncStatus.FAILED: "Sync failed. Please check your connection.",
}
PUBLISH_OK_MESSAGE = "Quote posted to server."
PUBLISH_FAILED_MESSAGE = "Quote saved locally but could not be posted to the server."


def _loop_call_later(delay: float, action: Callable[[], None]) -> Callable[[], None]:
    handle = asyncio.get_running_loop().call_later(delay, action)
    return handle.cancel


class SyncEngine:
    """Pull server quotes into a :class:`QuoteCollection`.

    Conflicts are settled per source: every fetch replaces all quotes tagged
    with the server category and never touches user quotes. Only one fetch
    runs at a time; overlapping requests are skipped rather than queued.
    """

    def __init__(
        self,
        collection: QuoteCollection,
        client: RemoteQuoteClient,
        *,
        call_later: CallLater | None = None,
        revert_delay: float = STATUS_DISPLAY_SECONDS,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.collection = collection
        self.client = client
        self.revert_delay = revert_delay
        self._call_later = call_later or _loop_call_later
        self._now = now or (lambda: datetime.now(tz=UTC))
        self._cancel_revert: Callable[[], None] | None = None
        self._listeners: list[Callable[[], None]] = []
        self._in_flight = False
        self.state = SyncStatus.IDLE
        self.message = STATUS_MESSAGES[SyncStatus.IDLE]
        self.last_success_at: datetime | None = None
        self.last_error: str | None = None
        self.last_publish_error: str | None = None
        self.success_count = 0
        self.failure_count = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    # ------------------------------------------------------------------
    async def async_sync(self) -> bool:
        """Run one reconciliation cycle.

        Returns ``True`` when server quotes were merged, ``False`` when the
        cycle failed or was skipped because another one is still running.
        """

        if self._in_flight:
            _LOGGER.debug("Quote sync already in progress; skipping")
            return False
        self._in_flight = True
        self._set_status(SyncStatus.IN_PROGRESS)
        try:
            candidates = await self.client.async_fetch_candidates()
            await self.collection.async_replace_server_derived(candidates)
        except asyncio.CancelledError:
            self._in_flight = False
            self._set_status(SyncStatus.IDLE)
            raise
        except QuoteSyncError as err:
            self._in_flight = False
            warn_once(_LOGGER, _FETCH_WARNING, "Quote sync failed: %s", err)
            self._record_failure(err)
            return False
        except Exception as err:
            self._in_flight = False
            _LOGGER.exception("Unexpected error while syncing quotes")
            self._record_failure(err)
            return False

        self._in_flight = False
        clear_warning(_FETCH_WARNING)
        self.last_success_at = self._now()
        self.last_error = None
        self.success_count += 1
        self._set_status(SyncStatus.SUCCEEDED)
        return True

    async def async_publish(self, quote: Quote) -> bool:
        """Push a freshly added quote; failures only change the status text."""

        try:
            await self.client.async_publish(quote)
        except QuoteSyncError as err:
            warn_once(_LOGGER, _PUBLISH_WARNING, "Could not post quote to server: %s", err)
            self.last_publish_error = str(err)
            if not self._in_flight:
                self._set_status(SyncStatus.FAILED, PUBLISH_FAILED_MESSAGE)
            return False

        clear_warning(_PUBLISH_WARNING)
        self.last_publish_error = None
        if not self._in_flight:
            self._set_status(SyncStatus.SUCCEEDED, PUBLISH_OK_MESSAGE)
        return True

    async def async_shutdown(self) -> None:
        self._cancel_pending_revert()
        self._listeners.clear()

    # ------------------------------------------------------------------
    def async_add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def status(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "message": self.message,
            "in_flight": self._in_flight,
            "last_success_at": self.last_success_at.isoformat() if self.last_success_at else None,
            "last_error": self.last_error,
            "last_publish_error": self.last_publish_error,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
        }

    # ------------------------------------------------------------------
    def _record_failure(self, err: BaseException) -> None:
        self.last_error = str(err) or type(err).__name__
        self.failure_count += 1
        self._set_status(SyncStatus.FAILED)

    def _set_status(self, state: SyncStatus, message: str | None = None) -> None:
        self._cancel_pending_revert()
        self.state = state
        self.message = STATUS_MESSAGES[state] if message is None else message
        if state in (SyncStatus.SUCCEEDED, SyncStatus.FAILED):
            self._cancel_revert = self._call_later(self.revert_delay, self._revert_to_idle)
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:  # pragma: no cover - listener bugs must not break syncing
                _LOGGER.exception("Error in sync status listener %s", listener)

    def _revert_to_idle(self) -> None:
        self._cancel_revert = None
        if self._in_flight:
            return
        self._set_status(SyncStatus.IDLE)

    def _cancel_pending_revert(self) -> None:
        if self._cancel_revert is not None:
            self._cancel_revert()
            self._cancel_revert = None


__all__ = [
    "CallLater",
    "PUBLISH_FAILED_MESSAGE",
    "PUBLISH_OK_MESSAGE",
    "STATUS_MESSAGES",
    "SyncEngine",
    "SyncStatus",
]
