"""Quote collection, remote client and sync engine."""

from .codec import export_document, import_document
from .collection import CategoryView, QuoteCollection
from .engine import SyncEngine, SyncStatus
from .errors import (
    QuoteFormatError,
    QuoteNetworkError,
    QuotePersistenceError,
    QuoteSyncError,
    QuoteValidationError,
)
from .model import Quote
from .options import QuoteSyncConfig
from .remote import RemoteQuoteClient

__all__ = [
    "CategoryView",
    "Quote",
    "QuoteCollection",
    "QuoteFormatError",
    "QuoteNetworkError",
    "QuotePersistenceError",
    "QuoteSyncConfig",
    "QuoteSyncError",
    "QuoteValidationError",
    "RemoteQuoteClient",
    "SyncEngine",
    "SyncStatus",
    "export_document",
    "import_document",
]
