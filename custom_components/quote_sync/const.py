from __future__ import annotations

from typing import Final

from homeassistant.const import Platform

DOMAIN = "quote_sync"
PLATFORMS: list[Platform] = [
    Platform.SENSOR,
    Platform.SELECT,
]

CONF_BASE_URL = "base_url"
CONF_SYNC_ENABLED = "sync_enabled"
CONF_SYNC_INTERVAL = "sync_interval"
CONF_PUBLISH_ENABLED = "publish_enabled"
CONF_FETCH_LIMIT = "fetch_limit"

DEFAULT_NAME = "Quote Sync"
DEFAULT_BASE_URL = "https://jsonplaceholder.typicode.com"
DEFAULT_SYNC_ENABLED = True
DEFAULT_SYNC_INTERVAL = 30  # seconds
MIN_SYNC_INTERVAL = 5
MAX_SYNC_INTERVAL = 3600
DEFAULT_PUBLISH_ENABLED = False
DEFAULT_FETCH_LIMIT = 3
MAX_FETCH_LIMIT = 20
DEFAULT_REQUEST_TIMEOUT = 30  # seconds
STATUS_DISPLAY_SECONDS = 3

STORAGE_VERSION = 1
STORAGE_KEY_FMT = "quote_sync.{entry_id}"

# Keys inside the persisted document and the session cache.
KEY_QUOTES: Final = "quotes"
KEY_LAST_FILTER: Final = "lastFilter"
KEY_LAST_QUOTE: Final = "lastQuote"

ALL_CATEGORIES: Final = "all"
SERVER_CATEGORY: Final = "Server"

SEED_QUOTES: tuple[dict[str, str], ...] = (
    {
        "text": "The best way to get started is to quit talking and begin doing.",
        "category": "Motivation",
    },
    {
        "text": "Don't let yesterday take up too much of today.",
        "category": "Inspiration",
    },
    {
        "text": "It's not whether you get knocked down, it's whether you get up.",
        "category": "Perseverance",
    },
)

NO_QUOTES_MESSAGE = "No quotes available for this category."
DEFAULT_EXPORT_PATH = "quotes.json"

SERVICE_ADD_QUOTE = "add_quote"
SERVICE_PICK_RANDOM = "pick_random"
SERVICE_SET_FILTER = "set_filter"
SERVICE_SYNC_NOW = "sync_now"
SERVICE_EXPORT_QUOTES = "export_quotes"
SERVICE_IMPORT_QUOTES = "import_quotes"

ATTR_ENTRY_ID = "entry_id"
ATTR_TEXT = "text"
ATTR_CATEGORY = "category"
ATTR_PATH = "path"
ATTR_DOCUMENT = "document"
