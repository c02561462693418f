"""Export quotes to JSON documents and read them back."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from .errors import QuoteFormatError
from .model import Quote, parse_records, serialise

_LOGGER = logging.getLogger(__name__)


def export_document(quotes: Iterable[Quote]) -> str:
    """Return ``quotes`` as a pretty-printed JSON array."""

    return json.dumps(serialise(quotes), indent=2, ensure_ascii=False)


def import_document(text: str | bytes) -> list[Quote]:
    """Parse an exported document and return the quotes it holds.

    Elements without a non-empty ``text`` and ``category`` are skipped; the
    import only fails when the document is unreadable, is not a list, or
    holds no usable quote at all.
    """

    if isinstance(text, bytes | bytearray):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as err:
            raise QuoteFormatError(f"Document is not valid UTF-8: {err}", reason="invalid_encoding") from err
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as err:
        raise QuoteFormatError(f"Invalid JSON: {err.msg}", reason="invalid_json") from err
    if not isinstance(payload, list):
        raise QuoteFormatError("Invalid format: expected a list of quotes", reason="not_a_list")

    quotes, dropped = parse_records(payload)
    if dropped:
        _LOGGER.debug("Skipped %d malformed entries while importing quotes", dropped)
    if not quotes:
        raise QuoteFormatError("Document contains no valid quotes", reason="no_valid_quotes")
    return quotes


__all__ = ["export_document", "import_document"]
