from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import QuoteValidationError


@dataclass(frozen=True, slots=True)
class Quote:
    """A short piece of text tagged with a category."""

    text: str
    category: str

    @classmethod
    def create(cls, text: Any, category: Any) -> Quote:
        """Return a quote built from user input, stripping both fields."""

        clean_text = text.strip() if isinstance(text, str) else ""
        clean_category = category.strip() if isinstance(category, str) else ""
        if not clean_text:
            raise QuoteValidationError("Quote text must not be empty", reason="missing_text")
        if not clean_category:
            raise QuoteValidationError("Quote category must not be empty", reason="missing_category")
        return cls(text=clean_text, category=clean_category)

    @classmethod
    def from_record(cls, record: Any) -> Quote | None:
        """Return a quote for a stored or imported record, ``None`` if invalid.

        Values are kept verbatim so that exported documents import back
        unchanged; only the emptiness check ignores surrounding whitespace.
        """

        if not isinstance(record, Mapping):
            return None
        text = record.get("text")
        category = record.get("category")
        if not isinstance(text, str) or not text.strip():
            return None
        if not isinstance(category, str) or not category.strip():
            return None
        return cls(text=text, category=category)

    def to_dict(self) -> dict[str, str]:
        return {"text": self.text, "category": self.category}


def parse_records(records: Iterable[Any]) -> tuple[list[Quote], int]:
    """Return the valid quotes in ``records`` and the number dropped."""

    quotes: list[Quote] = []
    dropped = 0
    for record in records:
        quote = Quote.from_record(record)
        if quote is None:
            dropped += 1
            continue
        quotes.append(quote)
    return quotes, dropped


def validate_collection(payload: Any) -> list[Quote] | None:
    """Return the quotes in a stored payload, or ``None`` if any part is invalid."""

    if not isinstance(payload, Sequence) or isinstance(payload, str | bytes | bytearray):
        return None
    quotes, dropped = parse_records(payload)
    if dropped:
        return None
    return quotes


def serialise(quotes: Iterable[Quote]) -> list[dict[str, str]]:
    return [quote.to_dict() for quote in quotes]


__all__ = ["Quote", "parse_records", "serialise", "validate_collection"]
