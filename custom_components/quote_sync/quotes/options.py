"""Resolve config entry data and options into a typed configuration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from ..const import (
    CONF_BASE_URL,
    CONF_FETCH_LIMIT,
    CONF_PUBLISH_ENABLED,
    CONF_SYNC_ENABLED,
    CONF_SYNC_INTERVAL,
    DEFAULT_BASE_URL,
    DEFAULT_FETCH_LIMIT,
    DEFAULT_PUBLISH_ENABLED,
    DEFAULT_SYNC_ENABLED,
    DEFAULT_SYNC_INTERVAL,
    MAX_FETCH_LIMIT,
    MAX_SYNC_INTERVAL,
    MIN_SYNC_INTERVAL,
)


def _clamp_int(value: Any, default: int, minimum: int, maximum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(minimum, min(maximum, number))


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(slots=True, frozen=True)
class QuoteSyncConfig:
    """Settings for one Quote Sync config entry."""

    base_url: str = DEFAULT_BASE_URL
    sync_enabled: bool = DEFAULT_SYNC_ENABLED
    sync_interval: int = DEFAULT_SYNC_INTERVAL
    publish_enabled: bool = DEFAULT_PUBLISH_ENABLED
    fetch_limit: int = DEFAULT_FETCH_LIMIT

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> QuoteSyncConfig:
        base_url = str(values.get(CONF_BASE_URL) or "").strip().rstrip("/") or DEFAULT_BASE_URL
        return cls(
            base_url=base_url,
            sync_enabled=_as_bool(values.get(CONF_SYNC_ENABLED), DEFAULT_SYNC_ENABLED),
            sync_interval=_clamp_int(
                values.get(CONF_SYNC_INTERVAL), DEFAULT_SYNC_INTERVAL, MIN_SYNC_INTERVAL, MAX_SYNC_INTERVAL
            ),
            publish_enabled=_as_bool(values.get(CONF_PUBLISH_ENABLED), DEFAULT_PUBLISH_ENABLED),
            fetch_limit=_clamp_int(values.get(CONF_FETCH_LIMIT), DEFAULT_FETCH_LIMIT, 1, MAX_FETCH_LIMIT),
        )

    @classmethod
    def from_entry(cls, entry) -> QuoteSyncConfig:
        """Merge ``entry.data`` with ``entry.options``; options win."""

        merged = {**(getattr(entry, "data", None) or {}), **(getattr(entry, "options", None) or {})}
        return cls.from_mapping(merged)

    @property
    def interval(self) -> timedelta:
        return timedelta(seconds=self.sync_interval)

    def as_dict(self) -> dict[str, Any]:
        return {
            CONF_BASE_URL: self.base_url,
            CONF_SYNC_ENABLED: self.sync_enabled,
            CONF_SYNC_INTERVAL: self.sync_interval,
            CONF_PUBLISH_ENABLED: self.publish_enabled,
            CONF_FETCH_LIMIT: self.fetch_limit,
        }


__all__ = ["QuoteSyncConfig"]
