"""Utility helpers for the Quote Sync integration."""

__all__: list[str] = []
