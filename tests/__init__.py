"""Tests for the Quote Sync integration."""
