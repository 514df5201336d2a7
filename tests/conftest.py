"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timezone

import pytest

# Set test environment variables before any imports that might use them
os.environ.setdefault("WIDGET_TIMEZONE", "UTC")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Wednesday
NOW = datetime(2024, 5, 15, 13, 45, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def utc_widget_timezone(monkeypatch):
    """Resolve time expressions in UTC unless a test passes its own timezone."""
    from util.time_parsers import timezone as widget_timezone

    monkeypatch.setattr(widget_timezone, "WIDGET_TIMEZONE", "UTC")
    widget_timezone.get_timezone.cache_clear()
    yield
    widget_timezone.get_timezone.cache_clear()


@pytest.fixture
def now():
    """Fixed reference point for relative time expressions."""
    return NOW
