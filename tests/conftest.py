"""
Pytest configuration and fixtures.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "sqlite")

from core.config import Settings  # noqa: E402
from core.storage import open_record_store  # noqa: E402


class FakeClock:
    """Deterministic clock; advances only when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing the SQLite backend at a per-test database file."""
    return Settings(
        storage_backend="sqlite",
        sqlite_path=str(tmp_path / "data" / "messages.db"),
        message_store_name="messages",
        environment="development",
        debug=False,
    )


@pytest_asyncio.fixture
async def store(test_settings):
    """An open SQLite record store, closed after the test."""
    async with open_record_store(test_settings) as record_store:
        yield record_store


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc))
