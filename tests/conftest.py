"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import datetime
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.api.main import app
from src.application.services import reset_services
from src.config import get_settings, reset_settings
from src.core.interfaces.clock import IClock
from src.infrastructure.storage.sqlite import close_pool
from src.infrastructure.storage.sqlite.migrations import initialize_database


class FixedClock(IClock):
    """Clock that always returns the same instant."""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 15, 12, 0, 0))


@pytest_asyncio.fixture
async def ledger_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Path, None]:
    """Fresh migrated database under tmp_path, wired into settings and services."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("STORAGE_POOL_SIZE", "3")
    await close_pool()
    reset_settings()
    reset_services()

    await initialize_database(create_backup_before=False)
    yield get_settings().storage.db_path

    await close_pool()
    reset_services()
    reset_settings()


@pytest_asyncio.fixture
async def async_client(ledger_db: Path) -> AsyncGenerator[AsyncClient, None]:
    """Async test client over a fresh database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
