"""Fixtures for service unit tests with mocked stores."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from src.core.interfaces.transaction import ITransactionManager


class FakeTransactionManager(ITransactionManager):
    """Counts commits and rollbacks instead of touching a database."""

    def __init__(self):
        self.depth = 0
        self.committed = 0
        self.rolled_back = 0

    @asynccontextmanager
    async def transaction(self):
        self.depth += 1
        try:
            yield None
        except BaseException:
            self.rolled_back += 1
            raise
        else:
            self.committed += 1
        finally:
            self.depth -= 1

    def in_transaction(self) -> bool:
        return self.depth > 0


def _echo(entity):
    return entity


@pytest.fixture
def tx_manager() -> FakeTransactionManager:
    return FakeTransactionManager()


@pytest.fixture
def mock_item_store():
    store = AsyncMock()
    store.update_item.side_effect = _echo
    return store


@pytest.fixture
def mock_recipe_store():
    store = AsyncMock()
    store.update_recipe.side_effect = _echo
    return store


@pytest.fixture
def mock_order_store():
    return AsyncMock()


@pytest.fixture
def mock_finance_store():
    return AsyncMock()
