"""Tests for the SQLite connection pool and transactions."""

from pathlib import Path

import pytest

from src.core.entities.item import Item
from src.core.exceptions import ConcurrentModificationError, DatabaseError
from src.infrastructure.storage.sqlite import SQLiteItemStore, SQLiteTransactionManager
from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPool:
    def test_defaults(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "x.db")
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False

    async def test_initialize_and_close(self, tmp_path: Path):
        pool = ConnectionPool(tmp_path / "x.db", pool_size=2)
        await pool.initialize()
        try:
            assert len(pool._connections) == 2
            async with pool.acquire() as conn:
                cursor = await conn.execute("PRAGMA foreign_keys")
                row = await cursor.fetchone()
                assert row[0] == 1
        finally:
            await pool.close()
        assert pool._connections == []

    async def test_global_pool_uses_settings(self, ledger_db: Path):
        pool = await get_pool()
        assert pool.db_path == ledger_db
        assert pool.pool_size == 3


class TestTransactions:
    async def test_commit_is_visible(self, ledger_db):
        store = SQLiteItemStore()
        async with get_transaction():
            item = await store.create_item(Item(name="Flour"))

        assert await store.get_item(item.id) is not None

    async def test_rollback_on_error(self, ledger_db):
        store = SQLiteItemStore()
        with pytest.raises(RuntimeError):
            async with get_transaction():
                await store.create_item(Item(name="Flour"))
                raise RuntimeError("abort")

        assert await store.list_items() == []

    async def test_nested_calls_join_open_transaction(self, ledger_db):
        async with get_transaction() as outer:
            async with get_transaction() as inner:
                assert inner is outer
            async with get_connection() as conn:
                assert conn is outer

    async def test_reads_see_own_writes(self, ledger_db):
        store = SQLiteItemStore()
        async with get_transaction():
            item = await store.create_item(Item(name="Flour"))
            fetched = await store.get_item(item.id)
            assert fetched is not None

    async def test_conflict_inside_transaction_rolls_back(self, ledger_db):
        store = SQLiteItemStore()
        item = await store.create_item(Item(name="Flour"))
        stale = item.model_copy()

        with pytest.raises(ConcurrentModificationError):
            async with get_transaction():
                await store.create_item(Item(name="Sugar"))
                await store.update_item(item)
                await store.update_item(stale)

        names = [i.name for i in await store.list_items()]
        assert names == ["Flour"]


class TestDatabaseErrors:
    async def test_constraint_failure_rolls_back_as_database_error(self, ledger_db):
        store = SQLiteItemStore()

        with pytest.raises(DatabaseError) as exc_info:
            async with get_transaction() as conn:
                await store.create_item(Item(name="Flour"))
                await conn.execute(
                    "INSERT INTO items (name, quantity, created_at, updated_at) "
                    "VALUES ('Sugar', -1, '2024-01-01', '2024-01-01')"
                )

        assert exc_info.value.code == "DATABASE_ERROR"
        assert exc_info.value.details["operation"] == "transaction"
        assert await store.list_items() == []

    async def test_failed_read_is_database_error(self, ledger_db):
        with pytest.raises(DatabaseError) as exc_info:
            async with get_connection() as conn:
                await conn.execute("SELECT * FROM no_such_table")

        assert exc_info.value.details["operation"] == "query"

    async def test_connection_returns_to_pool_after_error(self, ledger_db):
        pool = await get_pool()
        with pytest.raises(DatabaseError):
            async with pool.acquire() as conn:
                await conn.execute("SELECT * FROM no_such_table")

        assert pool._pool.qsize() == pool.pool_size


class TestTransactionManager:
    async def test_in_transaction(self, ledger_db):
        manager = SQLiteTransactionManager()
        assert manager.in_transaction() is False
        async with manager.transaction():
            assert manager.in_transaction() is True
        assert manager.in_transaction() is False
