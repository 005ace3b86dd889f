"""
Async SQLite connection pool with aiosqlite.

Connections run in autocommit mode; write transactions are opened
explicitly with ``BEGIN IMMEDIATE`` so a read-check-write sequence holds
the write lock from its first read. A transaction opened in a task is
joined by every pool call made from that task until it ends.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.core.exceptions import DatabaseError
from src.core.interfaces.transaction import ITransactionManager

logger = get_logger(__name__)

# Connection holding the open transaction of the current task
_active_connection: ContextVar[aiosqlite.Connection | None] = ContextVar(
    "active_connection", default=None
)


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Create a new autocommit connection with WAL and foreign keys."""
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)

        # WAL lets readers proceed while a writer holds the lock
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row

        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Inside an open transaction the transaction's connection is returned,
        so reads see the transaction's own writes.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        active = _active_connection.get()
        if active is not None:
            yield active
            return

        if not self._initialized:
            await self.initialize()

        conn = await self._pool.get()
        try:
            yield conn
        except aiosqlite.Error as e:
            raise DatabaseError("query", str(e)) from e
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Open a write transaction, or join the one already open in this task.

        Commits when the outermost block exits normally, rolls back on any
        exception.
        """
        active = _active_connection.get()
        if active is not None:
            yield active
            return

        async with self.acquire() as conn:
            try:
                await conn.execute("BEGIN IMMEDIATE")
            except aiosqlite.Error as e:
                raise DatabaseError("begin", str(e)) from e

            token = _active_connection.set(conn)
            try:
                yield conn
            except aiosqlite.Error as e:
                await self._rollback(conn)
                raise DatabaseError("transaction", str(e)) from e
            except BaseException:
                await self._rollback(conn)
                raise
            else:
                try:
                    await conn.execute("COMMIT")
                except aiosqlite.Error as e:
                    await self._rollback(conn)
                    raise DatabaseError("commit", str(e)) from e
            finally:
                _active_connection.reset(token)

    @staticmethod
    async def _rollback(conn: aiosqlite.Connection) -> None:
        if conn.in_transaction:
            await conn.execute("ROLLBACK")
            logger.info("transaction_rolled_back")

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._initialized = False
            logger.info("connection_pool_closed")


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection from the global pool.

    Convenience wrapper for common usage.
    """
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection with transaction context.

    Convenience wrapper for transactional operations.
    """
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn


class SQLiteTransactionManager(ITransactionManager):
    """Transaction manager backed by the global pool."""

    def transaction(self):  # type: ignore[override]
        return get_transaction()

    def in_transaction(self) -> bool:
        return _active_connection.get() is not None
