"""Storage infrastructure implementations."""

from src.infrastructure.storage.images import LocalImageStore
from src.infrastructure.storage.sqlite import (
    SQLiteFinanceStore,
    SQLiteItemStore,
    SQLiteOrderStore,
    SQLiteRecipeStore,
    SQLiteTransactionManager,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteItemStore",
    "SQLiteRecipeStore",
    "SQLiteOrderStore",
    "SQLiteFinanceStore",
    "SQLiteTransactionManager",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Blobs
    "LocalImageStore",
]
