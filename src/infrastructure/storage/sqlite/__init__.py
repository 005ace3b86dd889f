"""SQLite storage implementations."""

from src.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    SQLiteTransactionManager,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from src.infrastructure.storage.sqlite.finance_store import SQLiteFinanceStore
from src.infrastructure.storage.sqlite.item_store import SQLiteItemStore
from src.infrastructure.storage.sqlite.order_store import SQLiteOrderStore
from src.infrastructure.storage.sqlite.recipe_store import SQLiteRecipeStore

# Singleton instances
_item_store: SQLiteItemStore | None = None
_recipe_store: SQLiteRecipeStore | None = None
_order_store: SQLiteOrderStore | None = None
_finance_store: SQLiteFinanceStore | None = None


async def get_item_store() -> SQLiteItemStore:
    """Get singleton item store instance."""
    global _item_store
    if _item_store is None:
        _item_store = SQLiteItemStore()
    return _item_store


async def get_recipe_store() -> SQLiteRecipeStore:
    """Get singleton recipe store instance."""
    global _recipe_store
    if _recipe_store is None:
        _recipe_store = SQLiteRecipeStore()
    return _recipe_store


async def get_order_store() -> SQLiteOrderStore:
    """Get singleton order store instance."""
    global _order_store
    if _order_store is None:
        _order_store = SQLiteOrderStore()
    return _order_store


async def get_finance_store() -> SQLiteFinanceStore:
    """Get singleton finance store instance."""
    global _finance_store
    if _finance_store is None:
        _finance_store = SQLiteFinanceStore()
    return _finance_store


__all__ = [
    # Connection
    "ConnectionPool",
    "SQLiteTransactionManager",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteItemStore",
    "SQLiteRecipeStore",
    "SQLiteOrderStore",
    "SQLiteFinanceStore",
    # Factory functions
    "get_item_store",
    "get_recipe_store",
    "get_order_store",
    "get_finance_store",
]
