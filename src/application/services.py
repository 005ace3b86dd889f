"""
Service factory functions for dependency injection.

This module wires the SQLite stores, the transaction manager, the clock
and the image store into the ledger services. API dependencies import from here.
"""

from typing import TYPE_CHECKING

from src.core.services import (
    FinancialLedgerService,
    ItemCatalogService,
    OrderProcessorService,
    RecipeCostingService,
    StockLedgerService,
)

if TYPE_CHECKING:
    from src.core.interfaces import IClock, IImageStore


# Singleton service instances
_item_catalog_service: ItemCatalogService | None = None
_recipe_costing_service: RecipeCostingService | None = None
_stock_ledger_service: StockLedgerService | None = None
_financial_ledger_service: FinancialLedgerService | None = None
_order_processor_service: OrderProcessorService | None = None


def _transaction_manager():
    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage.sqlite import SQLiteTransactionManager

    return SQLiteTransactionManager()


def _system_clock() -> "IClock":
    from src.infrastructure.clock import SystemClock

    return SystemClock()


def get_item_catalog_service(clock: "IClock | None" = None) -> ItemCatalogService:
    """Get or create the ItemCatalogService."""
    global _item_catalog_service

    if _item_catalog_service is not None and clock is None:
        return _item_catalog_service

    from src.infrastructure.storage.sqlite import SQLiteItemStore

    service = ItemCatalogService(
        transaction_manager=_transaction_manager(),
        item_store=SQLiteItemStore(),
        clock=clock or _system_clock(),
    )
    if clock is None:
        _item_catalog_service = service
    return service


def get_recipe_costing_service(
    image_store: "IImageStore | None" = None,
) -> RecipeCostingService:
    """
    Get or create the RecipeCostingService.

    The image store defaults to local files under the data directory.
    """
    global _recipe_costing_service

    if _recipe_costing_service is not None and image_store is None:
        return _recipe_costing_service

    from src.infrastructure.storage.images import LocalImageStore
    from src.infrastructure.storage.sqlite import SQLiteItemStore, SQLiteRecipeStore

    service = RecipeCostingService(
        transaction_manager=_transaction_manager(),
        recipe_store=SQLiteRecipeStore(),
        item_store=SQLiteItemStore(),
        image_store=image_store or LocalImageStore(),
        clock=_system_clock(),
    )
    if image_store is None:
        _recipe_costing_service = service
    return service


def get_stock_ledger_service() -> StockLedgerService:
    """Get or create the StockLedgerService, wired to re-cost recipes."""
    global _stock_ledger_service

    if _stock_ledger_service is None:
        from src.infrastructure.storage.sqlite import SQLiteItemStore

        _stock_ledger_service = StockLedgerService(
            transaction_manager=_transaction_manager(),
            item_store=SQLiteItemStore(),
            clock=_system_clock(),
            recipe_costing=get_recipe_costing_service(),
        )
    return _stock_ledger_service


def get_financial_ledger_service() -> FinancialLedgerService:
    """Get or create the FinancialLedgerService."""
    global _financial_ledger_service

    if _financial_ledger_service is None:
        from src.infrastructure.storage.sqlite import SQLiteFinanceStore

        _financial_ledger_service = FinancialLedgerService(
            transaction_manager=_transaction_manager(),
            finance_store=SQLiteFinanceStore(),
            clock=_system_clock(),
        )
    return _financial_ledger_service


def get_order_processor_service() -> OrderProcessorService:
    """Get or create the OrderProcessorService."""
    global _order_processor_service

    if _order_processor_service is None:
        from src.infrastructure.storage.sqlite import (
            SQLiteItemStore,
            SQLiteOrderStore,
            SQLiteRecipeStore,
        )

        _order_processor_service = OrderProcessorService(
            transaction_manager=_transaction_manager(),
            order_store=SQLiteOrderStore(),
            recipe_store=SQLiteRecipeStore(),
            item_store=SQLiteItemStore(),
            stock_ledger=get_stock_ledger_service(),
            financial_ledger=get_financial_ledger_service(),
            clock=_system_clock(),
        )
    return _order_processor_service


def reset_services() -> None:
    """Reset all singleton services (for testing)."""
    global _item_catalog_service, _recipe_costing_service, _stock_ledger_service
    global _financial_ledger_service, _order_processor_service

    _item_catalog_service = None
    _recipe_costing_service = None
    _stock_ledger_service = None
    _financial_ledger_service = None
    _order_processor_service = None


__all__ = [
    "get_item_catalog_service",
    "get_recipe_costing_service",
    "get_stock_ledger_service",
    "get_financial_ledger_service",
    "get_order_processor_service",
    "reset_services",
]
