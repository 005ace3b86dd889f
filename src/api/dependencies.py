"""
Dependency injection for FastAPI.

Route handlers receive ledger services through these functions; tests
replace them with ``app.dependency_overrides``.
"""

from src.application.services import (
    get_financial_ledger_service,
    get_item_catalog_service,
    get_order_processor_service,
    get_recipe_costing_service,
    get_stock_ledger_service,
)
from src.config import Settings, get_settings
from src.core.services import (
    FinancialLedgerService,
    ItemCatalogService,
    OrderProcessorService,
    RecipeCostingService,
    StockLedgerService,
)


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


def get_item_catalog() -> ItemCatalogService:
    """Get item catalog service."""
    return get_item_catalog_service()


def get_stock_ledger() -> StockLedgerService:
    """Get stock ledger service."""
    return get_stock_ledger_service()


def get_recipe_costing() -> RecipeCostingService:
    """Get recipe costing service."""
    return get_recipe_costing_service()


def get_order_processor() -> OrderProcessorService:
    """Get order processor service."""
    return get_order_processor_service()


def get_financial_ledger() -> FinancialLedgerService:
    """Get financial ledger service."""
    return get_financial_ledger_service()
