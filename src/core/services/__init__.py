"""Core ledger services."""

from src.core.services.base import TransactionalService
from src.core.services.costing import (
    RecipeCosting,
    RestockCost,
    aggregate_requirements,
    compute_recipe_costing,
    order_total,
    weighted_average_cost,
)
from src.core.services.financial_ledger import FinancialLedgerService
from src.core.services.item_catalog import ItemCatalogService
from src.core.services.order_processor import OrderProcessorService
from src.core.services.recipe_costing import RecipeCostingService
from src.core.services.stock_ledger import StockLedgerService, StockTransactionResult

__all__ = [
    "TransactionalService",
    # Costing
    "RecipeCosting",
    "RestockCost",
    "aggregate_requirements",
    "compute_recipe_costing",
    "order_total",
    "weighted_average_cost",
    # Services
    "ItemCatalogService",
    "StockLedgerService",
    "StockTransactionResult",
    "RecipeCostingService",
    "OrderProcessorService",
    "FinancialLedgerService",
]
