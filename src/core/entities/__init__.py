"""Core domain entities."""

from src.core.entities.finance import FinancialRecord, FinancialSummary, RecordType
from src.core.entities.item import (
    InventoryTransaction,
    Item,
    StockReconciliation,
    StockShortfall,
    TransactionType,
)
from src.core.entities.order import Order, OrderItem
from src.core.entities.recipe import Recipe, RecipeIngredient

__all__ = [
    # Items
    "Item",
    "InventoryTransaction",
    "TransactionType",
    "StockShortfall",
    "StockReconciliation",
    # Recipes
    "Recipe",
    "RecipeIngredient",
    # Orders
    "Order",
    "OrderItem",
    # Finance
    "FinancialRecord",
    "FinancialSummary",
    "RecordType",
]
