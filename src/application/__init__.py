"""
Application layer - DTOs and service factories.

This layer sits between the API and the core ledger services by:
1. Defining request/response DTOs for API contracts
2. Providing factory functions that wire stores into services
"""

from src.application.services import (
    get_financial_ledger_service,
    get_item_catalog_service,
    get_order_processor_service,
    get_recipe_costing_service,
    get_stock_ledger_service,
    reset_services,
)

__all__ = [
    "get_item_catalog_service",
    "get_recipe_costing_service",
    "get_stock_ledger_service",
    "get_financial_ledger_service",
    "get_order_processor_service",
    "reset_services",
]
