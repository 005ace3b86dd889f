"""Data Transfer Objects for API layer.

Request DTOs: Parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from src.application.dto.requests import (
    CreateItemRequest,
    CreateRecipeRequest,
    IngredientRequest,
    ManualEntryRequest,
    OrderLineRequest,
    PlaceOrderRequest,
    RecordTransactionRequest,
    UpdateIngredientRequest,
    UpdateItemRequest,
    UpdateRecipeRequest,
)
from src.application.dto.responses import (
    ErrorResponse,
    FinancialRecordListResponse,
    FinancialRecordResponse,
    FinancialSummaryResponse,
    HealthResponse,
    InventoryTransactionResponse,
    ItemListResponse,
    ItemResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    ProviderHealthResponse,
    RecipeIngredientResponse,
    RecipeListResponse,
    RecipeResponse,
    StockReconciliationResponse,
    StockTransactionResponse,
)

__all__ = [
    # Requests
    "CreateItemRequest",
    "UpdateItemRequest",
    "RecordTransactionRequest",
    "IngredientRequest",
    "CreateRecipeRequest",
    "UpdateRecipeRequest",
    "UpdateIngredientRequest",
    "OrderLineRequest",
    "PlaceOrderRequest",
    "ManualEntryRequest",
    # Responses
    "ItemResponse",
    "ItemListResponse",
    "InventoryTransactionResponse",
    "StockTransactionResponse",
    "StockReconciliationResponse",
    "RecipeIngredientResponse",
    "RecipeResponse",
    "RecipeListResponse",
    "OrderItemResponse",
    "OrderResponse",
    "OrderListResponse",
    "FinancialRecordResponse",
    "FinancialRecordListResponse",
    "FinancialSummaryResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
