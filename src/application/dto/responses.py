"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization. Derived values
(stock value, line totals, net) are included so clients never recompute
them.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

# --- Items / stock ---


class ItemResponse(BaseModel):
    """Item with its current stock position."""

    id: int
    name: str
    category: str | None = None
    quantity: float
    unit: str | None = None
    cost: float = Field(..., description="Stock value at the last restock")
    cost_per_unit: float = Field(..., description="Weighted average unit cost")
    stock_value: float = Field(..., description="quantity * cost_per_unit")
    expiration_date: date | None = None
    location: str | None = None
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ItemListResponse(BaseModel):
    """Page of items."""

    items: list[ItemResponse]
    total: int


class InventoryTransactionResponse(BaseModel):
    """One stock movement."""

    id: int
    item_id: int
    transaction_type: str
    change_quantity: float
    signed_quantity: float
    cost: float | None = None
    transaction_date: datetime
    notes: str | None = None
    created_at: datetime | None = None


class StockTransactionResponse(BaseModel):
    """Result of recording a stock movement."""

    item: ItemResponse
    transaction: InventoryTransactionResponse
    recomputed_recipe_ids: list[int] = Field(
        default=[], description="Recipes re-costed because the unit cost changed"
    )


class StockReconciliationResponse(BaseModel):
    """Stored quantity compared with the transaction log."""

    item_id: int
    recorded_quantity: float
    ledger_quantity: float
    consistent: bool


# --- Recipes ---


class RecipeIngredientResponse(BaseModel):
    id: int
    recipe_id: int
    item_id: int
    quantity: float
    unit: str | None = None


class RecipeResponse(BaseModel):
    """Recipe with its cached costing."""

    id: int
    name: str
    description: str | None = None
    selling_price: float
    recipe_cost: float
    profit: float
    profit_margin: float = Field(..., description="Percent of selling price")
    has_image: bool = False
    version: int
    ingredients: list[RecipeIngredientResponse] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RecipeListResponse(BaseModel):
    recipes: list[RecipeResponse]
    total: int


# --- Orders ---


class OrderItemResponse(BaseModel):
    id: int
    recipe_id: int
    quantity: int
    price: float = Field(..., description="Recipe selling price when ordered")
    line_total: float


class OrderResponse(BaseModel):
    """Placed order with its lines."""

    id: int
    order_date: datetime
    total_amount: float
    total_quantity: int
    customer_info: str | None = None
    notes: str | None = None
    items: list[OrderItemResponse] = []
    created_at: datetime | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int


# --- Finance ---


class FinancialRecordResponse(BaseModel):
    id: int
    record_type: str
    amount: float
    record_date: datetime
    description: str | None = None
    recipe_id: int | None = None
    quantity: int | None = None
    order_id: int | None = None
    created_at: datetime | None = None


class FinancialRecordListResponse(BaseModel):
    records: list[FinancialRecordResponse]
    total: int


class FinancialSummaryResponse(BaseModel):
    """Income, expense and net over a date range."""

    start: date | None = None
    end: date | None = None
    total_income: float
    total_expense: float
    net: float


# --- Health / errors ---


class ProviderHealthResponse(BaseModel):
    """Health of a backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    schema_version: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict[str, Any] | None = Field(
        default=None, description="Structured error details, e.g. stock shortfalls"
    )
    path: str | None = Field(default=None, description="Request path")
