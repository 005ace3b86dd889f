"""Request DTOs for API endpoints.

Pydantic v2 models for API request parsing. Business rules (positive
quantities, non-negative costs) are enforced by the services so every
rule violation surfaces with the same error shape.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

# --- Items / stock ---


class CreateItemRequest(BaseModel):
    """Request to add an item to the catalog."""

    name: str = Field(..., description="Item name", examples=["Flour"])
    category: str | None = Field(default=None, examples=["dry goods"])
    unit: str | None = Field(default=None, description="Unit of measure", examples=["kg"])
    quantity: float = Field(default=0.0, description="Opening stock")
    cost: float = Field(default=0.0, description="Total cost of the opening stock")
    expiration_date: date | None = Field(default=None)
    location: str | None = Field(default=None, examples=["pantry"])


class UpdateItemRequest(BaseModel):
    """Descriptive item fields; omitted fields are left unchanged.

    Stock and cost fields are not accepted here; use a stock transaction.
    """

    name: str | None = None
    category: str | None = None
    unit: str | None = None
    expiration_date: date | None = None
    location: str | None = None


class RecordTransactionRequest(BaseModel):
    """Request to move stock in or out of an item."""

    transaction_type: str = Field(
        ..., description="'in' to restock, 'out' to use or sell", examples=["in", "out"]
    )
    change_quantity: float = Field(..., description="Positive quantity moved")
    cost: float | None = Field(
        default=None,
        description="Total cost of an 'in' restock; defaults to the current unit cost",
    )
    transaction_date: datetime | None = Field(default=None, description="Defaults to now")
    notes: str | None = None


# --- Recipes ---


class IngredientRequest(BaseModel):
    """One ingredient line of a recipe."""

    item_id: int
    quantity: float = Field(..., description="Item quantity per unit of the recipe")
    unit: str | None = Field(default=None, description="Defaults to the item's unit")


class CreateRecipeRequest(BaseModel):
    """Request to create a recipe."""

    name: str = Field(..., examples=["Pancakes"])
    description: str | None = None
    selling_price: float = Field(..., description="Price per unit sold")
    ingredients: list[IngredientRequest] = Field(default_factory=list)


class UpdateRecipeRequest(BaseModel):
    """Recipe fields; omitted fields are left unchanged."""

    name: str | None = None
    description: str | None = None
    selling_price: float | None = None


class UpdateIngredientRequest(BaseModel):
    """Ingredient fields; omitted fields are left unchanged."""

    quantity: float | None = None
    unit: str | None = None


# --- Orders ---


class OrderLineRequest(BaseModel):
    """One recipe and how many units of it were sold."""

    recipe_id: int
    quantity: int


class PlaceOrderRequest(BaseModel):
    """Request to place an order."""

    items: list[OrderLineRequest] = Field(..., description="Order lines")
    order_date: datetime | None = Field(default=None, description="Defaults to now")
    customer_info: str | None = None
    notes: str | None = None


# --- Finance ---


class ManualEntryRequest(BaseModel):
    """Request to record a manual income or expense."""

    record_type: str = Field(..., examples=["income", "expense"])
    amount: float = Field(..., description="Positive amount")
    record_date: datetime | None = Field(default=None, description="Defaults to now")
    description: str | None = None
