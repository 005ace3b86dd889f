"""Recipe entities."""

from datetime import datetime

from pydantic import BaseModel, Field


class RecipeIngredient(BaseModel):
    """Quantity of one item consumed by one unit of a recipe."""

    id: int | None = None
    recipe_id: int | None = None
    item_id: int
    quantity: float
    unit: str | None = None


class Recipe(BaseModel):
    """A sellable product made from items.

    ``recipe_cost``, ``profit`` and ``profit_margin`` are a stored cache of
    the costing computation over the current ingredient item costs.
    """

    id: int | None = None
    name: str
    description: str | None = None
    selling_price: float = 0.0
    recipe_cost: float = 0.0
    profit: float = 0.0
    profit_margin: float = 0.0
    image: str | None = None  # blob store reference
    version: int = 0
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
