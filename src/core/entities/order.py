"""Order entities."""

from datetime import datetime

from pydantic import BaseModel, Field


class OrderItem(BaseModel):
    """One order line; ``price`` is the recipe selling price when ordered."""

    id: int | None = None
    order_id: int | None = None
    recipe_id: int
    quantity: int
    price: float

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Order(BaseModel):
    """A completed sale of one or more recipes."""

    id: int | None = None
    order_date: datetime
    total_amount: float = 0.0
    customer_info: str | None = None
    notes: str | None = None
    items: list[OrderItem] = Field(default_factory=list)
    created_at: datetime | None = None

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.items)

    @property
    def recipe_ids(self) -> set[int]:
        return {line.recipe_id for line in self.items}
