"""Item catalog and stock ledger entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class TransactionType(str, Enum):
    """Direction of a stock transaction."""

    IN = "in"
    OUT = "out"


class Item(BaseModel):
    """A stocked ingredient or good.

    ``quantity``, ``cost`` and ``cost_per_unit`` are written only through the
    stock ledger; ``cost`` is the stock value at the last restock.
    """

    id: int | None = None
    name: str
    category: str | None = None
    quantity: float = 0.0
    unit: str | None = None
    cost: float = 0.0
    cost_per_unit: float = 0.0
    expiration_date: date | None = None
    location: str | None = None
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def stock_value(self) -> float:
        """Current stock valued at the weighted average unit cost."""
        return self.quantity * self.cost_per_unit


class InventoryTransaction(BaseModel):
    """An immutable stock movement.

    ``change_quantity`` is stored as a positive magnitude; the sign comes
    from ``transaction_type``.
    """

    id: int | None = None
    item_id: int
    transaction_type: TransactionType
    change_quantity: float
    cost: float | None = None  # total cost of an "in" restock
    transaction_date: datetime
    notes: str | None = None
    created_at: datetime | None = None

    @property
    def signed_quantity(self) -> float:
        if self.transaction_type == TransactionType.OUT:
            return -self.change_quantity
        return self.change_quantity


class StockShortfall(BaseModel):
    """Requested vs available quantity for an item that cannot cover a request."""

    item_id: int
    item_name: str | None = None
    required: float
    available: float

    @property
    def missing(self) -> float:
        return self.required - self.available


class StockReconciliation(BaseModel):
    """Recorded item quantity compared with the sum of its transactions."""

    item_id: int
    recorded_quantity: float
    ledger_quantity: float

    @property
    def is_consistent(self) -> bool:
        return abs(self.recorded_quantity - self.ledger_quantity) < 1e-6
