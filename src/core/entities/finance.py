"""Financial ledger entities."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class RecordType(str, Enum):
    """Kind of financial record."""

    INCOME = "income"
    EXPENSE = "expense"


class FinancialRecord(BaseModel):
    """An immutable income or expense entry."""

    id: int | None = None
    record_type: RecordType
    amount: float
    record_date: datetime
    description: str | None = None
    recipe_id: int | None = None  # weak reference, reporting only
    quantity: int | None = None
    order_id: int | None = None
    created_at: datetime | None = None


class FinancialSummary(BaseModel):
    """Income, expense and net totals over a date range."""

    start: date | None = None
    end: date | None = None
    total_income: float = 0.0
    total_expense: float = 0.0

    @property
    def net(self) -> float:
        return self.total_income - self.total_expense
