"""Abstract interface for financial record storage."""

from abc import ABC, abstractmethod
from datetime import date

from src.core.entities.finance import FinancialRecord, FinancialSummary, RecordType


class IFinanceStore(ABC):
    """Interface for the append-only financial ledger."""

    @abstractmethod
    async def add_record(self, record: FinancialRecord) -> FinancialRecord:
        """Append a financial record."""
        pass

    @abstractmethod
    async def get_record(self, record_id: int) -> FinancialRecord | None:
        """Get a financial record by ID."""
        pass

    @abstractmethod
    async def list_records(
        self,
        start: date | None = None,
        end: date | None = None,
        record_type: RecordType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[FinancialRecord]:
        """List records in an inclusive date range, newest first."""
        pass

    @abstractmethod
    async def summarize(
        self, start: date | None = None, end: date | None = None
    ) -> FinancialSummary:
        """Total income and expense in an inclusive date range."""
        pass
