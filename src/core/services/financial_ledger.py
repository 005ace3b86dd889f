"""Financial ledger service: append-only income and expense records."""

from datetime import date, datetime

from src.config import get_logger
from src.core.entities.finance import FinancialRecord, FinancialSummary, RecordType
from src.core.entities.order import Order
from src.core.exceptions import FinancialRecordNotFoundError, ValidationError
from src.core.interfaces.clock import IClock
from src.core.interfaces.finance_store import IFinanceStore
from src.core.interfaces.transaction import ITransactionManager
from src.core.services.base import TransactionalService, require_finite

logger = get_logger(__name__)


def _check_range(start: date | None, end: date | None) -> None:
    if start is not None and end is not None and start > end:
        raise ValidationError("start", "must not be after end", start)


class FinancialLedgerService(TransactionalService):
    """Record and report income and expenses. Records are never edited."""

    def __init__(
        self,
        transaction_manager: ITransactionManager,
        finance_store: IFinanceStore,
        clock: IClock,
    ):
        super().__init__(transaction_manager, clock)
        self._finance_store = finance_store

    async def record_manual_entry(
        self,
        record_type: RecordType | str,
        amount: float,
        record_date: datetime | None = None,
        description: str | None = None,
    ) -> FinancialRecord:
        """
        Append a manual income or expense entry.

        Corrections are made with a new offsetting entry.

        Raises:
            ValidationError: Unknown record type or non-positive amount.
        """
        try:
            record_type = RecordType(record_type)
        except ValueError:
            raise ValidationError(
                "record_type", "must be 'income' or 'expense'", record_type
            ) from None
        require_finite("amount", amount)
        if not amount > 0:
            raise ValidationError("amount", "must be positive", amount)

        record = FinancialRecord(
            record_type=record_type,
            amount=amount,
            record_date=record_date or self._now(),
            description=description,
        )
        record = await self._run_atomic(self._finance_store.add_record, record)
        logger.info(
            "manual_entry_recorded",
            record_id=record.id,
            type=record_type.value,
            amount=amount,
        )
        return record

    async def post_order_income(self, order: Order) -> FinancialRecord:
        """Post the single income record for a completed order."""
        recipe_ids = order.recipe_ids
        record = FinancialRecord(
            record_type=RecordType.INCOME,
            amount=order.total_amount,
            record_date=order.order_date,
            description=f"Order #{order.id}",
            recipe_id=next(iter(recipe_ids)) if len(recipe_ids) == 1 else None,
            quantity=order.total_quantity,
            order_id=order.id,
        )
        record = await self._run_atomic(self._finance_store.add_record, record)
        logger.info(
            "order_income_posted",
            record_id=record.id,
            order_id=order.id,
            amount=record.amount,
        )
        return record

    async def get_record(self, record_id: int) -> FinancialRecord:
        record = await self._finance_store.get_record(record_id)
        if record is None:
            raise FinancialRecordNotFoundError(record_id)
        return record

    async def list_records(
        self,
        start: date | None = None,
        end: date | None = None,
        record_type: RecordType | str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[FinancialRecord]:
        """Records dated within [start, end], newest first."""
        _check_range(start, end)
        if record_type is not None:
            try:
                record_type = RecordType(record_type)
            except ValueError:
                raise ValidationError(
                    "record_type", "must be 'income' or 'expense'", record_type
                ) from None
        return await self._finance_store.list_records(
            start=start, end=end, record_type=record_type, limit=limit, offset=offset
        )

    async def summary(
        self, start: date | None = None, end: date | None = None
    ) -> FinancialSummary:
        """Income, expense and net over [start, end]."""
        _check_range(start, end)
        return await self._finance_store.summarize(start=start, end=end)
