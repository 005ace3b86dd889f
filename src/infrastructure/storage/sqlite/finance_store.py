"""SQLite implementation of the financial ledger."""

from datetime import date, datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.finance import FinancialRecord, FinancialSummary, RecordType
from src.core.interfaces.finance_store import IFinanceStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from src.infrastructure.storage.sqlite.order_store import date_range_clause

logger = get_logger(__name__)


class SQLiteFinanceStore(IFinanceStore):
    """Append-only storage for income and expense records."""

    async def add_record(self, record: FinancialRecord) -> FinancialRecord:
        record.created_at = datetime.now()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO financial_records (
                    record_type, amount, record_date, description,
                    recipe_id, quantity, order_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.record_type.value,
                    record.amount,
                    record.record_date.isoformat(),
                    record.description,
                    record.recipe_id,
                    record.quantity,
                    record.order_id,
                    record.created_at.isoformat(),
                ),
            )
            record.id = cursor.lastrowid
            logger.debug(
                "financial_record_inserted",
                record_id=record.id,
                type=record.record_type.value,
            )
            return record

    async def get_record(self, record_id: int) -> FinancialRecord | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM financial_records WHERE id = ?", (record_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    async def list_records(
        self,
        start: date | None = None,
        end: date | None = None,
        record_type: RecordType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[FinancialRecord]:
        conditions, params = date_range_clause("record_date", start, end)
        if record_type is not None:
            conditions.append("record_type = ?")
            params.append(record_type.value)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM financial_records
                {where}
                ORDER BY record_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    async def summarize(
        self, start: date | None = None, end: date | None = None
    ) -> FinancialSummary:
        """Sum income and expense amounts over the range."""
        conditions, params = date_range_clause("record_date", start, end)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT
                    COALESCE(SUM(CASE WHEN record_type = 'income' THEN amount END), 0),
                    COALESCE(SUM(CASE WHEN record_type = 'expense' THEN amount END), 0)
                FROM financial_records
                {where}
                """,
                params,
            )
            row = await cursor.fetchone()
            return FinancialSummary(
                start=start,
                end=end,
                total_income=float(row[0]) if row else 0.0,
                total_expense=float(row[1]) if row else 0.0,
            )

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> FinancialRecord:
        record_date = datetime.now()
        if row["record_date"]:
            try:
                record_date = datetime.fromisoformat(row["record_date"])
            except (ValueError, TypeError):
                pass

        created_at = None
        if row["created_at"]:
            try:
                created_at = datetime.fromisoformat(row["created_at"])
            except (ValueError, TypeError):
                pass

        return FinancialRecord(
            id=row["id"],
            record_type=RecordType(row["record_type"]),
            amount=float(row["amount"]),
            record_date=record_date,
            description=row["description"],
            recipe_id=row["recipe_id"],
            quantity=row["quantity"],
            order_id=row["order_id"],
            created_at=created_at,
        )
