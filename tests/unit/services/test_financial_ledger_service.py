"""Tests for FinancialLedgerService."""

import math
from datetime import date, datetime

import pytest

from src.core.entities.finance import FinancialRecord, FinancialSummary, RecordType
from src.core.entities.order import Order, OrderItem
from src.core.exceptions import FinancialRecordNotFoundError, ValidationError
from src.core.services.financial_ledger import FinancialLedgerService


def _assign_id(record: FinancialRecord) -> FinancialRecord:
    record.id = 1
    return record


@pytest.fixture
def ledger(tx_manager, mock_finance_store, fixed_clock):
    mock_finance_store.add_record.side_effect = _assign_id
    return FinancialLedgerService(
        transaction_manager=tx_manager,
        finance_store=mock_finance_store,
        clock=fixed_clock,
    )


class TestManualEntry:
    async def test_expense(self, ledger, fixed_clock):
        record = await ledger.record_manual_entry("expense", 45.0, description="Gas bill")
        assert record.id == 1
        assert record.record_type == RecordType.EXPENSE
        assert record.record_date == fixed_clock.now()
        assert record.order_id is None

    async def test_explicit_date(self, ledger):
        when = datetime(2024, 1, 2, 9, 30)
        record = await ledger.record_manual_entry(RecordType.INCOME, 5.0, record_date=when)
        assert record.record_date == when

    @pytest.mark.parametrize("amount", [0, -3.0, math.nan, math.inf])
    async def test_non_positive_or_non_finite_amount(self, ledger, mock_finance_store, amount):
        with pytest.raises(ValidationError):
            await ledger.record_manual_entry("expense", amount)
        mock_finance_store.add_record.assert_not_awaited()

    async def test_unknown_type(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.record_manual_entry("refund", 5.0)


class TestOrderIncome:
    async def test_single_recipe_order(self, ledger):
        order = Order(
            id=3,
            order_date=datetime(2024, 3, 15, 12),
            total_amount=20.0,
            items=[OrderItem(recipe_id=1, quantity=2, price=10.0)],
        )

        record = await ledger.post_order_income(order)

        assert record.record_type == RecordType.INCOME
        assert record.amount == 20.0
        assert record.order_id == 3
        assert record.recipe_id == 1
        assert record.quantity == 2
        assert record.record_date == order.order_date

    async def test_mixed_order_has_no_recipe(self, ledger):
        order = Order(
            id=4,
            order_date=datetime(2024, 3, 15, 12),
            total_amount=22.0,
            items=[
                OrderItem(recipe_id=1, quantity=1, price=10.0),
                OrderItem(recipe_id=2, quantity=1, price=12.0),
            ],
        )
        record = await ledger.post_order_income(order)
        assert record.recipe_id is None
        assert record.quantity == 2


class TestReporting:
    async def test_summary(self, ledger, mock_finance_store):
        mock_finance_store.summarize.return_value = FinancialSummary(
            start=date(2024, 3, 1),
            end=date(2024, 3, 31),
            total_income=100.0,
            total_expense=40.0,
        )
        summary = await ledger.summary(date(2024, 3, 1), date(2024, 3, 31))
        assert summary.net == 60.0

    async def test_inverted_range(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.summary(date(2024, 3, 31), date(2024, 3, 1))

    async def test_list_bad_type(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.list_records(record_type="refund")

    async def test_list_passes_enum(self, ledger, mock_finance_store):
        mock_finance_store.list_records.return_value = []
        await ledger.list_records(record_type="income")
        kwargs = mock_finance_store.list_records.call_args.kwargs
        assert kwargs["record_type"] == RecordType.INCOME

    async def test_get_missing(self, ledger, mock_finance_store):
        mock_finance_store.get_record.return_value = None
        with pytest.raises(FinancialRecordNotFoundError):
            await ledger.get_record(9)
